"""
Session and authorization dependencies.
"""

import logging
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from todo_api.core.config import settings
from todo_api.core.errors import UnauthorizedError
from todo_api.core.google_oauth import GoogleOAuthClient
from todo_api.core.security import unsign_session_id
from todo_api.db.session import get_db
from todo_api.models.user import User
from todo_api.services.session_service import SessionAdapter, SessionData, SessionStore


logger = logging.getLogger(__name__)


def get_session_store(request: Request) -> SessionStore:
    """Session store installed on the application during startup."""
    return request.app.state.session_store


def get_oauth_client() -> GoogleOAuthClient:
    return GoogleOAuthClient()


async def get_session(
    request: Request,
    store: SessionStore = Depends(get_session_store),
) -> Optional[SessionData]:
    """
    Load the session referenced by the request's session cookie.

    Missing cookies, bad signatures and expired sessions all yield None.
    """
    cookie_value = request.cookies.get(settings.session_cookie_name)
    if not cookie_value:
        return None

    session_id = unsign_session_id(cookie_value)
    if not session_id:
        logger.warning("Rejected session cookie with invalid signature")
        return None

    session = await store.load(session_id)
    request.state.session = session
    return session


async def get_session_user(
    request: Request,
    session: Optional[SessionData] = Depends(get_session),
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """
    Attach the session's user to the request, if there is one.

    A session pointing at a deleted user is treated as unauthenticated
    rather than failing the request.
    """
    user = None
    if session:
        user = await SessionAdapter.deserialize_user(session.user_id, db)

    request.state.user = user
    return user


async def require_user(
    session: Optional[SessionData] = Depends(get_session),
    user: Optional[User] = Depends(get_session_user),
) -> User:
    """
    Gate for routes that need an authenticated user.

    Raises:
        UnauthorizedError: Turned into a redirect to the landing path.
    """
    if user is None or session is None or not session.authenticated:
        raise UnauthorizedError()
    return user
