"""
Authentication endpoints.

Handles the Google OAuth2 handshake, session creation and logout.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from todo_api.core.config import settings
from todo_api.core.errors import AppError, ValidationError
from todo_api.core.google_oauth import GoogleOAuthClient
from todo_api.core.security import create_state_token, sign_session_id, unsign_session_id, verify_token
from todo_api.db.session import get_db
from todo_api.dependencies.session import get_oauth_client, get_session_store, require_user
from todo_api.models.user import User
from todo_api.schemas.user import UserResponse
from todo_api.services.auth_service import AuthService
from todo_api.services.session_service import SessionAdapter, SessionStore

# Set up logger
logger = logging.getLogger(__name__)

auth_router = APIRouter()


def set_session_cookie(response: RedirectResponse, session_id: str) -> None:
    """Attach the signed session id to a response."""
    response.set_cookie(
        key=settings.session_cookie_name,
        value=sign_session_id(session_id),
        max_age=settings.session_max_age_seconds,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


@auth_router.get("/google", response_class=RedirectResponse)
async def google_auth(oauth_client: GoogleOAuthClient = Depends(get_oauth_client)):
    """
    Initiate Google OAuth2 login flow.

    Generates a signed state token for CSRF protection, remembers it in a
    short-lived cookie and redirects to Google.
    """
    if not oauth_client.is_configured:
        raise AppError("Google OAuth2 not configured")

    state = create_state_token()
    response = RedirectResponse(url=oauth_client.authorization_url(state), status_code=status.HTTP_302_FOUND)
    response.set_cookie(
        key=settings.oauth_state_cookie_name,
        value=state,
        max_age=settings.oauth_state_expire_minutes * 60,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    return response


@auth_router.get("/google/callback", response_class=RedirectResponse)
async def google_auth_callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    oauth_client: GoogleOAuthClient = Depends(get_oauth_client),
    store: SessionStore = Depends(get_session_store),
    db: AsyncSession = Depends(get_db)
):
    """
    Handle Google OAuth2 callback.

    Verifies the state and ID token, creates or refreshes the user, then
    establishes a session and redirects back into the application.

    Args:
        code: Authorization code from Google.
        state: State parameter for CSRF protection.
        error: Error from Google OAuth.

    Returns:
        RedirectResponse: Redirect carrying the session cookie.
    """
    if error:
        raise ValidationError(f"OAuth error: {error}")

    if not code:
        raise ValidationError("Authorization code missing")

    expected_state = request.cookies.get(settings.oauth_state_cookie_name)
    if not state or state != expected_state or verify_token(state) is None:
        logger.warning("OAuth callback with invalid state")
        raise ValidationError("Invalid OAuth state")

    if not oauth_client.is_configured:
        raise AppError("Google OAuth2 not properly configured")

    profile = await oauth_client.fetch_profile(code)
    user = await AuthService.authenticate(profile, db)

    session_id = await store.create(SessionAdapter.serialize_user(user))

    response = RedirectResponse(url=settings.login_success_redirect, status_code=status.HTTP_302_FOUND)
    set_session_cookie(response, session_id)
    response.delete_cookie(settings.oauth_state_cookie_name)
    logger.info(f"Successfully established session for user: {user.id}")
    return response


@auth_router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(require_user)):
    """
    Return the authenticated user.
    """
    return current_user


@auth_router.post("/logout", response_class=RedirectResponse)
async def logout(
    request: Request,
    store: SessionStore = Depends(get_session_store)
):
    """
    Destroy the current session and clear the session cookie.
    """
    cookie_value = request.cookies.get(settings.session_cookie_name)
    session_id = unsign_session_id(cookie_value) if cookie_value else None
    if session_id:
        await store.destroy(session_id)

    response = RedirectResponse(url=settings.unauthenticated_redirect_path, status_code=status.HTTP_302_FOUND)
    response.delete_cookie(settings.session_cookie_name)
    return response
