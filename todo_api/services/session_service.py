"""
Server-side sessions.

Session state lives in Redis under ``<prefix><session_id>``; the client only
holds the signed session id in a cookie. The payload is identifier-only, so
every request re-fetches the user from the database.
"""

import json
import logging
from dataclasses import dataclass
from typing import Optional

from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from todo_api.core.security import generate_session_id
from todo_api.models.user import User


logger = logging.getLogger(__name__)


@dataclass
class SessionData:
    """Decoded session payload."""
    session_id: str
    user_id: int
    authenticated: bool = True


class SessionStore:
    """
    Redis-backed session store.

    Entries expire after ``ttl_seconds`` of inactivity: every successful
    ``load`` pushes the expiry forward. Expiry itself is left to Redis.
    """

    def __init__(self, redis: Redis, ttl_seconds: int, key_prefix: str = "sess:"):
        self.redis = redis
        self.ttl_seconds = ttl_seconds
        self.key_prefix = key_prefix

    def _key(self, session_id: str) -> str:
        return f"{self.key_prefix}{session_id}"

    async def create(self, user_id: int) -> str:
        """
        Store a new authenticated session for a user.

        Returns:
            str: The new session id.
        """
        session_id = generate_session_id()
        payload = json.dumps({"user_id": user_id, "authenticated": True})
        await self.redis.set(self._key(session_id), payload, ex=self.ttl_seconds)
        logger.info(f"Created session for user {user_id}")
        return session_id

    async def load(self, session_id: str) -> Optional[SessionData]:
        """
        Load a session and refresh its expiry.

        Returns:
            Optional[SessionData]: The session, or None if missing, expired or unreadable.
        """
        key = self._key(session_id)
        raw = await self.redis.get(key)
        if raw is None:
            return None

        try:
            payload = json.loads(raw)
            data = SessionData(
                session_id=session_id,
                user_id=int(payload["user_id"]),
                authenticated=bool(payload.get("authenticated", False)),
            )
        except (ValueError, KeyError, TypeError):
            logger.warning("Discarding unreadable session payload")
            await self.redis.delete(key)
            return None

        await self.redis.expire(key, self.ttl_seconds)
        return data

    async def destroy(self, session_id: str) -> None:
        """Remove a session."""
        await self.redis.delete(self._key(session_id))
        logger.info("Destroyed session")


class SessionAdapter:
    """
    Converts between a user and what the session stores about it.

    Only the user id is stored; the user is reloaded per request.
    """

    @staticmethod
    def serialize_user(user: User) -> int:
        return user.id

    @staticmethod
    async def deserialize_user(user_id: int, db: AsyncSession) -> Optional[User]:
        """
        Reload a live user by id.

        Returns:
            Optional[User]: The user, or None if missing or logically deleted.
        """
        result = await db.execute(select(User).where(User.id == user_id))
        user = result.scalars().first()
        if not user:
            logger.warning(f"Session references missing user {user_id}")
        return user
