
import asyncio
import logging

from sqlalchemy import case, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from todo_api.core import messages
from todo_api.core.errors import IdentityDataMissing, IdentityPersistenceFailure, UnauthorizedError
from todo_api.core.security import make_unusable_password
from todo_api.db.base import utcnow
from todo_api.models.user import User
from todo_api.schemas.user import ProviderProfile


logger = logging.getLogger(__name__)


def _upsert_user_statement(dialect_name: str, values: dict, now):
    """
    Build a single INSERT ... ON CONFLICT statement keyed on ``google_id``.

    New subjects are inserted with ``values``; live known subjects only get
    their ``last_login`` and ``updated_at`` refreshed. Deleted accounts are
    left untouched.
    """
    if dialect_name == "mysql":
        from sqlalchemy.dialects.mysql import insert

        live = User.deleted_at.is_(None)
        return insert(User).values(**values).on_duplicate_key_update(
            last_login=case((live, now), else_=User.last_login),
            updated_at=case((live, now), else_=User.updated_at),
        )

    if dialect_name == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect_name == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        raise NotImplementedError(f"User upsert is not supported on {dialect_name}")

    return insert(User).values(**values).on_conflict_do_update(
        index_elements=[User.google_id],
        set_={"last_login": now, "updated_at": now},
        where=User.deleted_at.is_(None),
    )


class AuthService:
    """Service turning a verified identity provider profile into a User."""

    @staticmethod
    async def authenticate(profile: ProviderProfile, db: AsyncSession) -> User:
        """
        Resolve or create the user behind an identity provider profile.

        Unknown subjects get a new user built from the display name, first
        email and first photo, written with one upsert so concurrent callbacks
        for the same subject cannot create duplicate rows. Known subjects only
        get ``last_login`` refreshed. A deleted account is rejected without
        any write.

        Args:
            profile: Verified provider profile.
            db: Database session.

        Returns:
            User: The created or refreshed user.

        Raises:
            IdentityDataMissing: If the profile carries no email address.
            IdentityPersistenceFailure: If the store rejects the write.
            UnauthorizedError: If the subject belongs to a deleted account.
        """
        email = profile.primary_email
        if not email:
            logger.error(f"No email in identity profile for subject {profile.id}")
            raise IdentityDataMissing()

        logger.info(f"OAuth callback for subject {profile.id} ({profile.display_name})")

        try:
            result = await db.execute(
                select(User.id, User.deleted_at)
                .where(User.google_id == profile.id)
                .execution_options(include_deleted=True)
            )
            known = result.first()
            if known is not None and known.deleted_at is not None:
                logger.warning(f"Login attempt for deleted user {known.id}")
                raise UnauthorizedError(messages.ACCOUNT_DISABLED)

            now = utcnow()
            if known is None:
                # argon2 is CPU-bound; keep it off the event loop
                password = await asyncio.to_thread(make_unusable_password)
                stmt = _upsert_user_statement(
                    db.get_bind().dialect.name,
                    {
                        "google_id": profile.id,
                        "name": profile.display_name,
                        "email": email,
                        "avatar": profile.primary_photo,
                        "password": password,
                        "last_login": now,
                        "created_at": now,
                        "updated_at": now,
                    },
                    now,
                )
            else:
                stmt = (
                    update(User)
                    .where(User.id == known.id, User.deleted_at.is_(None))
                    .values(last_login=now, updated_at=now)
                    .execution_options(synchronize_session=False)
                )
            await db.execute(stmt)
            await db.commit()

            result = await db.execute(
                select(User)
                .where(User.google_id == profile.id)
                .execution_options(include_deleted=True, populate_existing=True)
            )
            user = result.scalars().one()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to persist user for subject {profile.id}: {e}")
            raise IdentityPersistenceFailure(detail=str(e)) from e

        if user.is_deleted:
            logger.warning(f"Login attempt for deleted user {user.id}")
            raise UnauthorizedError(messages.ACCOUNT_DISABLED)

        logger.info(f"Authenticated user {user.id}")
        return user
