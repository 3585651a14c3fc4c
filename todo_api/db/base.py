"""
Declarative base and the shared column mixins.

Every soft-deletable entity inherits ``SoftDeleteMixin``. A ``do_orm_execute``
hook on the ORM session adds ``deleted_at IS NULL`` to every SELECT that
touches such an entity (relationship loads included). Pass the execution
option ``include_deleted=True`` to read logically deleted rows.
"""

from datetime import datetime, timezone

from sqlalchemy import BigInteger, Column, DateTime, Integer, event
from sqlalchemy.orm import DeclarativeBase, Session, with_loader_criteria


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# SQLite only autoincrements INTEGER PRIMARY KEY columns
BigIntId = BigInteger().with_variant(Integer, "sqlite")


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


class SoftDeleteMixin:
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def soft_delete(self) -> None:
        """Mark the row as logically deleted."""
        if self.deleted_at is None:
            self.deleted_at = utcnow()


@event.listens_for(Session, "do_orm_execute")
def _exclude_soft_deleted(execute_state):
    if (
        execute_state.is_select
        and not execute_state.is_column_load
        and not execute_state.is_relationship_load
        and not execute_state.execution_options.get("include_deleted", False)
    ):
        execute_state.statement = execute_state.statement.options(
            with_loader_criteria(
                SoftDeleteMixin,
                lambda cls: cls.deleted_at.is_(None),
                include_aliases=True,
            )
        )
