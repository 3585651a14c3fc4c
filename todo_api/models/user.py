
from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import deferred

from todo_api.db.base import Base, BigIntId, SoftDeleteMixin, TimestampMixin


class User(TimestampMixin, SoftDeleteMixin, Base):
    """
    User model representing a Google authenticated user.

    Rows are created and refreshed only by the OAuth callback, keyed on the
    provider subject id. The password column is deferred so default reads
    never load it.
    """

    __tablename__ = "users"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    google_id = Column(String(255), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = deferred(Column(String(255), nullable=False))
    name = Column(String(255), nullable=True)
    avatar = Column(String(1024), nullable=True)
    last_login = Column(DateTime(timezone=True), nullable=True)
