
from sqlalchemy import Column, String

from todo_api.db.base import Base, BigIntId, SoftDeleteMixin, TimestampMixin


class Tag(TimestampMixin, SoftDeleteMixin, Base):
    """Free-form label attached to todos through ``todo_tags``."""

    __tablename__ = "tags"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
