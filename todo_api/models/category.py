
from sqlalchemy import Column, String

from todo_api.db.base import Base, BigIntId, SoftDeleteMixin, TimestampMixin


class Category(TimestampMixin, SoftDeleteMixin, Base):
    """Category grouping zero or more todos."""

    __tablename__ = "categories"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
