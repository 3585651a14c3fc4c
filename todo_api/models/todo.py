
from sqlalchemy import Boolean, Column, ForeignKey, String
from sqlalchemy.orm import relationship

from todo_api.db.base import Base, BigIntId, SoftDeleteMixin, TimestampMixin
from todo_api.models.category import Category
from todo_api.models.tag import Tag
from todo_api.models.todo_tag import TodoTag
from todo_api.models.user import User


class Todo(TimestampMixin, SoftDeleteMixin, Base):
    """
    Todo item owned by a single user.

    Ownership (``user_id``) is fixed at creation. The category is optional
    and tags are linked through the ``todo_tags`` join table.
    """

    __tablename__ = "todos"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    completed = Column(Boolean, default=False, nullable=False)
    user_id = Column(BigIntId, ForeignKey("users.id"), nullable=False, index=True)
    category_id = Column(BigIntId, ForeignKey("categories.id"), nullable=True, index=True)

    # Relationships
    user = relationship(User, backref="todos")
    category = relationship(Category, backref="todos")
    tags = relationship(
        Tag,
        secondary=TodoTag.__table__,
        lazy="selectin",
        order_by=Tag.id,
        viewonly=True,
    )
