
from sqlalchemy import Column, ForeignKey, UniqueConstraint

from todo_api.db.base import Base, BigIntId, TimestampMixin


class TodoTag(TimestampMixin, Base):
    """
    Join row linking a todo to a tag.

    A todo may be linked to a given tag at most once. Rows go away only when
    either side is hard deleted; soft deletes leave them in place.
    """

    __tablename__ = "todo_tags"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    todo_id = Column(
        BigIntId,
        ForeignKey("todos.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
        index=True,
    )
    tag_id = Column(
        BigIntId,
        ForeignKey("tags.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
        index=True,
    )

    __table_args__ = (
        UniqueConstraint("todo_id", "tag_id", name="unique_todo_tag"),
    )
