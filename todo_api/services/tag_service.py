
import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from todo_api.core.errors import NotFoundError, ValidationError
from todo_api.db.session import commit_or_rollback
from todo_api.models.tag import Tag


logger = logging.getLogger(__name__)


class TagService:
    """Service class for tag operations."""

    @staticmethod
    async def create_tag(name: str, db: AsyncSession) -> Tag:
        if not name or not name.strip():
            raise ValidationError("Tag name is required")

        tag = Tag(name=name.strip())
        db.add(tag)
        await commit_or_rollback(db)

        logger.info(f"Created tag {tag.id}")
        return tag

    @staticmethod
    async def list_tags(db: AsyncSession) -> List[Tag]:
        result = await db.execute(select(Tag).order_by(Tag.name, Tag.id))
        return list(result.scalars().all())

    @staticmethod
    async def get_tag(tag_id: int, db: AsyncSession) -> Tag:
        result = await db.execute(select(Tag).where(Tag.id == tag_id))
        tag = result.scalars().first()
        if not tag:
            raise NotFoundError(f"Tag {tag_id} not found")
        return tag

    @staticmethod
    async def delete_tag(tag_id: int, db: AsyncSession) -> Tag:
        """
        Soft-delete a tag.

        Join rows stay in place; the tag simply stops showing up on todos.
        """
        tag = await TagService.get_tag(tag_id, db)
        tag.soft_delete()
        await commit_or_rollback(db)

        logger.info(f"Deleted tag {tag_id}")
        return tag
