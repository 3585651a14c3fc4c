
import logging
from typing import List

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from todo_api.core.errors import NotFoundError, ValidationError
from todo_api.db.base import utcnow
from todo_api.db.session import commit_or_rollback
from todo_api.models.category import Category
from todo_api.models.todo import Todo


logger = logging.getLogger(__name__)


class CategoryService:
    """Service class for category operations."""

    @staticmethod
    async def create_category(name: str, db: AsyncSession) -> Category:
        """
        Create a category.

        Args:
            name: Category name.
            db: Database session.

        Returns:
            Category: The created category.
        """
        if not name or not name.strip():
            raise ValidationError("Category name is required")

        category = Category(name=name.strip())
        db.add(category)
        await commit_or_rollback(db)

        logger.info(f"Created category {category.id}")
        return category

    @staticmethod
    async def list_categories(db: AsyncSession) -> List[Category]:
        result = await db.execute(select(Category).order_by(Category.name, Category.id))
        return list(result.scalars().all())

    @staticmethod
    async def get_category(category_id: int, db: AsyncSession) -> Category:
        """
        Get a live category.

        Raises:
            NotFoundError: If the category does not exist or is deleted.
        """
        result = await db.execute(select(Category).where(Category.id == category_id))
        category = result.scalars().first()
        if not category:
            raise NotFoundError(f"Category {category_id} not found")
        return category

    @staticmethod
    async def delete_category(category_id: int, db: AsyncSession) -> Category:
        """
        Soft-delete a category and detach it from its todos.

        Todos are kept; their ``category_id`` is cleared in the same commit
        so nothing points at a deleted category.

        Args:
            category_id: Category to delete.
            db: Database session.

        Returns:
            Category: The deleted category.
        """
        category = await CategoryService.get_category(category_id, db)
        category.soft_delete()
        await db.execute(
            update(Todo)
            .where(Todo.category_id == category_id)
            .values(category_id=None, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        await commit_or_rollback(db)

        logger.info(f"Deleted category {category_id}")
        return category
