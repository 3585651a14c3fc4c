
import logging
from typing import Iterable, List, Optional

from sqlalchemy import delete, insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from todo_api.core.errors import ForbiddenError, NotFoundError, PersistenceError, ValidationError
from todo_api.db.base import utcnow
from todo_api.db.session import commit_or_rollback
from todo_api.models.category import Category
from todo_api.models.tag import Tag
from todo_api.models.todo import Todo
from todo_api.models.todo_tag import TodoTag


logger = logging.getLogger(__name__)


def _unique_ids(ids: Iterable[int]) -> List[int]:
    """De-duplicate ids, keeping first-seen order."""
    return list(dict.fromkeys(ids))


class TodoService:
    """Service class for todo operations."""

    @staticmethod
    async def _ensure_category(category_id: int, db: AsyncSession) -> Category:
        result = await db.execute(select(Category).where(Category.id == category_id))
        category = result.scalars().first()
        if not category:
            raise NotFoundError(f"Category {category_id} not found")
        return category

    @staticmethod
    async def _ensure_tags(tag_ids: List[int], db: AsyncSession) -> None:
        if not tag_ids:
            return
        result = await db.execute(select(Tag.id).where(Tag.id.in_(tag_ids)))
        found = set(result.scalars().all())
        missing = [tag_id for tag_id in tag_ids if tag_id not in found]
        if missing:
            raise NotFoundError(f"Tags not found: {', '.join(str(t) for t in missing)}")

    @staticmethod
    async def _load(todo_id: int, db: AsyncSession, include_deleted: bool = False) -> Optional[Todo]:
        result = await db.execute(
            select(Todo)
            .where(Todo.id == todo_id)
            .execution_options(include_deleted=include_deleted, populate_existing=True)
        )
        return result.scalars().first()

    @staticmethod
    async def _replace_tags(todo_id: int, tag_ids: List[int], db: AsyncSession) -> None:
        """
        Make the todo's join rows match ``tag_ids`` exactly.

        Stale pairs are deleted and missing pairs inserted in the caller's
        transaction; nothing is committed here.
        """
        result = await db.execute(select(TodoTag.tag_id).where(TodoTag.todo_id == todo_id))
        current = set(result.scalars().all())
        wanted = set(tag_ids)

        stale = current - wanted
        if stale:
            await db.execute(
                delete(TodoTag).where(TodoTag.todo_id == todo_id, TodoTag.tag_id.in_(stale))
            )

        added = [tag_id for tag_id in tag_ids if tag_id not in current]
        if added:
            await db.execute(
                insert(TodoTag),
                [{"todo_id": todo_id, "tag_id": tag_id} for tag_id in added],
            )

    @staticmethod
    async def get_todo(
        user_id: int,
        todo_id: int,
        db: AsyncSession,
        include_deleted: bool = False
    ) -> Todo:
        """
        Get a todo owned by the user.

        Args:
            user_id: Requesting user.
            todo_id: Todo to fetch.
            db: Database session.
            include_deleted: Also return logically deleted todos.

        Returns:
            Todo: The todo with its live tags loaded.

        Raises:
            NotFoundError: If the todo does not exist (or is deleted).
            ForbiddenError: If the todo belongs to another user.
        """
        todo = await TodoService._load(todo_id, db, include_deleted=include_deleted)
        if not todo:
            raise NotFoundError(f"Todo {todo_id} not found")
        if todo.user_id != user_id:
            logger.warning(f"User {user_id} tried to access todo {todo_id} owned by {todo.user_id}")
            raise ForbiddenError()
        return todo

    @staticmethod
    async def list_todos(
        user_id: int,
        db: AsyncSession,
        category_id: Optional[int] = None,
        tag_id: Optional[int] = None,
        include_deleted: bool = False
    ) -> List[Todo]:
        """
        List a user's todos, newest first.

        Args:
            user_id: Owner of the todos.
            db: Database session.
            category_id: Only todos in this category.
            tag_id: Only todos linked to this tag.
            include_deleted: Also return logically deleted todos.

        Returns:
            List[Todo]: Matching todos.
        """
        query = select(Todo).where(Todo.user_id == user_id)
        if category_id is not None:
            query = query.where(Todo.category_id == category_id)
        if tag_id is not None:
            query = (
                query.join(TodoTag, TodoTag.todo_id == Todo.id)
                .join(Tag, Tag.id == TodoTag.tag_id)
                .where(TodoTag.tag_id == tag_id)
            )

        result = await db.execute(
            query.order_by(Todo.created_at.desc(), Todo.id.desc())
            .execution_options(include_deleted=include_deleted)
        )
        return list(result.scalars().all())

    @staticmethod
    async def create_todo(
        user_id: int,
        title: str,
        db: AsyncSession,
        category_id: Optional[int] = None,
        tag_ids: Optional[List[int]] = None
    ) -> Todo:
        """
        Create a todo, with its tag links, in one transaction.

        Args:
            user_id: Owning user.
            title: Todo title.
            db: Database session.
            category_id: Optional live category.
            tag_ids: Optional live tags to link.

        Returns:
            Todo: The created todo.

        Raises:
            ValidationError: If the title is blank.
            NotFoundError: If the category or any tag does not resolve.
            PersistenceError: If the store rejects the write.
        """
        if not title or not title.strip():
            raise ValidationError("Title is required")

        tag_ids = _unique_ids(tag_ids or [])
        if category_id is not None:
            await TodoService._ensure_category(category_id, db)
        await TodoService._ensure_tags(tag_ids, db)

        todo = Todo(user_id=user_id, title=title.strip(), category_id=category_id)
        db.add(todo)
        try:
            await db.flush()
            if tag_ids:
                await TodoService._replace_tags(todo.id, tag_ids, db)
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to create todo for user {user_id}: {e}")
            raise PersistenceError(detail=str(e)) from e
        await commit_or_rollback(db)

        logger.info(f"Created todo {todo.id} for user {user_id}")
        return await TodoService._load(todo.id, db)

    @staticmethod
    async def update_todo(
        user_id: int,
        todo_id: int,
        changes: dict,
        db: AsyncSession
    ) -> Todo:
        """
        Apply a partial update to a todo owned by the user.

        Supported keys are ``title``, ``completed``, ``category_id`` and
        ``tag_ids``. A ``tag_ids`` value replaces the whole tag set. Ownership
        is never changed.

        Args:
            user_id: Requesting user; must own the todo.
            todo_id: Todo to update.
            changes: Fields to change.
            db: Database session.

        Returns:
            Todo: The updated todo.
        """
        todo = await TodoService.get_todo(user_id, todo_id, db)

        if "title" in changes:
            title = changes["title"]
            if not title or not title.strip():
                raise ValidationError("Title is required")
            todo.title = title.strip()

        if changes.get("completed") is not None:
            todo.completed = changes["completed"]

        if "category_id" in changes:
            category_id = changes["category_id"]
            if category_id is not None:
                await TodoService._ensure_category(category_id, db)
            todo.category_id = category_id

        if changes.get("tag_ids") is not None:
            tag_ids = _unique_ids(changes["tag_ids"])
            await TodoService._ensure_tags(tag_ids, db)
            await TodoService._replace_tags(todo.id, tag_ids, db)
            # Join rows change outside the todo row, so bump it explicitly
            todo.updated_at = utcnow()

        await commit_or_rollback(db)

        logger.info(f"Updated todo {todo_id} for user {user_id}")
        return await TodoService._load(todo_id, db)

    @staticmethod
    async def delete_todo(user_id: int, todo_id: int, db: AsyncSession) -> Todo:
        """
        Soft-delete a todo owned by the user.

        Tag links are left in place.

        Returns:
            Todo: The deleted todo, with ``deleted_at`` set.
        """
        todo = await TodoService.get_todo(user_id, todo_id, db)
        todo.soft_delete()
        await commit_or_rollback(db)

        logger.info(f"Deleted todo {todo_id} for user {user_id}")
        return await TodoService._load(todo_id, db, include_deleted=True)
