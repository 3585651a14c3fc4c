"""
Todo endpoints.

Every route is scoped to the authenticated user; only the owner may read
or mutate a todo.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from todo_api.core.errors import ForbiddenError
from todo_api.db.session import get_db
from todo_api.dependencies.session import require_user
from todo_api.models.user import User
from todo_api.schemas.todo import TodoCreate, TodoListResponse, TodoResponse, TodoUpdate
from todo_api.services.todo_service import TodoService


logger = logging.getLogger(__name__)

todos_router = APIRouter()


@todos_router.post("", response_model=TodoResponse, status_code=status.HTTP_201_CREATED)
async def create_todo(
    todo_data: TodoCreate,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a todo for the authenticated user.

    A ``user_id`` in the body is accepted only if it names the caller.
    """
    if todo_data.user_id is not None and todo_data.user_id != current_user.id:
        logger.warning(f"User {current_user.id} tried to create a todo for user {todo_data.user_id}")
        raise ForbiddenError()

    return await TodoService.create_todo(
        user_id=current_user.id,
        title=todo_data.title,
        category_id=todo_data.category_id,
        tag_ids=todo_data.tag_ids,
        db=db
    )


@todos_router.get("", response_model=TodoListResponse)
async def list_todos(
    category_id: Optional[int] = None,
    tag_id: Optional[int] = None,
    include_deleted: bool = False,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db)
):
    """
    List the authenticated user's todos.

    Args:
        category_id: Only todos in this category.
        tag_id: Only todos carrying this tag.
        include_deleted: Also list soft-deleted todos.
    """
    todos = await TodoService.list_todos(
        user_id=current_user.id,
        category_id=category_id,
        tag_id=tag_id,
        include_deleted=include_deleted,
        db=db
    )
    return TodoListResponse(
        total=len(todos),
        todos=[TodoResponse.model_validate(todo) for todo in todos]
    )


@todos_router.get("/{todo_id}", response_model=TodoResponse)
async def get_todo(
    todo_id: int,
    include_deleted: bool = False,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db)
):
    return await TodoService.get_todo(current_user.id, todo_id, db, include_deleted=include_deleted)


@todos_router.patch("/{todo_id}", response_model=TodoResponse)
async def update_todo(
    todo_id: int,
    todo_data: TodoUpdate,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Partially update a todo.

    Only fields sent in the body are changed; ``tag_ids`` replaces the tag set.
    """
    changes = todo_data.model_dump(exclude_unset=True)
    return await TodoService.update_todo(current_user.id, todo_id, changes, db)


@todos_router.delete("/{todo_id}", response_model=TodoResponse)
async def delete_todo(
    todo_id: int,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Soft-delete a todo. The deleted todo is returned with ``deleted_at`` set.
    """
    return await TodoService.delete_todo(current_user.id, todo_id, db)
