
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from todo_api.schemas.tag import TagResponse


class TodoCreate(BaseModel):
    """Schema for creating a todo."""
    title: str = Field(min_length=1, max_length=255)
    category_id: Optional[int] = None
    tag_ids: List[int] = []
    # Optional; must match the authenticated user when given
    user_id: Optional[int] = None


class TodoUpdate(BaseModel):
    """
    Schema for a partial todo update.

    Only fields present in the request body are applied. ``category_id: null``
    clears the category; ``tag_ids`` replaces the whole tag set.
    """
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    completed: Optional[bool] = None
    category_id: Optional[int] = None
    tag_ids: Optional[List[int]] = None


class TodoResponse(BaseModel):
    """Schema for todo response."""
    id: int
    title: str
    completed: bool
    user_id: int
    category_id: Optional[int] = None
    tags: List[TagResponse] = []
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TodoListResponse(BaseModel):
    """Schema for listing todos."""
    total: int
    todos: List[TodoResponse]
