
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CategoryCreate(BaseModel):
    """Schema for creating a category."""
    name: str = Field(min_length=1, max_length=255)


class CategoryResponse(BaseModel):
    """Schema for category response."""
    id: int
    name: str
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CategoryListResponse(BaseModel):
    """Schema for listing categories."""
    categories: List[CategoryResponse]
