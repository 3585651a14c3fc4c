
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TagCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)


class TagResponse(BaseModel):
    id: int
    name: str
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TagListResponse(BaseModel):
    tags: List[TagResponse]
