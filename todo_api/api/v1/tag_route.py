"""
Tag endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from todo_api.db.session import get_db
from todo_api.dependencies.session import require_user
from todo_api.schemas.tag import TagCreate, TagListResponse, TagResponse
from todo_api.services.tag_service import TagService


tags_router = APIRouter(dependencies=[Depends(require_user)])


@tags_router.post("", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
async def create_tag(tag_data: TagCreate, db: AsyncSession = Depends(get_db)):
    return await TagService.create_tag(tag_data.name, db)


@tags_router.get("", response_model=TagListResponse)
async def list_tags(db: AsyncSession = Depends(get_db)):
    tags = await TagService.list_tags(db)
    return TagListResponse(tags=[TagResponse.model_validate(tag) for tag in tags])


@tags_router.get("/{tag_id}", response_model=TagResponse)
async def get_tag(tag_id: int, db: AsyncSession = Depends(get_db)):
    return await TagService.get_tag(tag_id, db)


@tags_router.delete("/{tag_id}", response_model=TagResponse)
async def delete_tag(tag_id: int, db: AsyncSession = Depends(get_db)):
    return await TagService.delete_tag(tag_id, db)
