"""
Category endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from todo_api.db.session import get_db
from todo_api.dependencies.session import require_user
from todo_api.schemas.category import CategoryCreate, CategoryListResponse, CategoryResponse
from todo_api.services.category_service import CategoryService


categories_router = APIRouter(dependencies=[Depends(require_user)])


@categories_router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(category_data: CategoryCreate, db: AsyncSession = Depends(get_db)):
    return await CategoryService.create_category(category_data.name, db)


@categories_router.get("", response_model=CategoryListResponse)
async def list_categories(db: AsyncSession = Depends(get_db)):
    categories = await CategoryService.list_categories(db)
    return CategoryListResponse(
        categories=[CategoryResponse.model_validate(category) for category in categories]
    )


@categories_router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(category_id: int, db: AsyncSession = Depends(get_db)):
    return await CategoryService.get_category(category_id, db)


@categories_router.delete("/{category_id}", response_model=CategoryResponse)
async def delete_category(category_id: int, db: AsyncSession = Depends(get_db)):
    """
    Soft-delete a category. Todos in it keep existing, uncategorised.
    """
    return await CategoryService.delete_category(category_id, db)
