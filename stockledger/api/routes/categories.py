"""Category endpoints."""

from fastapi import APIRouter, Depends, status

from stockledger.api.dependencies import get_manage_categories_use_case
from stockledger.application.dto.requests import CreateCategoryRequest, UpdateCategoryRequest
from stockledger.application.dto.responses import (
    CategoryListResponse,
    CategoryResponse,
    ErrorResponse,
)
from stockledger.application.mappers import category_to_response
from stockledger.application.use_cases import ManageCategoriesUseCase

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("", response_model=CategoryListResponse)
async def list_categories(
    use_case: ManageCategoriesUseCase = Depends(get_manage_categories_use_case),
) -> CategoryListResponse:
    """List all categories, ordered by name."""
    categories = await use_case.list_all()
    return CategoryListResponse(
        categories=[category_to_response(c) for c in categories],
        total=len(categories),
    )


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
async def create_category(
    request: CreateCategoryRequest,
    use_case: ManageCategoriesUseCase = Depends(get_manage_categories_use_case),
) -> CategoryResponse:
    category = await use_case.create(request)
    return category_to_response(category)


@router.put(
    "/{category_id}",
    response_model=CategoryResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_category(
    category_id: int,
    request: UpdateCategoryRequest,
    use_case: ManageCategoriesUseCase = Depends(get_manage_categories_use_case),
) -> CategoryResponse:
    category = await use_case.update(category_id, request)
    return category_to_response(category)


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_category(
    category_id: int,
    use_case: ManageCategoriesUseCase = Depends(get_manage_categories_use_case),
) -> None:
    """Delete a category. Its items are kept and lose their category."""
    await use_case.delete(category_id)
