from fastapi import APIRouter, Request, status
from utils.deps import db_dependency, user_dependency
from schemas.common_schemas import SuccessResponse
from schemas.product_schemas import CategoryList, CategoryView
from services.category_service import CategoryService
from middleware.rate_limiter import limiter


router = APIRouter(
    prefix="/categories",
    tags=["categories"]
)

@router.get("", status_code=status.HTTP_200_OK, response_model=SuccessResponse[CategoryList])
@limiter.limit("60/minute")
async def list_categories(request: Request, user: user_dependency, db: db_dependency):
    categories = CategoryService.get_all_categories(db)

    return SuccessResponse(data=CategoryList(
        categories=[CategoryView.model_validate(category) for category in categories]
    ))
