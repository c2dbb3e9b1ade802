from fastapi import APIRouter, Request, status
from utils.deps import user_dependency
from schemas.auth_schemas import UserData, UserView
from schemas.common_schemas import SuccessResponse
from middleware.rate_limiter import limiter


router = APIRouter(
    prefix="/users",
    tags=["users"]
)

@router.get("/me", status_code=status.HTTP_200_OK, response_model=SuccessResponse[UserData])
@limiter.limit("30/minute")
async def get_user_info(request: Request, user: user_dependency):
    """
    Get current user info (protected endpoint).
    """
    return SuccessResponse(data=UserData(user=UserView.model_validate(user)))
