from fastapi import APIRouter, Depends, Request
from fastapi.security import OAuth2PasswordRequestForm
from starlette import status
from utils.deps import db_dependency, user_dependency
from schemas.auth_schemas import CreateUserRequest, RefreshTokenRequest, Token, RegisterData, UserView
from schemas.common_schemas import SuccessResponse, MessageData
from services.auth_service import AuthService
from services.token_service import TokenService
from middleware.rate_limiter import limiter
from utils.logger import get_logger

# Setup logger
logger = get_logger(__name__)


router = APIRouter(
    prefix="/auth",
    tags=["auth"]
)


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse[RegisterData])
@limiter.limit("3/minute")
async def register(request: Request, body: CreateUserRequest, db: db_dependency):
    """
    Create an account and sign it in straight away.
    """
    user = AuthService.create_user(body, db)
    tokens = TokenService.create_tokens(user.email, user.id, user.role, db)

    return SuccessResponse(data=RegisterData(user=UserView.model_validate(user), **tokens))


@router.post("/token", response_model=SuccessResponse[Token])
@limiter.limit("5/minute")
async def login_for_access_token(request: Request, db: db_dependency, form_data: OAuth2PasswordRequestForm = Depends()):
    user = AuthService.authenticate_user(form_data.username, form_data.password, db)

    tokens = TokenService.create_tokens(user.email, user.id, user.role, db)

    logger.info(
        "User logged in successfully",
        extra={"user_id": user.id, "email": user.email}
    )

    return SuccessResponse(data=Token(**tokens))


@router.post("/refresh", response_model=SuccessResponse[Token])
@limiter.limit("10/minute")
async def refresh_token(request: Request, body: RefreshTokenRequest, db: db_dependency):
    """
    Exchange a refresh token for a new token pair (the old one is revoked).
    """
    tokens = TokenService.refresh_access_token(body.refresh_token, db)

    return SuccessResponse(data=Token(**tokens))


@router.post("/logout", response_model=SuccessResponse[MessageData])
@limiter.limit("10/minute")
async def logout(request: Request, user: user_dependency, db: db_dependency):
    """
    Revoke every refresh token of the current user (logout from all devices).
    """
    revoked = TokenService.revoke_all_user_tokens(user.id, db)

    logger.info("User logged out", extra={"user_id": user.id, "revoked_tokens": revoked})

    return SuccessResponse(data=MessageData(message="Logged out successfully"))
