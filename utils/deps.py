from core.database import SessionLocal
from typing import Annotated
from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from jose import JWTError, jwt
from starlette import status
from core.config import settings
from models.users import User
from services.auth_service import AuthService

oauth2_bearer = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/auth/token")


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        # closing an uncommitted session rolls the transaction back
        db.close()

db_dependency = Annotated[Session, Depends(get_db)]


def _credentials_error(detail: str = "Could not validate credentials.") -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED,
                         detail=detail,
                         headers={"WWW-Authenticate": "Bearer"})


def get_current_user(token: Annotated[str, Depends(oauth2_bearer)], db: db_dependency) -> User:
    """
    Resolve the bearer access token into the active User it was issued to.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise _credentials_error()

    email: str = payload.get("sub")
    user_id: int = payload.get("id")
    token_type: str = payload.get("type")

    if email is None or user_id is None:
        raise _credentials_error()

    if token_type != "access":
        raise _credentials_error("Invalid token type. Access token required.")

    user = AuthService.get_active_user_by_id(db=db, user_id=user_id)
    if user is None:
        raise _credentials_error()

    return user


user_dependency = Annotated[User, Depends(get_current_user)]
