import secrets
import hashlib
from datetime import datetime, timezone, timedelta
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from jose import jwt, JWTError
from models.refresh_tokens import RefreshToken
from core.config import settings
from services.auth_service import AuthService
from utils.logger import get_logger

logger = get_logger(__name__)


def _hash_jti(jti: str) -> str:
    return hashlib.sha256(jti.encode()).hexdigest()


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class TokenService:
    """
    Handles all token operations: creation, validation, rotation, and revocation.
    """

    @staticmethod
    def create_access_token(email: str, user_id: int, role: str, expires_delta: timedelta = None):
        """
        Creates a JWT access token.

        Args:
            email: User's email
            user_id: User's ID
            role: User's role
            expires_delta: Token lifetime (default: ACCESS_TOKEN_EXPIRE_MINUTES)
        """
        if expires_delta is None:
            expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

        payload = {
            "sub": email,
            "id": user_id,
            "role": role,
            "type": "access",
            "exp": datetime.now(timezone.utc) + expires_delta
        }

        return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    @staticmethod
    def create_refresh_token(email: str, user_id: int, role: str):
        """
        Creates a JWT refresh token.

        Returns:
            Tuple of (refresh_token_string, jti, expires_at)
        """
        jti = secrets.token_urlsafe(32)
        expire = datetime.now(timezone.utc) + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)

        payload = {
            "sub": email,
            "id": user_id,
            "role": role,
            "jti": jti,
            "type": "refresh",
            "exp": expire
        }

        refresh_token = jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

        return refresh_token, jti, expire

    @staticmethod
    def create_tokens(email: str, user_id: int, role: str, db: Session):
        """
        Creates an access + refresh token pair and stores the refresh token's
        hashed jti so it can later be rotated or revoked.
        """
        access_token = TokenService.create_access_token(email, user_id, role)
        refresh_token, jti, expires_at = TokenService.create_refresh_token(email, user_id, role)

        db.add(RefreshToken(
            user_id=user_id,
            token_hash=_hash_jti(jti),
            expires_at=expires_at
        ))
        db.commit()

        return {
            "access_token": access_token,
            "refresh_token": refresh_token,
            "token_type": "bearer"
        }

    @staticmethod
    def refresh_access_token(refresh_token: str, db: Session):
        """
        Validates a refresh token and issues a new token pair. The presented
        token is revoked (rotation), so each refresh token works once.

        Raises:
            HTTPException: 401 if the token is invalid, expired, or revoked
        """
        try:
            payload = jwt.decode(
                refresh_token,
                settings.SECRET_KEY,
                algorithms=[settings.ALGORITHM]
            )
        except JWTError:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token"
            )

        if payload.get("type") != "refresh":
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token type"
            )

        email = payload.get("sub")
        user_id = payload.get("id")
        role = payload.get("role")
        jti = payload.get("jti")

        if not all([email, user_id, role, jti]):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token payload"
            )

        db_token = db.query(RefreshToken).filter(
            RefreshToken.token_hash == _hash_jti(jti),
            RefreshToken.revoked == False
        ).first()

        if not db_token:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token not found or revoked"
            )

        if _as_utc(db_token.expires_at) < datetime.now(timezone.utc):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token expired"
            )

        if AuthService.get_active_user_by_id(db, user_id) is None:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is inactive")

        db_token.revoked = True
        db.commit()

        logger.info("Refresh token rotated", extra={"user_id": user_id})

        return TokenService.create_tokens(email, user_id, role, db)

    @staticmethod
    def revoke_all_user_tokens(user_id: int, db: Session) -> int:
        """
        Revokes every active refresh token of a user (logout from all devices).

        Returns:
            Number of tokens revoked
        """
        revoked = db.query(RefreshToken).filter(
            RefreshToken.user_id == user_id,
            RefreshToken.revoked == False
        ).update({"revoked": True})
        db.commit()

        return revoked
