from sqlalchemy.orm import Session
from core.exceptions import EmailConflictError, InvalidCredentialError
from models.users import User
from schemas.auth_schemas import CreateUserRequest
from utils.hashing import verify_password, get_password_hash
from utils.logger import get_logger

logger = get_logger(__name__)

class AuthService:

    @staticmethod
    def create_user(request: CreateUserRequest, db: Session) -> User:
        """
        Registers a new customer account.

        Raises EmailConflictError when the email is already taken.
        """
        existing_user = db.query(User).filter(User.email == request.email).first()
        if existing_user:
            logger.warning(
                "Registration attempt with existing email",
                extra={"email": request.email}
            )
            raise EmailConflictError()

        model = User(
            email=request.email,
            hashed_password=get_password_hash(request.password),
        )

        db.add(model)
        db.commit()
        db.refresh(model)

        logger.info("User registered", extra={"user_id": model.id, "email": model.email})
        return model


    @staticmethod
    def authenticate_user(email: str, password: str, db: Session) -> User:
        user = db.query(User).filter(User.email == email.lower().strip()).first()

        if not user:
            logger.warning(
                "Login failed - user not found",
                extra={"email": email}
            )
            raise InvalidCredentialError()

        if not user.is_active:
            logger.warning(
                "Login failed - inactive account",
                extra={"user_id": user.id, "email": email}
            )
            raise InvalidCredentialError()

        if not verify_password(password, user.hashed_password):
            logger.warning(
                "Login failed - invalid password",
                extra={"user_id": user.id, "email": email}
            )
            raise InvalidCredentialError()

        logger.debug(
            "User authenticated successfully",
            extra={"user_id": user.id, "email": email}
        )

        return user

    @staticmethod
    def get_active_user_by_id(db: Session, user_id: int) -> User | None:
        return db.query(User).filter(User.id == user_id, User.is_active == True).one_or_none()
