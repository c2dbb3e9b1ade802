import pytest

from core.exceptions import EmailConflictError, InvalidCredentialError
from models.users import User
from schemas.auth_schemas import CreateUserRequest
from services.auth_service import AuthService


def _request(email="new@example.com", password="SecurePass123"):
    return CreateUserRequest(email=email, password=password)


def test_create_user(session):
    created_user = AuthService.create_user(_request(), session)

    assert created_user.id is not None
    assert created_user.email == "new@example.com"
    assert created_user.role == "customer"
    assert created_user.hashed_password != "SecurePass123"

    db_user = session.query(User).filter(User.email == "new@example.com").first()
    assert db_user.id == created_user.id


def test_email_is_normalized(session):
    created_user = AuthService.create_user(_request(email="Mixed.Case@Example.COM"), session)

    assert created_user.email == "mixed.case@example.com"


def test_create_user_duplicate_email(session):
    AuthService.create_user(_request(), session)

    with pytest.raises(EmailConflictError) as exc_info:
        AuthService.create_user(_request(), session)

    assert exc_info.value.status_code == 409


def test_authenticate_user_success(session):
    created_user = AuthService.create_user(_request(), session)

    assert AuthService.authenticate_user("new@example.com", "SecurePass123", session) == created_user


@pytest.mark.parametrize("email, password", [
    ("new@example.com", "WrongPass999"),
    ("missing@example.com", "SecurePass123"),
])
def test_authenticate_user_invalid_credentials(session, email, password):
    AuthService.create_user(_request(), session)

    with pytest.raises(InvalidCredentialError) as exc_info:
        AuthService.authenticate_user(email, password, session)

    assert exc_info.value.status_code == 401


def test_inactive_user_cannot_authenticate(session):
    created_user = AuthService.create_user(_request(), session)
    created_user.is_active = False
    session.commit()

    with pytest.raises(InvalidCredentialError):
        AuthService.authenticate_user("new@example.com", "SecurePass123", session)

    assert AuthService.get_active_user_by_id(session, created_user.id) is None
