import os

# Settings are read at import time, so the test environment must be set first
os.environ["ENV"] = "testing"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

from decimal import Decimal
from typing import Generator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from main import app
from core.config import settings
from core.database import Base
from models.categories import Category
from models.products import Product
from models.users import User
from services.token_service import TokenService
from utils.deps import get_db
from utils.hashing import get_password_hash

# SYNC SQLite for testing (matches sync service layer)
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

TEST_PASSWORD = "TestPassword123!"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False}
)

TestingSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)


@pytest.fixture
def session() -> Generator[Session, None, None]:
    """
    Creates a fresh, empty database for each test.
    """
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory(session):
    """Opens extra sessions on the test database, e.g. one per worker thread."""
    return TestingSessionLocal


@pytest.fixture
async def client(session: Session):
    """
    Yields an HTTP client that talks to the app using the test database.
    The client is async (for FastAPI), but the DB session is sync.
    """
    def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url=f"http://test{settings.API_PREFIX}"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


def create_user(session: Session, email: str, is_active: bool = True) -> User:
    user = User(
        email=email,
        hashed_password=get_password_hash(TEST_PASSWORD),
        is_active=is_active
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def bearer_headers(user: User) -> dict:
    token = TokenService.create_access_token(user.email, user.id, user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user(session) -> User:
    return create_user(session, "buyer@example.com")


@pytest.fixture
def other_user(session) -> User:
    return create_user(session, "someone.else@example.com")


@pytest.fixture
def auth_headers(user) -> dict:
    return bearer_headers(user)


@pytest.fixture
def other_auth_headers(other_user) -> dict:
    return bearer_headers(other_user)


@pytest.fixture
def category(session) -> Category:
    model = Category(name="Gadgets", description="Small useful things")
    session.add(model)
    session.commit()
    session.refresh(model)
    return model


@pytest.fixture
def make_product(session, category):
    """Factory fixture: make_product("Widget", "10.00") -> persisted Product."""
    def _make(name: str = "Widget", price: str = "10.00", description: str | None = None,
              category_id: int | None = None) -> Product:
        product = Product(
            name=name,
            description=description if description is not None else f"{name} description",
            price=Decimal(price),
            category_id=category_id or category.id
        )
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make


@pytest.fixture
def product_a(make_product) -> Product:
    return make_product("Product A", "10.00")


@pytest.fixture
def product_b(make_product) -> Product:
    return make_product("Product B", "5.00")
