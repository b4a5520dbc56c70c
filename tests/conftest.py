# tests/conftest.py
import os

# Settings are read at import time; these have to be set first
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["SQLALCHEMY_DATABASE_URI"] = "sqlite://"
os.environ["ADMIN_EMAILS"] = "admin@lucent.test"

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import Session

from lucent_shop.core.limiter import limiter
from lucent_shop.core.redis import get_redis_client
from lucent_shop.crud import user as crud_user
from lucent_shop.db.session import Base, SessionLocal, engine
from lucent_shop.dependencies import create_access_token
from lucent_shop.main import app
# Every model module has to be imported so create_all sees its table
from lucent_shop.models import cart, event_log, order, product, user  # noqa: F401
from lucent_shop.models.product import Product, ProductType
from lucent_shop.models.user import User


@pytest.fixture(scope="function")
def db_session() -> Session:
    """
    Clean database for every test.
    In-memory SQLite on a single shared connection, so the app's own
    sessions (and the event log's) see the same data.
    """
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def disable_rate_limit():
    limiter.enabled = False
    yield
    limiter.enabled = True


# --- Users ---

def _make_user(db: Session, email: str, name: str) -> User:
    return crud_user.create_user(db, email, name=name, phone="010-1234-5678")

@pytest.fixture
def test_user(db_session: Session) -> User:
    return _make_user(db_session, "fan@lucent.test", "김루센")

@pytest.fixture
def other_user(db_session: Session) -> User:
    return _make_user(db_session, "other@lucent.test", "이다른")

@pytest.fixture
def admin_user(db_session: Session) -> User:
    return _make_user(db_session, "admin@lucent.test", "관리자")


# --- Products ---

@pytest.fixture
def make_product(db_session: Session):
    counter = {"n": 0}

    def _make(**fields) -> Product:
        counter["n"] += 1
        data = {
            "name": f"상품 {counter['n']}",
            "slug": f"product-{counter['n']}",
            "type": ProductType.PHYSICAL_GOODS,
            "price": 10000,
            "stock": 10,
            "is_active": True,
        }
        data.update(fields)
        p = Product(**data)
        db_session.add(p)
        db_session.commit()
        db_session.refresh(p)
        return p

    return _make

@pytest.fixture
def voice_pack(make_product) -> Product:
    return make_product(
        name="Lucent Voice Pack Vol.1",
        slug="voice-pack-vol-1",
        type=ProductType.VOICE_PACK,
        price=5000,
        stock=None,
        digital_file_url="https://cdn.lucent.test/packs/vol1.zip",
        sample_audio_url="/media/samples/vol1.mp3",
    )

@pytest.fixture
def physical_product(make_product) -> Product:
    return make_product(
        name="아크릴 스탠드",
        slug="acrylic-stand",
        type=ProductType.PHYSICAL_GOODS,
        price=15000,
        stock=3,
    )

@pytest.fixture
def shipping_info() -> dict:
    return {
        "name": "김루센",
        "phone": "010-1234-5678",
        "main_address": "서울특별시 강남구 테헤란로 1",
        "detail_address": "101호",
        "memo": "문 앞에 놓아주세요",
    }


# --- HTTP ---

@pytest.fixture
def mock_redis() -> AsyncMock:
    redis = AsyncMock()
    redis.get.return_value = None
    return redis

@pytest_asyncio.fixture
async def client(db_session: Session, mock_redis: AsyncMock):
    app.dependency_overrides[get_redis_client] = lambda: mock_redis
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()

@pytest.fixture
def auth_headers(test_user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(test_user.id)}"}

@pytest.fixture
def other_auth_headers(other_user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(other_user.id)}"}

@pytest.fixture
def admin_auth_headers(admin_user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(admin_user.id)}"}
