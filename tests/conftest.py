import random

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api import create_app
from app.api.deps import get_rng, get_session_service, get_stock_policy
from app.data.database import Base, get_db
from app.data.models import CardModel, CardSetModel, CartLineModel, UserModel  # noqa: F401
from app.data.seed import build_card
from app.services.auth_service import hash_password
from app.services.session_service import SessionService
from app.utils.settings import STOCK_POLICY_DECOUPLED

PASSWORD = "Secret#123"


@pytest.fixture()
def password():
    return PASSWORD


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def redis_client():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture()
def sessions(redis_client):
    return SessionService(client=redis_client, ttl=60)


@pytest.fixture()
def make_card(db):
    def _make(name="Blue-Eyes White Dragon", sets=None, **fields):
        if sets is None:
            sets = [{"set_name": "Legend of Blue Eyes White Dragon", "set_code": "LOB-001", "set_price": "120.00", "quantity": 5}]
        card = build_card({"name": name, "images": [f"https://img.example/{name}.jpg"], "sets": sets, **fields})
        db.add(card)
        db.commit()
        return card

    return _make


@pytest.fixture()
def make_user(db):
    def _make(username="seto_kaiba", role="user"):
        user = UserModel(username=username, password_hash=hash_password(PASSWORD, rounds=4), role=role)
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture()
def stock_policy():
    return STOCK_POLICY_DECOUPLED


@pytest.fixture()
def app(session_factory, sessions, stock_policy):
    app = create_app()

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_session_service] = lambda: sessions
    app.dependency_overrides[get_rng] = lambda: random.Random(1234)
    app.dependency_overrides[get_stock_policy] = lambda: stock_policy
    return app


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c
