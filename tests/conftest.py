import os

# Keep the module-level engine and settings off any developer database
os.environ.setdefault("SQLALCHEMY_DATABASE_URI", "sqlite://")
os.environ.setdefault("PUSH_SENT_LEDGER_ENABLED", "false")

import pytest
from cryptography.hazmat.primitives.asymmetric import ec
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from nerdiversary.db.base import Base
from nerdiversary.db.session import enable_sqlite_foreign_keys, get_db
from nerdiversary.milestones.offsets import build_offset_table
from nerdiversary.notifications import models  # noqa: F401
from nerdiversary.notifications.webpush import b64url_encode, public_key_bytes


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(db_session):
    from nerdiversary.main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture(scope="session")
def offset_table():
    return build_offset_table()


@pytest.fixture
def vapid_key():
    return ec.generate_private_key(ec.SECP256R1())


class SubscriberKeys:
    """Browser side of a push subscription: the p256dh key pair and auth secret."""

    def __init__(self):
        self.private_key = ec.generate_private_key(ec.SECP256R1())
        self.auth_secret = os.urandom(16)

    @property
    def p256dh(self) -> str:
        return b64url_encode(public_key_bytes(self.private_key.public_key()))

    @property
    def auth(self) -> str:
        return b64url_encode(self.auth_secret)


@pytest.fixture
def subscriber_keys():
    return SubscriberKeys()


class FakeLedger:
    def __init__(self):
        self.seen = set()

    def claim(self, subscription_id, event_id, lead_minutes):
        key = (subscription_id, event_id, lead_minutes)
        if key in self.seen:
            return False
        self.seen.add(key)
        return True


@pytest.fixture
def fake_ledger():
    return FakeLedger()
