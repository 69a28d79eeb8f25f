"""
PyTest Configuration for the GateSphere backend
Provides fixtures for testing with a throwaway SQLite database, seeded
societies/users/flats, role-specific auth headers and a fake WebSocket
transport for driving the notification relay directly.
"""
import json
import os

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from config.database import Base, get_db
from main import app
import realtime.router
from realtime.registry import ConnectionRegistry
from realtime.relay import NotificationRelay
from realtime.store import EntityStore
from shared_utils.auth import create_access_token

# ── SQLite for tests (no external DB required) ──
TEST_DATABASE_URL = os.getenv('TEST_DATABASE_URL', 'sqlite:///./test.db')

# SQLite needs check_same_thread=False for FastAPI's threaded test client
connect_args = {"check_same_thread": False} if "sqlite" in TEST_DATABASE_URL else {}
test_engine = create_engine(TEST_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@event.listens_for(test_engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    if "sqlite" in TEST_DATABASE_URL:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database for each test; dropped again afterwards.
    """
    Base.metadata.create_all(bind=test_engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def store(db_session):
    """EntityStore bound to the test database"""
    return EntityStore(TestingSessionLocal)


@pytest.fixture(scope="function")
def client(db_session, store):
    """
    FastAPI TestClient with overridden database dependency. The WebSocket
    relay is pointed at the test database as well.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    original_store = realtime.router.relay.store
    realtime.router.relay.store = store

    with TestClient(app) as test_client:
        yield test_client

    realtime.router.relay.store = original_store
    app.dependency_overrides.clear()


# ---------------- seeded data ----------------

def _make_society(db_session, name):
    from models import Society

    society = Society(
        name=name,
        address="1 Test Road",
        city="Pune",
        state="Maharashtra",
        pincode="411001",
    )
    db_session.add(society)
    db_session.commit()
    db_session.refresh(society)
    return society


def _make_user(db_session, society, role, username, name=None):
    from models import User

    user = User(
        username=username,
        password="!otp-only",
        name=name or f"Test {role.title()}",
        phone=username,
        role=role,
        society_id=society.id,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def sample_society(db_session):
    return _make_society(db_session, "Green Meadows")


@pytest.fixture
def other_society(db_session):
    return _make_society(db_session, "Blue Ridge")


@pytest.fixture
def admin_user(db_session, sample_society):
    return _make_user(db_session, sample_society, "admin", "+919800000001", name="Society Admin")


@pytest.fixture
def resident_user(db_session, sample_society):
    return _make_user(db_session, sample_society, "resident", "+919800000002", name="Asha Resident")


@pytest.fixture
def guard_user(db_session, sample_society):
    return _make_user(db_session, sample_society, "guard", "+919800000003", name="Gate Guard")


@pytest.fixture
def auditor_user(db_session, sample_society):
    return _make_user(db_session, sample_society, "auditor", "+919800000004", name="Books Auditor")


@pytest.fixture
def outsider_user(db_session, other_society):
    """Resident of a different society"""
    return _make_user(db_session, other_society, "resident", "+919800000005", name="Other Resident")


@pytest.fixture
def sample_building(db_session, sample_society):
    from models import Building

    building = Building(society_id=sample_society.id, name="Tower A", floors=10, flats_per_floor=4)
    db_session.add(building)
    db_session.commit()
    db_session.refresh(building)
    return building


@pytest.fixture
def sample_flat(db_session, sample_society, sample_building, resident_user):
    from models import Flat

    flat = Flat(
        building_id=sample_building.id,
        society_id=sample_society.id,
        flat_number="A-101",
        floor=1,
        owner_id=resident_user.id,
        is_occupied=True,
    )
    db_session.add(flat)
    db_session.commit()
    db_session.refresh(flat)
    return flat


@pytest.fixture
def sample_visitor(db_session, sample_society, sample_flat):
    from visitors.models import Visitor

    visitor = Visitor(
        name="Ravi Courier",
        phone="+919811111111",
        visitor_type="delivery",
        flat_id=sample_flat.id,
        society_id=sample_society.id,
        purpose="Parcel",
        status="pending",
    )
    db_session.add(visitor)
    db_session.commit()
    db_session.refresh(visitor)
    return visitor


# ---------------- auth ----------------

@pytest.fixture
def make_headers():
    """Factory returning Authorization headers for a user"""
    def _headers(user):
        return {"Authorization": f"Bearer {create_access_token(user)}"}
    return _headers


@pytest.fixture
def auth_headers(make_headers, resident_user):
    return make_headers(resident_user)


@pytest.fixture
def admin_headers(make_headers, admin_user):
    return make_headers(admin_user)


@pytest.fixture
def guard_headers(make_headers, guard_user):
    return make_headers(guard_user)


@pytest.fixture
def auditor_headers(make_headers, auditor_user):
    return make_headers(auditor_user)


# ---------------- realtime ----------------

class FakeTransport:
    """Stands in for a WebSocket: records every text frame sent to it"""

    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    async def send_text(self, text):
        if self.fail:
            raise RuntimeError("transport closed")
        self.sent.append(json.loads(text))

    def frames(self, frame_type=None):
        if frame_type is None:
            return list(self.sent)
        return [f for f in self.sent if f.get("type") == frame_type]


@pytest.fixture
def fake_transport():
    return FakeTransport


@pytest.fixture
def registry():
    return ConnectionRegistry()


@pytest.fixture
def relay(registry, store):
    return NotificationRelay(registry, store)


@pytest.fixture
def connect(registry):
    """
    Factory registering a fake connection, optionally already bound to a user.
    Returns (connection, transport).
    """
    def _connect(user=None, fail=False):
        transport = FakeTransport(fail=fail)
        connection_id = registry.register(transport)
        if user is not None:
            registry.bind(connection_id, user.id, user.society_id, user.role)
        return registry.get(connection_id), transport
    return _connect


@pytest.fixture
def mock_sms_gateway(mocker):
    """Mock outbound OTP SMS delivery."""
    mock = mocker.patch('auth.router.send_otp_sms')
    mock.return_value = True
    return mock


# Pytest configuration
def pytest_configure(config):
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "unit: mark test as unit test")
