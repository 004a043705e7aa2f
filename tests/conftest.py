"""
Pytest configuration and shared fixtures
"""
import pytest
from decimal import Decimal
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from hotel_booking.database import Base, create_db_engine, create_session_factory, get_db
from hotel_booking.models import ontology  # noqa
from hotel_booking.models.ontology import RoomCategory
from hotel_booking.main import create_app
from hotel_booking.security.auth import CallerRole, create_access_token
from hotel_booking.services.booking_service import BookingService
from hotel_booking.services.booking_store import BookingStore
from hotel_booking.services.room_directory import RoomDirectory
from hotel_booking.services.room_locks import RoomLockRegistry


@pytest.fixture(scope="function")
def db_engine():
    """In-memory database engine"""
    engine = create_db_engine("sqlite:///:memory:", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine):
    session = create_session_factory(db_engine)()
    yield session
    session.close()


@pytest.fixture
def room_directory(db_session):
    return RoomDirectory(db_session)


@pytest.fixture
def booking_store(db_session):
    return BookingStore(db_session)


@pytest.fixture
def room_locks():
    return RoomLockRegistry()


@pytest.fixture
def booking_service(room_directory, booking_store, room_locks):
    return BookingService(room_directory, booking_store, locks=room_locks, enforce_transitions=False)


@pytest.fixture(scope="function")
def client(db_engine, db_session):
    """Test client sharing the test session"""
    app = create_app(engine=db_engine)

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ============== Caller Fixtures ==============

@pytest.fixture
def admin_headers():
    token = create_access_token("admin-1", CallerRole.ADMIN)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def guest_headers():
    token = create_access_token("guest-1", CallerRole.USER)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_guest_headers():
    token = create_access_token("guest-2", CallerRole.USER)
    return {"Authorization": f"Bearer {token}"}


# ============== Entity Fixtures ==============

@pytest.fixture
def sample_room(room_directory):
    """Standard room, 100/night, 2 guests"""
    return room_directory.add_room("101", Decimal("100.00"), capacity=2,
                                   category=RoomCategory.STANDARD)


@pytest.fixture
def sample_room_102(room_directory):
    return room_directory.add_room("102", Decimal("150.00"), capacity=3,
                                   category=RoomCategory.DELUXE)


@pytest.fixture
def suite_room(room_directory):
    return room_directory.add_room("501", Decimal("480.50"), capacity=4,
                                   category=RoomCategory.SUITE)
