import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from agenda.database import get_db, init_db, make_engine
from agenda.main import app
from agenda.models.tables import Businesses, Services, WorkingDays
from agenda.redis_client import get_redis
from agenda.services.slots.working_hours import DEFAULT_WEEK


# ------------------ engine ------------------
# File-backed SQLite: the BEGIN IMMEDIATE locking needs real connections,
# an in-memory StaticPool would share one connection between threads.
@pytest.fixture
def engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'test.db'}", busy_timeout=15)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


# ------------------ client ------------------
@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = lambda: None
    yield TestClient(app)
    app.dependency_overrides.clear()


# ------------------ data ------------------
# Fixtures hand out ids, never live ORM objects: an open session would
# hold the SQLite write lock and stall the code under test.
@pytest.fixture
def business_id(session_factory):
    with session_factory() as db:
        business = Businesses(name="Demo Clinic", timezone="UTC")
        db.add(business)
        db.flush()
        for day in DEFAULT_WEEK:
            db.add(WorkingDays(business_id=business.id, **day))
        db.commit()
        return business.id


def _make_service(session_factory, business_id, name, duration, active=True):
    with session_factory() as db:
        service = Services(
            business_id=business_id,
            name=name,
            duration_minutes=duration,
            price=50.0,
            active=active,
        )
        db.add(service)
        db.commit()
        return service.id


@pytest.fixture
def service_60(session_factory, business_id):
    return _make_service(session_factory, business_id, "Therapy", 60)


@pytest.fixture
def service_30(session_factory, business_id):
    return _make_service(session_factory, business_id, "Consultation", 30)


@pytest.fixture
def make_service(session_factory, business_id):
    def factory(name="Extra", duration=45, active=True):
        return _make_service(session_factory, business_id, name, duration, active)
    return factory


@pytest.fixture
def headers(business_id):
    return {"X-Business-Id": str(business_id)}
