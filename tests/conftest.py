"""
Pytest configuration and fixtures for the inventory catalog tests.

Every test gets its own in-memory sqlite database (FTS5 tables included)
and an application built around it with create_app().
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from catalog.core.database import build_engine
from catalog.main import create_app
from catalog.models import Base

from factories import make_user, make_inventory, make_item


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    """A session for seeding and inspecting the database directly."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def app(session_factory):
    return create_app(session_factory=session_factory, create_schema=False)


@pytest.fixture
def client(app):
    """Test client sharing one event loop across requests and websockets."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def owner(db):
    """The user who owns the test inventory."""
    return make_user(db, "owner")


@pytest.fixture
def editor(db):
    """A user who will be granted write access in tests that need one."""
    return make_user(db, "editor")


@pytest.fixture
def stranger(db):
    """A user with no relationship to the test inventory."""
    return make_user(db, "stranger")


@pytest.fixture
def inventory(db, owner):
    return make_inventory(db, owner, title="Vintage Cameras", description="Film cameras from the 70s")


@pytest.fixture
def private_inventory(db, owner):
    return make_inventory(db, owner, title="Private Notes", is_public=False)


@pytest.fixture
def item(db, inventory):
    return make_item(db, inventory, name="Canon AE-1", description="35mm SLR")
