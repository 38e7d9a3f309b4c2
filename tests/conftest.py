from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session

from app.db.models import Project, ProjectStatus
from app.db.session import build_engine, get_session
from app.main import app
from app.routers.deps import get_email_service

START = datetime(2025, 3, 1, 12, 0, 0)


class FakeClock:
    """Deterministic naive-UTC clock that tests can move forward"""

    def __init__(self, start: datetime = START):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


class FixedRandom:
    def __init__(self, *values):
        self.values = list(values)

    def randint(self, a, b):
        return self.values.pop(0) if len(self.values) > 1 else self.values[0]


class FakeEmailService:
    def __init__(self, enabled: bool = True, delivers: bool = True):
        self.enabled = enabled
        self.delivers = delivers
        self.sent = []

    def send_otp_email(self, to_email: str, to_name: str, code: str) -> bool:
        self.sent.append((to_email, to_name, code))
        return self.enabled and self.delivers


@pytest.fixture
def engine():
    engine = build_engine(
        "sqlite://",
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def email_service():
    return FakeEmailService()


@pytest.fixture
def client(engine, email_service):
    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_email_service] = lambda: email_service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_project(session):
    def factory(client_id="client-1", budget="1000.00", status=ProjectStatus.OPEN, **kwargs):
        project = Project(
            title=kwargs.pop("title", "Build a landing page"),
            description=kwargs.pop("description", "Responsive landing page with a contact form"),
            budget=Decimal(budget),
            client_id=client_id,
            status=status,
            **kwargs,
        )
        session.add(project)
        session.commit()
        session.refresh(project)
        return project
    return factory


@pytest.fixture
def fixed_rng():
    """Factory for an RNG stub returning the given values in order"""
    return FixedRandom
