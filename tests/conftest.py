from __future__ import annotations

from pathlib import Path

import pytest
from starlette.testclient import TestClient

from checkin.core.config import Settings
from checkin.db.base import Base
from checkin.db.session import make_engine, make_session_factory
from checkin.main import create_app
from checkin.services.bootstrap import seed_employees


def make_settings(db_path: Path, **overrides) -> Settings:
    values = dict(
        app_name="Check-in Tracker API (test)",
        environment="test",
        cors_allow_origins=["http://testserver"],
        database_url=f"sqlite+pysqlite:///{db_path}",
        seed_sample_employees=True,
        ws_send_timeout_seconds=1.0,
        log_level="INFO",
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return make_settings(tmp_path / "attendance.db")


@pytest.fixture()
def session_factory(settings: Settings):
    engine = make_engine(settings.database_url)
    Base.metadata.create_all(engine)
    factory = make_session_factory(engine)
    with factory() as db:
        seed_employees(db)
    yield factory
    engine.dispose()


@pytest.fixture()
def db(session_factory):
    with session_factory() as session:
        yield session


@pytest.fixture()
def app(settings: Settings):
    return create_app(settings)


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c
