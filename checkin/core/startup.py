from __future__ import annotations

import logging

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from checkin.core.config import Settings
from checkin.db.base import Base
from checkin.services.bootstrap import seed_employees

_log = logging.getLogger("uvicorn.error")


def on_startup(settings: Settings, engine: Engine, session_factory: sessionmaker[Session]) -> None:
    # create-if-not-exists; there is no migration history to replay
    Base.metadata.create_all(engine)

    if not settings.seed_sample_employees:
        return
    with session_factory() as db:
        inserted = seed_employees(db)
    if inserted:
        _log.info("Seeded %d sample employees", inserted)
