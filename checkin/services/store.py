from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from checkin.core.errors import StorageError, UnknownEmployeeError, ValidationError
from checkin.models import LOG_TYPES, Employee, LogEntry
from checkin.schemas import EnrichedLogOut

RECENT_LOGS_LIMIT = 50

# SQLite INTEGER PRIMARY KEY range; larger ids cannot be bound, let alone stored.
MAX_ID = 2**63 - 1

_log = logging.getLogger("uvicorn.error")


def _enriched_select():
    return select(
        LogEntry.id,
        LogEntry.employee_id,
        Employee.name.label("employee_name"),
        Employee.department,
        LogEntry.type,
        LogEntry.timestamp,
    ).join(Employee, LogEntry.employee_id == Employee.id)


class RecordStore:
    """Employees and their append-only check log, over one SQLAlchemy session."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def list_employees(self) -> list[Employee]:
        try:
            return list(self.db.scalars(select(Employee).order_by(Employee.id)).all())
        except SQLAlchemyError as exc:
            raise self._storage_error("list employees", exc) from exc

    def get_employee(self, employee_id: int) -> Employee | None:
        if not 1 <= employee_id <= MAX_ID:
            return None
        try:
            return self.db.get(Employee, employee_id)
        except SQLAlchemyError as exc:
            raise self._storage_error("load employee", exc) from exc

    def append_log(self, employee_id: int, kind: str) -> EnrichedLogOut:
        if kind not in LOG_TYPES:
            raise ValidationError("type must be one of IN, OUT")
        if self.get_employee(employee_id) is None:
            raise UnknownEmployeeError(employee_id)

        entry = LogEntry(employee_id=employee_id, type=kind)
        try:
            self.db.add(entry)
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._storage_error("append log", exc) from exc

        enriched = self.get_log(entry.id)
        if enriched is None:
            raise StorageError(f"Log {entry.id} vanished after commit")
        return enriched

    def get_log(self, log_id: int) -> EnrichedLogOut | None:
        try:
            row = self.db.execute(_enriched_select().where(LogEntry.id == log_id)).one_or_none()
        except SQLAlchemyError as exc:
            raise self._storage_error("read log", exc) from exc
        if row is None:
            return None
        return EnrichedLogOut.model_validate(row)

    def recent_logs(self, limit: int = RECENT_LOGS_LIMIT) -> list[EnrichedLogOut]:
        stmt = _enriched_select().order_by(LogEntry.timestamp.desc(), LogEntry.id.desc()).limit(limit)
        try:
            rows = self.db.execute(stmt).all()
        except SQLAlchemyError as exc:
            raise self._storage_error("list logs", exc) from exc
        return [EnrichedLogOut.model_validate(r) for r in rows]

    def count_logs(self, employee_id: int | None = None) -> int:
        stmt = select(func.count(LogEntry.id))
        if employee_id is not None:
            stmt = stmt.where(LogEntry.employee_id == employee_id)
        try:
            return int(self.db.scalar(stmt) or 0)
        except SQLAlchemyError as exc:
            raise self._storage_error("count logs", exc) from exc

    def _storage_error(self, action: str, exc: SQLAlchemyError) -> StorageError:
        self.db.rollback()
        _log.error("Storage failure during %s", action, exc_info=exc)
        return StorageError(f"Could not {action}")
