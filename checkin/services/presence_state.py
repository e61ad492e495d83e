from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from checkin.models import Employee, LogEntry
from checkin.schemas import EmployeeStatusOut


def get_current_status(db: Session) -> list[EmployeeStatusOut]:
    """Current IN/OUT state of every employee, read fresh from the log.

    The latest entry per employee is the one with the greatest
    ``(timestamp, id)``; employees with no entries come back with both
    ``current_status`` and ``last_event`` set to ``None``.
    """
    ranked = select(
        LogEntry.employee_id,
        LogEntry.type,
        LogEntry.timestamp,
        func.row_number()
        .over(
            partition_by=LogEntry.employee_id,
            order_by=(LogEntry.timestamp.desc(), LogEntry.id.desc()),
        )
        .label("rn"),
    ).subquery()

    stmt = (
        select(
            Employee.id,
            Employee.name,
            Employee.department,
            Employee.role,
            ranked.c.type.label("current_status"),
            ranked.c.timestamp.label("last_event"),
        )
        .outerjoin(ranked, (ranked.c.employee_id == Employee.id) & (ranked.c.rn == 1))
        .order_by(Employee.id)
    )

    return [EmployeeStatusOut.model_validate(row) for row in db.execute(stmt).all()]
