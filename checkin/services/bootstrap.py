from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from checkin.models import Employee

SAMPLE_EMPLOYEES: tuple[tuple[str, str, str], ...] = (
    ("Somchai Jaidee", "IT", "Developer"),
    ("Somsri Rakdee", "HR", "Manager"),
    ("Wichai Chuenjai", "Sales", "Sales Representative"),
    ("Anong Sookjai", "Marketing", "Designer"),
)


def seed_employees(db: Session) -> int:
    existing = db.scalar(select(func.count(Employee.id)))
    if existing:
        return 0

    for name, department, role in SAMPLE_EMPLOYEES:
        db.add(Employee(name=name, department=department, role=role))
    db.commit()
    return len(SAMPLE_EMPLOYEES)
