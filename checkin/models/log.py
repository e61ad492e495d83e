from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from checkin.db.base import Base

LOG_TYPES = ("IN", "OUT")


class LogEntry(Base):
    """One check-in or check-out. Rows are only ever inserted."""

    __tablename__ = "logs"
    __table_args__ = (
        CheckConstraint("type IN ('IN', 'OUT')", name="ck_logs_type"),
        Index("ix_logs_employee_ts", "employee_id", "timestamp", "id"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_id: Mapped[int] = mapped_column(Integer, ForeignKey("employees.id"), nullable=False)
    type: Mapped[str] = mapped_column(String(3))
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), index=True
    )
