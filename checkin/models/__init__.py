from checkin.models.employee import Employee
from checkin.models.log import LOG_TYPES, LogEntry

__all__ = ["Employee", "LogEntry", "LOG_TYPES"]
