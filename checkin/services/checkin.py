from __future__ import annotations

import re
from typing import Any

from sqlalchemy.orm import Session

from checkin.core.errors import UnknownEmployeeError, ValidationError
from checkin.models import LOG_TYPES
from checkin.schemas import EnrichedLogOut, NewLogEvent
from checkin.services.store import RecordStore
from checkin.services.ws import EventBroadcaster


def _parse_employee_id(raw: Any) -> int:
    if isinstance(raw, bool):
        raise ValidationError("employeeId must be an integer")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and re.fullmatch(r"\d+", raw.strip(), re.ASCII):
        try:
            return int(raw.strip())
        except ValueError:
            # longer than the interpreter allows for int()
            raise ValidationError("employeeId must be an integer") from None
    raise ValidationError("employeeId must be an integer")


class CheckInService:
    def __init__(self, db: Session, broadcaster: EventBroadcaster) -> None:
        self.store = RecordStore(db)
        self.broadcaster = broadcaster

    def check_in_or_out(self, employee_id: Any, kind: Any) -> EnrichedLogOut:
        """Record one IN/OUT event and push it to every live subscriber.

        Nothing is written unless both fields validate and the employee exists.
        Repeating the employee's current state is accepted. Once the row is
        committed the check-in has succeeded, whatever happens during fan-out.
        """
        if employee_id in (None, "") or kind in (None, ""):
            raise ValidationError("Missing employeeId or type")
        employee_id = _parse_employee_id(employee_id)
        if kind not in LOG_TYPES:
            raise ValidationError("type must be one of IN, OUT")

        if self.store.get_employee(employee_id) is None:
            raise UnknownEmployeeError(employee_id)

        log = self.store.append_log(employee_id, kind)
        self.broadcaster.publish(NewLogEvent(data=log).model_dump(mode="json"))
        return log
