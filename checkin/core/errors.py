from __future__ import annotations

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
)


class CheckInError(Exception):
    """Base error for the tracker. ``status_code`` is what the API answers with."""

    status_code = HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(CheckInError):
    status_code = HTTP_400_BAD_REQUEST


class UnknownEmployeeError(CheckInError):
    status_code = HTTP_404_NOT_FOUND

    def __init__(self, employee_id: int) -> None:
        super().__init__(f"Employee {employee_id} does not exist")
        self.employee_id = employee_id


class StorageError(CheckInError):
    status_code = HTTP_500_INTERNAL_SERVER_ERROR


class ChannelError(CheckInError):
    # Raised and swallowed inside the broadcaster only.
    pass
