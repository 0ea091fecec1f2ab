"""
Schedule error taxonomy and the FastAPI handlers that turn it into the
standard response envelope.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from periodtiming.utils.response import error_response


class ScheduleError(Exception):
    """Base class for every period-schedule failure."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class IndexOutOfRange(ScheduleError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, index: int, count: int):
        super().__init__(f"Index {index} is outside the list bounds [0, {count})")
        self.index = index
        self.count = count


class InvalidValue(ScheduleError):
    def __init__(self, field: str, value, reason: str = "invalid value"):
        super().__init__(f"{field}: {reason} ({value!r})")
        self.field = field
        self.value = value


class DuplicateNameError(ScheduleError):
    def __init__(self, names):
        self.names = sorted(names)
        super().__init__(
            "Period names must be unique. Please fix duplicate names: " + ", ".join(self.names)
        )


class DuplicatePeriodNumber(ScheduleError):
    """Informational: duplicate period numbers were found and renumbered."""

    def __init__(self, numbers):
        self.numbers = sorted(set(numbers))
        super().__init__(
            "Duplicate period numbers "
            + ", ".join(str(n) for n in self.numbers)
            + " were renumbered sequentially"
        )


class ScheduleStoreError(ScheduleError):
    status_code = status.HTTP_502_BAD_GATEWAY


async def schedule_error_handler(request: Request, exc: ScheduleError):
    data = None
    if isinstance(exc, DuplicateNameError):
        data = {"duplicate_names": exc.names}
    return JSONResponse(status_code=exc.status_code, content=error_response(exc.message, data=data))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ScheduleError, schedule_error_handler)
