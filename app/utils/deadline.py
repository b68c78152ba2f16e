# app/utils/deadline.py
import time
from contextvars import ContextVar

from app.domain.errors import RequestTimeoutError

#monotoniczny termin biezacego requestu, None poza requestem
request_deadline: ContextVar[float | None] = ContextVar("request_deadline", default=None)


def start_deadline(timeout: float):
    return request_deadline.set(time.monotonic() + timeout)


def check_deadline() -> None:
    """Handler ktory przekroczyl limit nie moze juz nic zapisac - klient dostal 504."""
    deadline = request_deadline.get()
    if deadline is not None and time.monotonic() > deadline:
        raise RequestTimeoutError("Request deadline exceeded before commit")
