# app/api/middleware.py
import asyncio

from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.domain.errors import RequestTimeoutError
from app.utils.deadline import request_deadline, start_deadline
from app.utils.logging import get_logger

logger = get_logger(__name__)


class RequestTimeoutMiddleware:
    """
    Limit czasu na caly request. Po przekroczeniu handler jest anulowany
    i klient dostaje 504 TimeoutError (o ile odpowiedz nie zaczela juz isc).
    """

    def __init__(self, app: ASGIApp, timeout: float):
        self.app = app
        self.timeout = timeout

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        #termin widoczny tez w threadpoolu handlera, transaction() sprawdza go przed commitem
        token = start_deadline(self.timeout)
        try:
            await asyncio.wait_for(self.app(scope, receive, send_wrapper), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.error(f"{scope['method']} {scope['path']} timed out after {self.timeout}s")
            if started:
                raise

            exc = RequestTimeoutError(f"Request exceeded {self.timeout}s")
            response = JSONResponse(
                status_code=exc.status_code,
                content={"error": exc.error, "detail": exc.detail},
            )
            await response(scope, receive, send)
        finally:
            request_deadline.reset(token)
