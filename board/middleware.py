import logging
import time

from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from board.database import statement_count_var

logger = logging.getLogger(__name__)


class RequestStatsMiddleware:
    """
    Adds ``X-Response-Time-Ms`` and ``X-Query-Count`` to every HTTP
    response and logs one DEBUG line per request.

    ``X-Query-Count`` is the number of statements the storage gateway ran
    for the request (see ``board.database.statement_count_var``).  The
    inner app runs in this task, so the gateway's counter updates are
    visible here; a ``BaseHTTPMiddleware`` would hide them.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        statement_count_var.set(0)
        start = time.perf_counter()

        async def send_with_stats(message: Message) -> None:
            if message["type"] == "http.response.start":
                elapsed_ms = (time.perf_counter() - start) * 1000
                statements = statement_count_var.get()
                message.setdefault("headers", [])
                headers = MutableHeaders(scope=message)
                headers.append("X-Response-Time-Ms", f"{elapsed_ms:.2f}")
                headers.append("X-Query-Count", str(statements))
                logger.debug(
                    "%s %s -> %d in %.2fms, %d statement(s)",
                    scope["method"], scope["path"], message["status"], elapsed_ms, statements,
                )
            await send(message)

        await self.app(scope, receive, send_with_stats)
