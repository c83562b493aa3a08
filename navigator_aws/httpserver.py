"""
HTTP Server: aiohttp application with request logging.

Requests to health check endpoints (``/healthz`` and ``/``) are not logged.
"""
import time
from collections.abc import Awaitable, Callable
from typing import Optional

from aiohttp import web

from .log import Logger, get_logger

HEALTH_PATHS = frozenset({"/healthz", "/"})

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def request_logger(logger: Optional[Logger] = None):
    """Build a middleware logging completed requests and handler failures."""
    log = get_logger(logger)

    @web.middleware
    async def middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
        if request.path in HEALTH_PATHS:
            return await handler(request)
        started = time.monotonic()
        try:
            response = await handler(request)
        except web.HTTPException as exc:
            _completed(log, request, exc.status, exc.content_length, started)
            raise
        except Exception as exc:
            log.error(
                "HTTP request panic",
                method=request.method,
                path=request.path,
                panic=repr(exc),
            )
            raise
        _completed(
            log, request, response.status, response.content_length, started,
        )
        return response

    return middleware


def _completed(
    log: Logger,
    request: web.Request,
    status: int,
    size: Optional[int],
    started: float,
) -> None:
    log.info(
        "HTTP request completed",
        method=request.method,
        path=request.path,
        status=status,
        bytes=size or 0,
        elapsed=round(time.monotonic() - started, 6),
    )


class HTTPServer:
    """aiohttp application wrapper.

    Register routes on ``router`` (or ``app``) before calling ``start()``
    or ``run()``.
    """

    def __init__(
        self,
        logger: Optional[Logger] = None,
        port: int = 8080,
        host: str = "0.0.0.0",
    ):
        self._logger = get_logger(logger)
        self.host = host
        self.port = port
        self.app = web.Application(middlewares=[request_logger(self._logger)])
        self._runner: Optional[web.AppRunner] = None

    @property
    def router(self) -> web.UrlDispatcher:
        return self.app.router

    async def start(self) -> None:
        """Start serving without blocking the event loop."""
        self._runner = web.AppRunner(self.app, access_log=None)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.host, self.port)
        await site.start()
        self._logger.info("HTTP server started", host=self.host, port=self.port)

    async def stop(self) -> None:
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
            self._logger.info("HTTP server stopped")

    def run(self) -> None:
        """Serve until interrupted."""
        web.run_app(
            self.app, host=self.host, port=self.port, access_log=None, print=None,
        )
