from __future__ import annotations

import asyncio
import logging
import socket
import sys

import uvicorn
from fastapi import FastAPI

from agent_core.api.routes import router
from agent_core.config import AGENT_VERSION, Settings
from agent_core.engine import Heartbeat

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [agent-core] %(levelname)s %(name)s: %(message)s"


class ListenerBindError(RuntimeError):
    """The HTTP listener could not bind and the agent is configured to treat that as fatal."""


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def create_app(settings: Settings) -> FastAPI:
    app = FastAPI(
        title="agent-core",
        version=AGENT_VERSION,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.include_router(router)
    return app


class AgentService:
    """Owns the heartbeat and the HTTP status listener for one agent process.

    The heartbeat runs independently of the listener: if the port cannot be
    bound the agent keeps writing its status file without serving HTTP,
    unless ``exit_on_bind_error`` is set.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.app = create_app(settings)
        self.heartbeat = Heartbeat(settings)
        self._server: uvicorn.Server | None = None
        self._socket: socket.socket | None = None
        self._stop = asyncio.Event()

    # ── listener ────────────────────────────────────────

    def bind(self) -> socket.socket | None:
        """Bind the listener socket; log and return ``None`` on failure."""
        if self._socket is not None:
            return self._socket

        host, port = self.settings.agent_host, self.settings.agent_port
        family = socket.AF_INET6 if ":" in host else socket.AF_INET
        sock = socket.socket(family, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((host, port))
        except OSError as exc:
            sock.close()
            logger.error("HTTP server error: %s", exc)
            return None

        self._socket = sock
        return sock

    @property
    def port(self) -> int | None:
        if self._socket is None:
            return None
        return self._socket.getsockname()[1]

    @property
    def serving(self) -> bool:
        return self._server is not None and self._server.started

    # ── lifecycle ───────────────────────────────────────

    async def run(self) -> None:
        logger.info("starting with config: %s", self.settings.model_dump())
        await self.heartbeat.start()
        try:
            sock = self.bind()
            if sock is None:
                if self.settings.exit_on_bind_error:
                    raise ListenerBindError(
                        f"cannot listen on {self.settings.agent_host}:{self.settings.agent_port}"
                    )
                logger.warning("Continuing without HTTP status listener")
                await self._stop.wait()
                return

            if self._stop.is_set():
                return

            config = uvicorn.Config(
                self.app,
                lifespan="off",
                log_config=None,
                log_level=self.settings.log_level.lower(),
            )
            self._server = uvicorn.Server(config)
            logger.info(
                "HTTP status listening on %s:%d (name=%s)",
                self.settings.agent_host,
                self.port,
                self.settings.agent_name,
            )
            await self._server.serve(sockets=[sock])
        finally:
            await self.heartbeat.stop()
            if self._socket is not None:
                self._socket.close()
                self._socket = None
            self._server = None

    def request_stop(self) -> None:
        self._stop.set()
        if self._server is not None:
            self._server.should_exit = True


def main() -> int:
    settings = Settings()
    configure_logging(settings.log_level)
    service = AgentService(settings)
    try:
        asyncio.run(service.run())
    except ListenerBindError as exc:
        logger.error("Exiting: %s", exc)
        return 1
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())
