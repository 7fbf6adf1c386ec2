"""FastAPI server exposing shell sessions over WebSockets.

Client -> server frames::

    {"type": "key", "key": "a", "keyCode": 65, "altKey": false, ...}
    {"type": "paste", "data": "ls -la"}

Server -> client frames::

    {"type": "write", "data": "..."}
    {"type": "clear"}
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Annotated, Any, Literal, Union

import uvicorn
from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from termshell.commands import default_registry
from termshell.config.settings import Settings
from termshell.domain.models import KeyEvent
from termshell.shell.base import HostHandle, TerminalSurface
from termshell.shell.dispatcher import CommandFactory
from termshell.shell.host import ConfigHost
from termshell.shell.session import ShellSession
from termshell.terminal.buffer import LINE_BREAK

logger = logging.getLogger(__name__)


class KeyFrame(KeyEvent):
    type: Literal["key"] = "key"
    key: str = Field(description="Text the key produces (e.g., 'a', '\\r')")


class PasteFrame(BaseModel):
    type: Literal["paste"] = "paste"
    data: str = Field(description="Pasted text")


ClientFrame = Annotated[Union[KeyFrame, PasteFrame], Field(discriminator="type")]
CLIENT_FRAME = TypeAdapter(ClientFrame)


class EndpointStatus(BaseModel):
    status: str = "ok"
    sessions: int = 0


class WebSocketTerminal(TerminalSurface):
    """Queues output frames for a connection's sender task.

    Writes never block; frames go out in the order they were written.
    """

    def __init__(self) -> None:
        self.frames: asyncio.Queue[dict[str, str]] = asyncio.Queue()

    def write(self, text: str) -> None:
        self.frames.put_nowait({"type": "write", "data": text})

    def write_line(self, text: str) -> None:
        self.write(text + LINE_BREAK)

    def clear(self) -> None:
        self.frames.put_nowait({"type": "clear"})


def create_app(
    settings: Settings | None = None,
    registry: Mapping[str, CommandFactory] | None = None,
    host: HostHandle | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or Settings()

    app = FastAPI(
        title="termshell Endpoint",
        description="WebSocket terminal endpoint for termshell sessions",
        version="0.1.0",
    )

    app.state.registry = registry if registry is not None else default_registry()
    app.state.host = host or ConfigHost.from_settings(settings)
    app.state.sessions = 0

    @app.get("/health")
    async def health_check() -> EndpointStatus:
        return EndpointStatus(status="ok", sessions=app.state.sessions)

    @app.websocket("/terminal")
    async def terminal_session(websocket: WebSocket) -> None:
        await websocket.accept()
        terminal = WebSocketTerminal()
        session = ShellSession(
            app.state.registry, app.state.host, terminal, config=settings.shell
        )
        sender = asyncio.create_task(_send_frames(websocket, terminal))
        runner = asyncio.create_task(session.run())
        app.state.sessions += 1
        logger.info("Terminal session opened (%d active)", app.state.sessions)
        try:
            while True:
                try:
                    message = await websocket.receive_json()
                except ValueError:
                    logger.warning("Ignoring frame that is not JSON")
                    continue
                _handle_frame(session, message)
        except WebSocketDisconnect:
            logger.info("Terminal client disconnected")
        finally:
            app.state.sessions -= 1
            runner.cancel()
            sender.cancel()
            results = await asyncio.gather(runner, sender, return_exceptions=True)
            for result in results:
                if isinstance(result, Exception):
                    logger.error("Terminal session task failed: %s", result)

    return app


def _handle_frame(session: ShellSession, message: Any) -> None:
    try:
        frame = CLIENT_FRAME.validate_python(message)
    except ValidationError as e:
        logger.warning("Ignoring malformed frame: %s", e.errors()[0]["msg"])
        return
    if isinstance(frame, KeyFrame):
        session.handle_key(frame.key, frame)
    else:
        session.handle_paste(frame.data)


async def _send_frames(websocket: WebSocket, terminal: WebSocketTerminal) -> None:
    """Forward queued output frames to the client."""
    while True:
        frame = await terminal.frames.get()
        await websocket.send_json(frame)


def main() -> None:
    """Entry point for running the endpoint server standalone."""
    settings = Settings()
    app = create_app(settings)
    uvicorn.run(app, host=settings.endpoint.host, port=settings.endpoint.port)


if __name__ == "__main__":
    main()
