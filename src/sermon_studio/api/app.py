"""FastAPI application factory."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager, suppress
from typing import Literal

from fastapi import FastAPI, HTTPException, Request, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import TypeAdapter, ValidationError

from sermon_studio.api.models import (
    NotesSessionResponse,
    PassageRequest,
    SermonSessionResponse,
)
from sermon_studio.api.workspace import router as workspace_router
from sermon_studio.app_logging import configure_logging
from sermon_studio.config import parse_allowed_origins
from sermon_studio.containers import AppContainer
from sermon_studio.domain.passages import PassageQuery
from sermon_studio.domain.presentation import (
    PRESENTATION_UPDATE_ADAPTER,
    SERMON_MESSAGE_ADAPTER,
)
from sermon_studio.services.channel import PresentationChannel
from sermon_studio.services.live_sessions import (
    NOTES_PREFIX,
    SERMON_PREFIX,
    generate_session_id,
)
from sermon_studio.services.passages import PassageFetchError

_logger = logging.getLogger(__name__)


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_allowed_origins(container.settings.cors_allow_origins),
        allow_methods=["*"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    )
    app.include_router(workspace_router)

    @app.exception_handler(PassageFetchError)
    async def passage_error_handler(
        request: Request, exc: PassageFetchError
    ) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.as_body())

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/esv-bible")
    async def esv_bible(request: Request) -> dict[str, object]:
        """Proxy a passage lookup to the ESV API."""
        try:
            raw = await request.json()
            body = PassageRequest.model_validate(raw)
        except (ValueError, ValidationError) as exc:
            raise PassageFetchError(500, str(exc) or "Invalid request body") from exc
        state_container: AppContainer = request.app.state.container
        passage = await state_container.passage_service.fetch(
            PassageQuery(
                passage=body.passage or "",
                include_verse_numbers=body.include_verse_numbers,
                include_headings=body.include_headings,
            )
        )
        return passage.as_dict()

    @app.post("/live/notes")
    async def start_notes_session(request: Request) -> dict[str, str]:
        """Allocate a notes presentation session."""
        state_container: AppContainer = request.app.state.container
        session_id = generate_session_id(NOTES_PREFIX)
        response = NotesSessionResponse(
            session_id=session_id,
            audience_url=state_container.live_urls.notes_audience_url(session_id),
        )
        return response.model_dump(by_alias=True)

    @app.post("/live/sermons")
    async def start_sermon_session(request: Request) -> dict[str, str]:
        """Allocate a sermon presentation session."""
        state_container: AppContainer = request.app.state.container
        urls = state_container.live_urls.sermon_urls(
            generate_session_id(SERMON_PREFIX)
        )
        response = SermonSessionResponse(
            session_id=urls.session_id,
            audience_url=urls.audience_url,
            presenter_url=urls.presenter_url,
        )
        return response.model_dump(by_alias=True)

    @app.get("/settings/presentation")
    async def get_presentation_settings(request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        settings = state_container.display_settings.load()
        return settings.model_dump(mode="json", by_alias=True)

    @app.put("/settings/presentation")
    async def put_presentation_settings(
        changes: dict[str, object], request: Request
    ) -> dict[str, object]:
        """Merge a partial settings object into the stored settings."""
        state_container: AppContainer = request.app.state.container
        try:
            settings = state_container.display_settings.update(changes)
        except ValidationError as exc:
            raise HTTPException(
                status_code=422, detail=exc.errors(include_url=False, include_context=False)
            ) from exc
        return settings.model_dump(mode="json", by_alias=True)

    @app.websocket("/ws/notes/{session_id}/presenter")
    async def notes_presenter_socket(websocket: WebSocket, session_id: str) -> None:
        channel = await _container(websocket).channels.notes_channel(session_id)
        await _bridge(websocket, channel, PRESENTATION_UPDATE_ADAPTER, "presenter")

    @app.websocket("/ws/notes/{session_id}/audience")
    async def notes_audience_socket(websocket: WebSocket, session_id: str) -> None:
        channel = await _container(websocket).channels.notes_channel(session_id)
        await _bridge(websocket, channel, PRESENTATION_UPDATE_ADAPTER, "audience")

    @app.websocket("/ws/sermons/{session_id}/presenter")
    async def sermon_presenter_socket(websocket: WebSocket, session_id: str) -> None:
        channel = await _container(websocket).channels.sermon_channel(session_id)
        await _bridge(websocket, channel, SERMON_MESSAGE_ADAPTER, "presenter")

    @app.websocket("/ws/sermons/{session_id}/audience")
    async def sermon_audience_socket(websocket: WebSocket, session_id: str) -> None:
        channel = await _container(websocket).channels.sermon_channel(session_id)
        await _bridge(websocket, channel, SERMON_MESSAGE_ADAPTER, "audience")

    return app


def _container(websocket: WebSocket) -> AppContainer:
    return websocket.app.state.container


async def _bridge(
    websocket: WebSocket,
    channel: PresentationChannel,
    adapter: TypeAdapter,
    role: Literal["presenter", "audience"],
) -> None:
    """Relay between one browser socket and a presentation channel.

    Presenters publish what they send and receive audience counts. Audience
    sockets receive every broadcast. The channel is joined before the socket
    is accepted so nothing sent after the handshake is missed.
    """
    outbox: asyncio.Queue[dict[str, object]] = asyncio.Queue()

    def forward(message: object) -> None:
        outbox.put_nowait(
            adapter.dump_python(message, mode="json", by_alias=True, exclude_none=True)
        )

    def report_presence(count: int) -> None:
        outbox.put_nowait({"type": "presence", "audience": count})

    if role == "presenter":
        channel.on_presence(report_presence)
    else:
        await channel.subscribe(forward)
    await channel.track(role)
    await websocket.accept()
    _logger.info("%s socket joined %s", role.capitalize(), channel.topic_name)

    reader = asyncio.create_task(_read_client(websocket, channel, adapter, role, outbox))
    writer = asyncio.create_task(_write_client(websocket, outbox))
    try:
        await asyncio.wait({reader, writer}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in (reader, writer):
            task.cancel()
            with suppress(asyncio.CancelledError, WebSocketDisconnect, RuntimeError):
                await task
        await channel.unsubscribe()
        _logger.info("%s socket left %s", role.capitalize(), channel.topic_name)


async def _read_client(
    websocket: WebSocket,
    channel: PresentationChannel,
    adapter: TypeAdapter,
    role: str,
    outbox: asyncio.Queue[dict[str, object]],
) -> None:
    try:
        while True:
            text = await websocket.receive_text()
            if role != "presenter":
                continue
            try:
                message = adapter.validate_json(text)
            except ValidationError as exc:
                _logger.warning("Rejected presenter message on %s", channel.topic_name)
                outbox.put_nowait({"type": "error", "error": _first_error(exc)})
                continue
            await channel.send(message)
    except WebSocketDisconnect:
        return


async def _write_client(
    websocket: WebSocket, outbox: asyncio.Queue[dict[str, object]]
) -> None:
    while True:
        message = await outbox.get()
        await websocket.send_json(message)


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors(include_url=False)
    if not errors:
        return "Invalid message"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first['msg']}" if location else str(first["msg"])
