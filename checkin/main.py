from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from starlette.applications import Starlette
from starlette.exceptions import HTTPException
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route, WebSocketRoute
from starlette.websockets import WebSocket

from checkin.core.config import Settings, settings as default_settings
from checkin.core.errors import CheckInError, ValidationError
from checkin.core.startup import on_startup
from checkin.db.session import make_engine, make_session_factory
from checkin.schemas import CheckOut, EmployeeOut
from checkin.services.checkin import CheckInService
from checkin.services.presence_state import get_current_status
from checkin.services.store import RecordStore
from checkin.services.ws import EventBroadcaster, WebSocketSubscriber


async def health(_: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


async def list_employees(request: Request) -> JSONResponse:
    with request.app.state.session_factory() as db:
        employees = RecordStore(db).list_employees()
        return JSONResponse([EmployeeOut.model_validate(e).model_dump(mode="json") for e in employees])


async def current_status(request: Request) -> JSONResponse:
    with request.app.state.session_factory() as db:
        out = get_current_status(db)
        return JSONResponse([row.model_dump(mode="json") for row in out])


async def recent_logs(request: Request) -> JSONResponse:
    with request.app.state.session_factory() as db:
        logs = RecordStore(db).recent_logs()
        return JSONResponse([log.model_dump(mode="json") for log in logs])


async def check(request: Request) -> JSONResponse:
    try:
        payload = await request.json()
    except ValueError as exc:
        # JSONDecodeError and UnicodeDecodeError
        raise ValidationError("Request body must be JSON") from exc
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")

    with request.app.state.session_factory() as db:
        service = CheckInService(db, request.app.state.broadcaster)
        log = service.check_in_or_out(payload.get("employeeId"), payload.get("type"))
        return JSONResponse(CheckOut(log=log).model_dump(mode="json"))


async def ws_events(websocket: WebSocket) -> None:
    broadcaster: EventBroadcaster = websocket.app.state.broadcaster
    # Registered before accept: publish skips it until the handshake completes.
    handle = broadcaster.subscribe(WebSocketSubscriber(websocket))
    try:
        await websocket.accept()
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
    finally:
        broadcaster.unsubscribe(handle)


async def _checkin_error(_: Request, exc: CheckInError) -> JSONResponse:
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


async def _http_error(_: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)


routes = [
    Route("/api/health", endpoint=health, methods=["GET"]),
    Route("/api/employees", endpoint=list_employees, methods=["GET"]),
    Route("/api/status", endpoint=current_status, methods=["GET"]),
    Route("/api/logs", endpoint=recent_logs, methods=["GET"]),
    Route("/api/check", endpoint=check, methods=["POST"]),
    WebSocketRoute("/", endpoint=ws_events),
    WebSocketRoute("/ws", endpoint=ws_events),
]


def create_app(settings: Settings | None = None) -> Starlette:
    settings = settings or default_settings
    logging.getLogger("uvicorn.error").setLevel(settings.log_level)

    engine = make_engine(settings.database_url)
    session_factory = make_session_factory(engine)

    @asynccontextmanager
    async def lifespan(_: Starlette):
        on_startup(settings, engine, session_factory)
        yield
        engine.dispose()

    app = Starlette(
        debug=settings.environment == "dev",
        routes=routes,
        lifespan=lifespan,
        exception_handlers={CheckInError: _checkin_error, HTTPException: _http_error},
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.broadcaster = EventBroadcaster(send_timeout=settings.ws_send_timeout_seconds)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("checkin.main:app", host="0.0.0.0", port=3000)
