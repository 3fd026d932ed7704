"""FastAPI application exposing the snapshot store over HTTP.

Routes:
    GET  /snapshots/latest   newest full record, 404 when empty
    GET  /snapshots?limit=N  newest N records without snapshot payload
    POST /snapshots          append a record, 400 on invalid payload
"""

import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from breakoutrl.server.config import ServerConfig
from breakoutrl.server.models import (
    Message,
    SnapshotCreate,
    SnapshotCreated,
    SnapshotRecord,
    SnapshotSummary,
)
from breakoutrl.server.snapshot_store import DEFAULT_PAGE_LIMIT, SnapshotStore

logger = logging.getLogger(__name__)

_FIELD_MESSAGES = {
    "episode": "episode must be a number",
    "stats": "stats object is required",
    "snapshot": "snapshot object is required",
    "limit": "limit must be an integer",
}


def validation_message(errors: list[dict]) -> str:
    """Turn the first pydantic error into a short client-facing message."""
    if not errors:
        return "Invalid request"
    error = errors[0]
    loc = [part for part in error.get("loc", ()) if part not in ("body", "query")]
    if not loc:
        if error.get("type") == "missing":
            return "Missing JSON body"
        return "Request body must be a JSON object"
    return _FIELD_MESSAGES.get(str(loc[0]), error.get("msg", "Invalid request"))


def create_app(store: SnapshotStore | None = None, config: ServerConfig | None = None) -> FastAPI:
    config = config or ServerConfig.from_env()
    if store is None:
        store = SnapshotStore(config.snapshot_file, max_snapshots=config.max_snapshots)

    app = FastAPI(title="Breakout snapshot service")
    app.state.store = store
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        message = validation_message(exc.errors())
        logger.warning("Rejected %s %s: %s", request.method, request.url.path, message)
        return JSONResponse(status_code=400, content={"message": message})

    @app.get(
        "/snapshots/latest",
        response_model=SnapshotRecord,
        responses={404: {"model": Message}},
    )
    def read_latest():
        record = store.latest()
        if record is None:
            return JSONResponse(status_code=404, content={"message": "No snapshots stored yet"})
        return record

    @app.get("/snapshots", response_model=list[SnapshotSummary])
    def read_page(limit: int = DEFAULT_PAGE_LIMIT):
        return store.page(limit)

    @app.post(
        "/snapshots",
        status_code=201,
        response_model=SnapshotCreated,
        responses={400: {"model": Message}},
    )
    def append_snapshot(payload: SnapshotCreate):
        return store.append(payload.episode, payload.stats, payload.snapshot)

    return app


def main():
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    config = ServerConfig.from_env()
    app = create_app(config=config)
    logger.info(
        "Snapshot server listening on http://%s:%d (max %d snapshots)",
        config.host,
        config.port,
        config.max_snapshots,
    )
    uvicorn.run(app, host=config.host, port=config.port)


if __name__ == "__main__":
    main()
