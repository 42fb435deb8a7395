from __future__ import annotations

import logging
import socket
import time
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, Response

from contact import router as contact_router
from core import db, settings
from core.errors import ApiError, ValidationFailed, field_errors
from core.logging import configure_logging, request_log_line
from storage import uses_database

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    # The memory backend needs no pool.
    if not uses_database():
        logger.warning("STORAGE_BACKEND=memory: contact messages are not persisted")
        yield
        return

    await db.init_pool()
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(title="Boppa Golf API", lifespan=lifespan)

# Allow the front end dev server to call this API from the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_api_requests(request: Request, call_next):
    path = request.url.path
    if not path.startswith("/api"):
        return await call_next(request)

    start = time.perf_counter()
    # Stays 500 if call_next raises; the error handler renders that response.
    status_code = 500
    response_body: str | None = None
    try:
        response = await call_next(request)
        status_code = response.status_code
        if response.headers.get("content-type", "").startswith("application/json"):
            body = b"".join([chunk async for chunk in response.body_iterator])
            response_body = body.decode("utf-8", errors="replace")
            response = Response(content=body, status_code=status_code, headers=dict(response.headers))
        return response
    finally:
        duration_ms = int((time.perf_counter() - start) * 1000)
        logger.info(request_log_line(request.method, path, status_code, duration_ms, response_body))


@app.exception_handler(ApiError)
async def api_error_handler(_: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    error = ValidationFailed(field_errors(list(exc.errors())))
    return JSONResponse(status_code=error.status_code, content=error.to_payload())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unhandled_error %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Internal Server Error"},
    )


app.include_router(contact_router.router, tags=["contact"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


def mount_frontend(target: FastAPI, directory: str | Path) -> None:
    """
    Serve the built site from `directory`.

    Unknown paths fall back to index.html so client-side routes resolve;
    unknown /api paths stay JSON 404s.
    """
    root = Path(directory).resolve()
    index = root / "index.html"

    @target.get("/{full_path:path}", include_in_schema=False)
    async def frontend(full_path: str):
        if full_path == "api" or full_path.startswith("api/"):
            raise ApiError(404, "Not found")

        candidate = (root / full_path).resolve()
        if candidate.is_file() and candidate.is_relative_to(root):
            return FileResponse(candidate)
        if index.is_file():
            return FileResponse(index)
        raise ApiError(404, "Not found")


_static_dir = settings.static_dir()
if _static_dir and Path(_static_dir).is_dir():
    mount_frontend(app, _static_dir)


def _port_is_free(host: str, port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        try:
            sock.bind((host, port))
        except OSError:
            return False
    return True


def run() -> None:
    host = settings.host()
    for port in settings.candidate_ports():
        if not _port_is_free(host, port):
            logger.warning("Port %s is already in use, trying next port...", port)
            continue
        logger.info("Server starting on %s:%s", host, port)
        uvicorn.run(app, host=host, port=port, log_config=None)
        return None

    logger.error("All candidate ports are in use.")
    raise SystemExit(1)


if __name__ == "__main__":
    run()
