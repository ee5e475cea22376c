"""FastAPI application serving markdown uploads as reveal.js decks.

In ``static`` mode uploads are rendered to ``index.html`` and served from the
static directory. In ``proxy`` mode they are written for an external
presentation server that is restarted on each upload and proxied to.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exception_handlers import (
    http_exception_handler,
    request_validation_exception_handler,
)
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from easyslide import __version__, storage
from easyslide.api import delivery
from easyslide.api.upload import (
    CORS_HEADERS,
    UPLOAD_PATH,
    reject_oversized_upload,
    router as upload_router,
)
from easyslide.settings import DeliveryMode, Settings, get_settings
from easyslide.supervisor import RendererSupervisor

logger = logging.getLogger(__name__)


def _static_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        storage.ensure_static_default(settings.static_dir)

        async def publish(markdown: str) -> None:
            storage.publish_static(settings.static_dir, markdown)

        app.state.publish = publish
        logger.info(f"Serving presentations from {settings.static_dir}")
        yield

    return lifespan


def _proxy_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        document = storage.ensure_markdown_default(settings.slides_dir)
        supervisor = RendererSupervisor(
            settings.renderer_command,
            document,
            host=settings.renderer_host,
            port=settings.renderer_port,
            settle_seconds=settings.restart_settle_seconds,
            stop_timeout=settings.stop_timeout_seconds,
        )

        async def publish(markdown: str) -> None:
            storage.write_markdown(settings.slides_dir, markdown)
            supervisor.schedule_restart()

        app.state.supervisor = supervisor
        app.state.publish = publish
        app.state.http_client = httpx.AsyncClient(base_url=f"http://127.0.0.1:{settings.renderer_port}")
        supervisor.schedule_restart()
        logger.info(f"Proxying presentations to port {settings.renderer_port}")
        try:
            yield
        finally:
            await app.state.http_client.aclose()
            await supervisor.stop()

    return lifespan


async def _upload_http_error(request: Request, exc: StarletteHTTPException):
    if request.url.path != UPLOAD_PATH:
        return await http_exception_handler(request, exc)
    headers = {**CORS_HEADERS, **(exc.headers or {})}
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=headers)


async def _upload_validation_error(request: Request, exc: RequestValidationError):
    if request.url.path != UPLOAD_PATH:
        return await request_validation_exception_handler(request, exc)
    messages = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
    )
    return PlainTextResponse(messages or "Invalid upload", status_code=400, headers=CORS_HEADERS)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    if settings.mode is DeliveryMode.PROXY:
        lifespan = _proxy_lifespan(settings)
    else:
        lifespan = _static_lifespan(settings)

    app = FastAPI(title="Easy Slide", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.add_exception_handler(StarletteHTTPException, _upload_http_error)
    app.add_exception_handler(RequestValidationError, _upload_validation_error)
    app.middleware("http")(reject_oversized_upload)

    # /upload and /health must be registered before the catch-all delivery routes
    app.include_router(upload_router)
    if settings.mode is DeliveryMode.PROXY:
        app.include_router(delivery.router)
    else:
        settings.static_dir.mkdir(parents=True, exist_ok=True)
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="slides")

    return app
