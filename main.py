"""
Impearl accounts service — application entry point.

Run with ``python main.py`` or ``uvicorn main:create_app --factory``.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles

from api.middleware import register_exception_handlers, register_middleware
from api.profile import client_router, freelancer_router
from api.routes import router as api_router
from api.uploads import URL_PREFIX, UploadStorage
from auth.routes import router as auth_router
from auth.tokens import TokenService
from config.settings import Settings, get_settings
from database.account_store import AccountStore
from database.session import build_engine, build_session_factory, init_models

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
        stream=sys.stdout,
    )
    for _noisy in ("sqlalchemy.engine", "multipart", "aiosqlite"):
        logging.getLogger(_noisy).setLevel(logging.WARNING)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    engine = build_engine(settings.database_url)
    upload_storage = UploadStorage(settings.upload_dir, settings.max_upload_bytes)
    upload_storage.ensure_directory()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await init_models(engine)
        logger.info("Application ready to accept requests.")
        yield
        await engine.dispose()

    app = FastAPI(
        title="Impearl Accounts",
        version="1.0.0",
        description="Client / freelancer registration, login and profiles.",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.token_service = TokenService(settings.jwt_secret, settings.jwt_expiry_seconds)
    app.state.account_store = AccountStore(build_session_factory(engine))
    app.state.upload_storage = upload_storage

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)
    register_exception_handlers(app)

    # Routes
    app.include_router(auth_router, prefix="/api")
    app.include_router(client_router, prefix="/api")
    app.include_router(freelancer_router, prefix="/api")
    app.include_router(api_router, prefix="/api")

    app.mount(
        f"/{URL_PREFIX}",
        StaticFiles(directory=str(upload_storage.directory)),
        name="uploads",
    )

    @app.get("/", response_class=PlainTextResponse)
    async def root() -> str:
        return "Backend running!"

    return app


if __name__ == "__main__":
    _settings = get_settings()
    uvicorn.run(
        create_app(_settings),
        host=_settings.host,
        port=_settings.port,
        log_level="debug" if _settings.debug else "info",
    )
