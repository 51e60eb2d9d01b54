from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.http_setup import register_exception_handlers, register_http_middleware
from app.api.runtime_routes import RuntimeRouteDeps, register_runtime_routes
from app.core.config import AppConfig
from app.core.logging import setup_logging
from app.documents.router import create_documents_router
from app.documents.service import DocumentsService, build_documents_service

load_dotenv()
APP_CONFIG = AppConfig.from_env()
setup_logging(APP_CONFIG.logging.level)
LOGGER = logging.getLogger(__name__)


def create_app(
    config: AppConfig | None = None,
    service: DocumentsService | None = None,
) -> FastAPI:
    config = config or APP_CONFIG
    service = service or build_documents_service(config)

    app = FastAPI(title="Vehicle Transfer Documents API", version="1.0.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.security.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
        expose_headers=["Content-Disposition", "X-Request-ID"],
    )
    register_http_middleware(app, config=config, logger=LOGGER)
    register_exception_handlers(app, logger=LOGGER)

    app.include_router(create_documents_router(service=service))
    register_runtime_routes(app, deps=RuntimeRouteDeps(config=config, service=service))
    return app


app = create_app()
