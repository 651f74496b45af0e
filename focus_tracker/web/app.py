from __future__ import annotations

from fastapi import FastAPI

from focus_tracker import __version__
from focus_tracker.config import AppConfig
from focus_tracker.web.middleware import SecurityHeadersMiddleware
from focus_tracker.web.routes import router


def create_app(config: AppConfig) -> FastAPI:
    docs_enabled = bool(config.dev_enable_docs)

    app = FastAPI(
        title="Focus Tracker Insights",
        version=__version__,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
    )
    app.state.config = config

    app.add_middleware(SecurityHeadersMiddleware)
    app.include_router(router)

    return app
