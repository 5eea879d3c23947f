"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.errors import TemplateValidationError

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.shotframe_log_level.upper(), logging.DEBUG),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title="ShotFrame",
        description="Marketing screenshot composer: device mockups, overlay text and templates",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Built-in templates are loaded once per app
    from app.templates.registry import TemplateRegistry

    app.state.templates = TemplateRegistry.with_builtins()
    logger.info("Loaded %d built-in templates", app.state.templates.count)

    @app.exception_handler(TemplateValidationError)
    async def _template_error(request: Request, exc: TemplateValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc), "errors": exc.details})

    from app.api.router import api_router

    app.include_router(api_router)

    return app


app = create_app()
