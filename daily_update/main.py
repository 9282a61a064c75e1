"""FastAPI entrypoint for the daily update service."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from daily_update import update_tools
from daily_update.config import load_config
from daily_update.errors import UpdateError, error_response
from daily_update.logging_setup import configure_logging
from daily_update.notices import NoticeBoard
from daily_update.orchestrator import build_updater, run_guarded

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        config = load_config()
        configure_logging(config.log_level)
        app.state.config = config
        app.state.notices = NoticeBoard()
        logger.info("Vault ready at %s", config.vault_path)
        if config.run_on_startup:
            updater = build_updater(config, app.state.notices)
            run_guarded(updater.run, app.state.notices)
        yield

    app = FastAPI(lifespan=lifespan)

    @app.exception_handler(UpdateError)
    def handle_update_error(request: Request, exc: UpdateError) -> JSONResponse:
        return JSONResponse(status_code=400, content=error_response(exc.error))

    @app.get("/health", status_code=200)
    def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(update_tools.update_router)
    return app


app = create_app()
