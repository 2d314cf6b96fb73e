"""FastAPI application entrypoint: `uvicorn src.main:app`"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.routes import router
from src.core.config import get_settings
from src.core.exceptions import (
    GameError,
    NotYourTurnError,
    RepositoryError,
    StaleGameError,
)
from src.core.logging_config import configure_logging
from src.db.database import init_db

logger = logging.getLogger(__name__)

# Most specific first. Anything else derived from GameError is a bad request.
ERROR_STATUS_CODES: list[tuple[type[GameError], int]] = [
    (StaleGameError, status.HTTP_409_CONFLICT),
    (RepositoryError, status.HTTP_404_NOT_FOUND),
    (NotYourTurnError, status.HTTP_403_FORBIDDEN),
]


def status_code_for(error: GameError) -> int:
    return next(
        (code for error_type, code in ERROR_STATUS_CODES if isinstance(error, error_type)),
        status.HTTP_400_BAD_REQUEST,
    )


async def game_error_handler(request: Request, exc: GameError) -> JSONResponse:
    code = status_code_for(exc)
    logger.info("%s %s --> %d %s: %s", request.method, request.url.path, code, type(exc).__name__, exc)
    return JSONResponse(status_code=code, content={"detail": str(exc)})


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Xiangqi Game Service", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(GameError, game_error_handler)
    app.include_router(router)
    return app


app = create_app()
