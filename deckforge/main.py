import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from deckforge.api import cards_router, decks_router, health_router
from deckforge.config import settings
from deckforge.models.failure import KnownError
from deckforge.services.card_database import registry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    logging.getLogger("deckforge").setLevel(settings.log_level.upper())
    if settings.card_data_path is not None:
        await registry.load_index_from_file(settings.card_data_path)
    else:
        logger.warning("DECKFORGE_CARD_DATA_PATH not set; card index stays empty")
    yield


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("deckforge"),
    debug=settings.debug,
    lifespan=lifespan,
)


@app.exception_handler(KnownError)
async def known_error_handler(_request: Request, exc: KnownError) -> JSONResponse:
    """Render a KnownError as {"failure": FailureDetail}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"failure": exc.to_detail().model_dump(mode="json")},
    )


app.include_router(cards_router)
app.include_router(decks_router)
app.include_router(health_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
