import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from arcanaflow.api import draw_router, health_router, readings_router, ws_router
from arcanaflow.config import settings
from arcanaflow.db.database import init_db
from arcanaflow.services.card_catalog import get_card_catalog

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    await init_db()

    # Fail startup on a bad catalog rather than on the first connection
    catalog = get_card_catalog()
    logger.info("Card catalog loaded with %d cards", len(catalog))
    if not settings.anthropic_api_key:
        logger.warning("ANTHROPIC_API_KEY not set; readings use the fallback narration")
    yield


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("arcanaflow"),
    lifespan=lifespan,
)

app.include_router(draw_router)
app.include_router(health_router)
app.include_router(readings_router)
app.include_router(ws_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
