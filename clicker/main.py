import logging

from dotenv import load_dotenv
from fastapi import FastAPI

from clicker.api.routes import router
from clicker.catalog.startup import init_catalog_for_app
from clicker.config import get_settings

# Local .env (REDIS_URL, CLICKER_*); real environment variables win.
load_dotenv(override=False)

app = FastAPI(title="cookie-clicker-engine", version="0.1.0")
app.include_router(router)
# Configure logging
logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger(__name__)


@app.on_event("startup")
async def _startup() -> None:
    init_catalog_for_app()
    settings = get_settings()
    logger.info(
        "engine settings: crit %.0f%% x%s, prestige at %s",
        settings.crit_chance * 100,
        settings.crit_multiplier,
        settings.prestige_threshold,
    )


@app.get("/info")
async def info() -> dict[str, str]:
    return {"name": "cookie-clicker-engine", "version": "0.1.0"}
