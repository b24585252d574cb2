import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from agetags.routes.health import router as health_router
from agetags.routes.age import router as age_router
from agetags.config import TMDB_API_KEY, TMDB_BASE_URL, TMDB_RATE_PER_SEC
from etl.tmdb_client import TMDBClient

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logging.getLogger("agetags.core.age_resolver").setLevel(logging.DEBUG)
# Reduce noise from other modules
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.INFO)


def _build_tmdb_client():
    if not TMDB_API_KEY:
        return None
    return TMDBClient(
        TMDB_API_KEY, base_url=TMDB_BASE_URL, rate_per_sec=TMDB_RATE_PER_SEC
    )


@asynccontextmanager
async def app_lifespan(app: FastAPI):
    if getattr(app.state, "tmdb_client", None) is None:
        app.state.tmdb_client = _build_tmdb_client()
    yield
    client = getattr(app.state, "tmdb_client", None)
    if client is not None:
        await client.aclose()
        app.state.tmdb_client = None


app = FastAPI(title="Age Tags", version="0.1.0", lifespan=app_lifespan)

app.include_router(health_router, prefix="")
app.include_router(age_router)
