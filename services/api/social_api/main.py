"""
Social Feed API — entry point.

Startup sequence:
  1. Configure OTel tracing (→ Jaeger via OTLP) when enabled
  2. Create tables if not present
  3. Expose Prometheus /metrics endpoint
"""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.templating import Jinja2Templates
from prometheus_client import make_asgi_app

from social_api.config import settings
from social_api.database import init_db
from social_api.telemetry import setup_tracing, instrument_app
from social_api.routers import businesses, feed, pages, posts, users

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
)
logger = logging.getLogger(__name__)

# Set up tracing before the app is created so all imports are instrumented
setup_tracing()

TEMPLATE_DIR = Path(__file__).resolve().parent / "ui" / "templates"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Social Feed API (env=%s)", settings.environment)
    await init_db()
    logger.info("Database ready. API ready.")
    yield
    logger.info("Shutting down...")


app = FastAPI(
    title="Social Feed API",
    description="Tabbed post timeline, follows, likes and comments.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.tpl = Jinja2Templates(directory=str(TEMPLATE_DIR))

# ── Routers ────────────────────────────────────────────────────────────────
app.include_router(pages.router, tags=["Pages"])
app.include_router(users.router, prefix="/users", tags=["Users"])
app.include_router(businesses.router, prefix="/businesses", tags=["Businesses"])
app.include_router(posts.router, prefix="/posts", tags=["Posts"])
app.include_router(feed.router, prefix="/feed", tags=["Feed"])

# ── Prometheus metrics endpoint ────────────────────────────────────────────
metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)

instrument_app(app)


@app.get("/health", tags=["Health"])
async def health():
    return {"status": "ok", "service": settings.service_name}
