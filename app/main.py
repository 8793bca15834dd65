from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import structlog

from app.config import get_settings
from app.log import configure_logging
from app.api.routes import content, events, notifications, payments, providers, services, stats

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    settings = get_settings()
    configure_logging(settings.log_level)
    missing = settings.missing_for("anon")
    if missing:
        logger.warning("Supabase not fully configured", missing=missing)
    logger.info("Starting marketplace API...")
    yield
    # Shutdown
    logger.info("Shutting down marketplace API...")


app = FastAPI(
    title="Marketplace API",
    description="Operations API for the home-services marketplace",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes
app.include_router(stats.router)
app.include_router(content.router)
app.include_router(payments.router)
app.include_router(notifications.router)
app.include_router(services.router)
app.include_router(providers.router)
app.include_router(events.router)


@app.get("/")
async def root():
    return {"message": "Marketplace API", "version": "0.1.0"}


@app.get("/health")
async def health():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.port, reload=settings.debug)
