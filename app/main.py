"""
app/main.py

Purpose: Application entry point

- Initializes FastAPI app
- Loads configuration and logging
- Loads the JSON datastore (startup fails if it cannot be read)
- Registers API routes and exception handlers
- No business logic should be written here
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import time

from app.core.config import settings, validate_settings
from app.core.errors import add_exception_handlers
from app.core.logging import setup_logging, get_logger
from app.db.store import init_store, close_store, check_store_health
from app.api import auth, catalog, orders, users

# Initialize logging first
setup_logging()
logger = get_logger(__name__)

APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    logger.info("🚀 Starting storefront API...")

    try:
        logger.info("Validating configuration...")
        validate_settings()
        logger.info("✅ Configuration validated")

        logger.info(f"Loading datastore from {settings.DB_PATH}...")
        init_store(settings.DB_PATH)
        logger.info("✅ Datastore loaded")

        logger.info("🎉 Storefront API started successfully!")
        logger.info(f"Environment: {settings.ENVIRONMENT}")
        logger.info(f"Token scheme: {settings.TOKEN_SCHEME}")

    except Exception as e:
        logger.critical(f"Failed to start application: {str(e)}", exc_info=True)
        raise

    yield  # Application runs here

    logger.info("🛑 Shutting down storefront API...")
    close_store()
    logger.info("👋 Storefront API shut down")


app = FastAPI(
    title="Storefront API",
    description="Menu, ordering and account backend for the food-ordering storefront",
    version=APP_VERSION,
    lifespan=lifespan,
    debug=settings.DEBUG,
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add processing time header to all responses."""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)

    if process_time > 2.0:
        logger.warning(
            f"Slow request detected: {request.method} {request.url.path}",
            extra={"process_time": process_time}
        )

    return response


add_exception_handlers(app)

app.include_router(catalog.router, tags=["Catalog"])
app.include_router(orders.router, tags=["Orders"])
app.include_router(auth.router, tags=["Auth"])
app.include_router(users.router, tags=["Users"])


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint. Reports whether the datastore is loaded.
    """
    store_healthy = check_store_health()
    health_status = {
        "status": "healthy" if store_healthy else "unhealthy",
        "timestamp": time.time(),
        "environment": settings.ENVIRONMENT,
        "version": APP_VERSION,
        "checks": {
            "datastore": "healthy" if store_healthy else "unhealthy"
        }
    }

    status_code = 200 if store_healthy else 503
    return JSONResponse(content=health_status, status_code=status_code)


@app.get("/ready", tags=["Health"])
async def readiness_check():
    """
    Readiness probe - indicates if app is ready to receive traffic.
    """
    if check_store_health():
        return {"status": "ready"}
    return JSONResponse(
        status_code=503,
        content={"status": "not_ready", "reason": "datastore_unavailable"}
    )


@app.get("/live", tags=["Health"])
async def liveness_check():
    """
    Liveness probe - indicates if app is alive.
    """
    return {"status": "alive"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development,
        log_level=settings.LOG_LEVEL.lower()
    )
