"""
Storefront service

Users, products, grocery inventory and order placement over one relational
database, with structured logging and health/metrics endpoints.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import subprocess
import os

from storefront.core import ServiceHealth, setup_logging, RequestLoggingMiddleware, get_logger
from storefront.core_settings import get_settings
from storefront.api.errors import register_exception_handlers
from storefront.api.auth_routes import router as auth_router
from storefront.api.user_routes import router as user_router
from storefront.api.product_routes import router as product_router
from storefront.api.grocery_routes import router as grocery_router
from storefront.api.order_routes import router as order_router
from storefront.infrastructure.db import engine, init_models, wait_for_database

settings = get_settings()

SERVICE_NAME = settings.SERVICE_NAME
SERVICE_VERSION = settings.SERVICE_VERSION
SERVICE_DESCRIPTION = "Grocery storefront: users, products, inventory and orders"
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

setup_logging(
    service_name=SERVICE_NAME,
    level=settings.LOG_LEVEL,
    environment=settings.ENVIRONMENT,
    version=SERVICE_VERSION,
    log_file=settings.LOG_FILE,
)

logger = get_logger(__name__)

def run_migrations() -> bool:
    logger.info("Running database migrations")
    result = subprocess.run(
        ["alembic", "upgrade", "head"],
        cwd=PROJECT_ROOT,
        capture_output=True,
        text=True,
        check=False
    )
    if result.returncode != 0:
        logger.warning(f"Migration output: {result.stderr}")
        return False
    logger.info("Database migrations completed")
    return True

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {SERVICE_NAME} version {SERVICE_VERSION}")

    wait_for_database()

    if settings.RUN_MIGRATIONS:
        try:
            run_migrations()
        except OSError as e:
            logger.error(f"Migration error: {e}")

    try:
        init_models()
        logger.info("Database models initialized")
    except Exception as e:
        logger.error(f"Failed to initialize database models: {e}")
        raise

    logger.info(f"{SERVICE_NAME} started successfully")

    yield

    logger.info(f"Shutting down {SERVICE_NAME}")
    engine.dispose()

app = FastAPI(
    title=SERVICE_NAME,
    description=SERVICE_DESCRIPTION,
    version=SERVICE_VERSION,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

register_exception_handlers(app)

health_service = ServiceHealth(
    SERVICE_NAME,
    engine,
    version=SERVICE_VERSION,
    jwt_secret=settings.JWT_SECRET,
    environment=settings.ENVIRONMENT,
)
app.include_router(health_service.create_health_router())

app.include_router(auth_router)
app.include_router(user_router)
app.include_router(product_router)
app.include_router(grocery_router)
app.include_router(order_router)

@app.get("/")
async def root():
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "status": "running",
        "docs": "/api/docs"
    }

@app.get("/info")
async def info():
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "description": SERVICE_DESCRIPTION,
        "environment": settings.ENVIRONMENT,
        "endpoints": {
            "health": "/health",
            "ready": "/health/ready",
            "live": "/health/live",
            "metrics": "/metrics",
            "docs": "/api/docs"
        }
    }
