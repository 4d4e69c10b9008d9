"""RentMaster - FastAPI Application Entry Point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rentmaster.core.env_validation import validate_environment

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# CRITICAL: validate before anything touches the database or Firebase.
# Hard-fails (exit 1) if required configuration is missing or unsafe.
settings = validate_environment()
logging.getLogger().setLevel(settings.log_level.upper())

from rentmaster.core.errors import setup_exception_handlers  # noqa: E402
from rentmaster.routers import (  # noqa: E402
    auth_router,
    properties_router,
    tenants_router,
    leases_router,
    payments_router,
    documents_router,
    dashboard_router,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info("%s starting (debug=%s)", settings.app_name, settings.debug)
    yield
    logger.info("%s shutting down", settings.app_name)


app = FastAPI(
    title=settings.app_name,
    description="Property management backend: properties, locals, tenants, leases, payments, documents and reporting.",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# CORS - wildcard is blocked outside debug by env_validation.py
logger.info("CORS configured with origins: %s", settings.cors_origins)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_exception_handlers(app)

app.include_router(auth_router, prefix=settings.api_prefix)
app.include_router(properties_router, prefix=settings.api_prefix)
app.include_router(tenants_router, prefix=settings.api_prefix)
app.include_router(leases_router, prefix=settings.api_prefix)
app.include_router(payments_router, prefix=settings.api_prefix)
app.include_router(documents_router, prefix=settings.api_prefix)
app.include_router(dashboard_router, prefix=settings.api_prefix)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": settings.app_name}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": settings.app_name,
        "version": "1.0.0",
        "docs": "/docs" if settings.debug else "Disabled in production",
    }
