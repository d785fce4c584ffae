"""
FastAPI application entry point.
Configures routes, middleware, and lifecycle events.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from schoolpay.config import settings
from schoolpay.database import init_db, close_db
from schoolpay.exceptions import ConfigurationError, PaymentError
from schoolpay.logging_config import configure_logging

from schoolpay.api.admin import router as admin_router
from schoolpay.api.payments import router as payments_router
from schoolpay.api.transactions import router as transactions_router
from schoolpay.api.webhooks import router as webhooks_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifecycle manager."""
    configure_logging()
    logger.info("Starting up SchoolPay...")
    
    await init_db()
    
    yield
    
    await close_db()
    logger.info("Shutting down...")


app = FastAPI(
    title="SchoolPay",
    description="School fee payment orders and gateway webhook reconciliation",
    version="1.0.0",
    lifespan=lifespan,
    debug=settings.debug,
)


@app.exception_handler(PaymentError)
async def payment_error_handler(request: Request, exc: PaymentError):
    if isinstance(exc, ConfigurationError):
        logger.error(f"Configuration error on {request.url.path}: {exc.message}")
    else:
        logger.info(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Global Exception Handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"status": "error", "message": "Internal Server Error"},
    )


origins = [settings.frontend_url]
if settings.is_development:
    origins.append("*")

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "env": settings.app_env,
    }


app.include_router(payments_router, tags=["payments"])
app.include_router(webhooks_router, tags=["webhooks"])
app.include_router(transactions_router, tags=["transactions"])
app.include_router(admin_router, prefix="/admin", tags=["admin"])
