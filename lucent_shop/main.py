# lucent_shop/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

# Configuration and core
from lucent_shop.core import locales
from lucent_shop.core.config import settings as config
from lucent_shop.core.exceptions import ApiError
from lucent_shop.core.limiter import limiter
from lucent_shop.core.logging_config import setup_logging
from lucent_shop.core.redis import redis_client

# FastAPI routers
from lucent_shop.routers import admin as admin_router
from lucent_shop.routers import cart, catalog, download, order

# --- Initialisation ---
logger = logging.getLogger(__name__)


# --- Error handlers ---
async def api_error_handler(request: Request, exc: ApiError):
    """Domain errors raised by services."""
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code} on {request.method} {request.url}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"status": "error", "message": exc.message, "error_code": exc.error_code},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    """
    Last resort for anything the services did not turn into an ApiError.
    Logged with traceback; the client only gets a generic message.
    """
    logger.critical(f"Unhandled exception for request: {request.method} {request.url}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"status": "error", "message": locales.ERROR_INTERNAL, "error_code": "INTERNAL_ERROR"},
    )


# --- Lifespan Manager ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Application lifespan startup...")
    yield
    await redis_client.aclose()
    logger.info("Application shut down.")


# --- FastAPI application ---
app = FastAPI(
    title="Lucent Shop API",
    description="Order lifecycle backend for the Lucent Management store",
    version="0.1.0",
    lifespan=lifespan
)

origins = [
    "http://localhost",
    "http://localhost:3000",
    "http://localhost:5173",
    config.FRONTEND_URL,
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.limiter = limiter

# --- Exception handlers ---
app.add_exception_handler(ApiError, api_error_handler)
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
api_router = APIRouter(prefix="/api/v1")

# Customer and public endpoints
api_router.include_router(catalog.router, tags=["Catalog"])
api_router.include_router(cart.router, tags=["Cart"])
api_router.include_router(order.router, tags=["Orders"])
api_router.include_router(download.router, tags=["Downloads"])

# Admin endpoints
api_router.include_router(admin_router.router, prefix="/admin")

app.include_router(api_router)
