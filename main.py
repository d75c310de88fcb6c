"""
WooCommerce catalog gateway: main application

FastAPI application entry point. Serves the JSON-RPC endpoint at /rpc.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from contextlib import asynccontextmanager
import structlog
from datetime import datetime, timezone

from config import get_settings, configure_logging
from exceptions.errors import RPC_INTERNAL_ERROR
from services.rpc_dispatcher import get_rpc_dispatcher

settings = get_settings()

# Configure structured logging
configure_logging(settings)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup: Load the category and product maps
    Shutdown: Log only; maps are saved on every change
    """
    logger.info(
        "application_starting",
        environment=settings.environment,
        debug=settings.debug,
        data_dir=str(settings.data_dir)
    )

    dispatcher = get_rpc_dispatcher()
    logger.info(
        "identifier_caches_ready",
        categories=len(dispatcher.category_cache),
        products=len(dispatcher.product_cache)
    )

    yield

    logger.info("application_shutting_down")


# Create FastAPI app
app = FastAPI(
    title="WooCommerce Catalog Gateway",
    description="JSON-RPC gateway to the WooCommerce product catalog",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


# ===================
# ROUTES
# ===================

@app.get("/", response_class=PlainTextResponse)
async def root():
    """Banner for humans poking at the server."""
    return "MCP HTTP Server is running. Use the /rpc endpoint for JSON-RPC calls."


@app.get("/health")
async def health_check():
    """
    Health check endpoint.

    Returns:
        Status and the size of both identifier caches
    """
    dispatcher = get_rpc_dispatcher()

    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.environment,
        "caches": {
            "categories": len(dispatcher.category_cache),
            "products": len(dispatcher.product_cache)
        },
        "methods": dispatcher.methods
    }


# ===================
# ERROR HANDLERS
# ===================

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler.

    Catches unhandled exceptions and answers with a JSON-RPC error.
    """
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        error_type=type(exc).__name__
    )

    return JSONResponse(
        status_code=500,
        content={
            "jsonrpc": "2.0",
            "error": {
                "code": RPC_INTERNAL_ERROR,
                "message": "An internal error occurred",
                "data": {"error": str(exc)} if settings.debug else None
            },
            "id": None
        }
    )


# ===================
# INCLUDE ROUTERS
# ===================
from routes.rpc import router as rpc_router

app.include_router(rpc_router, tags=["JSON-RPC"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
