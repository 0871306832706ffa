# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the OptiChat API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload --port 10000
#   python -m app.main   (binds API_HOST:API_PORT)
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import OptiChatException, optichat_exception_handler
from app.routers import chat, chat_proxy, health, models, sessions, upload
from core.services.session_service import SessionService

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs configuration on startup. A missing provider credential is only
    a warning: chat requests report it individually.
    """
    logger.info(f"Starting OptiChat API in {settings.ENVIRONMENT} mode")
    logger.info(f"Allowing CORS from: {settings.CLIENT_URL}")
    if not settings.GROQ_API_KEY:
        logger.warning("GROQ_API_KEY is not set; chat requests will fail with a configuration error")

    yield

    logger.info("Shutting down OptiChat API")


# Create FastAPI application
app = FastAPI(
    title="OptiChat API",
    description="""
## Guided AI Optimization Assistant

Upload business data, talk it through with the assistant, and pick one of
three optimizations. Each pick creates at most one model project per
optimization type, which moves from in-progress to completed when training
finishes.

### How It Works

1. **Create a Session** - `POST /api/v1/sessions`
2. **Upload CSV** - `POST /api/v1/sessions/{id}/upload`
3. **Chat** - `POST /api/v1/sessions/{id}/chat`
4. **Pick an Optimization** - `POST /api/v1/sessions/{id}/optimizations`
5. **Track Projects** - `GET /api/v1/sessions/{id}/models`

### Optimizations

| Type | Name |
|------|------|
| `inventory` | Inventory Optimization |
| `price` | Price Recommendation |
| `product` | Product Recommendation |
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Chat Proxy", "description": "Stateless forwarder to the completion provider"},
        {"name": "Sessions", "description": "Create, inspect and reset sessions"},
        {"name": "Upload", "description": "Upload CSV files"},
        {"name": "Chat", "description": "Conversation and optimization choice"},
        {"name": "Models", "description": "Model projects and their status"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)

# One store per process; each session inside it owns its own state
app.state.session_service = SessionService()


# =============================================================================
# Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.CLIENT_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(OptiChatException)
async def handle_optichat_exception(request: Request, exc: OptiChatException):
    """Handle custom OptiChat exceptions."""
    return await optichat_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Health check endpoints
app.include_router(
    health.router,
    tags=["Health"]
)

# Chat proxy (stateless)
app.include_router(
    chat_proxy.router,
    prefix="/api",
    tags=["Chat Proxy"]
)

# Session management endpoints
app.include_router(
    sessions.router,
    prefix="/api/v1/sessions",
    tags=["Sessions"]
)

# File upload endpoints
app.include_router(
    upload.router,
    prefix="/api/v1/sessions",
    tags=["Upload"]
)

# Conversation endpoints
app.include_router(
    chat.router,
    prefix="/api/v1/sessions",
    tags=["Chat"]
)

# Model project endpoints
app.include_router(
    models.router,
    prefix="/api/v1/sessions",
    tags=["Models"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "OptiChat API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.is_development,
    )
