"""
PratikAI FastAPI Application Entry Point.

Run with: uvicorn pratikai.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from pratikai.api.routes import admin, auth, chat, users
from pratikai.config import get_settings, sanitize_error
from pratikai.errors import PratikAIError
from pratikai.services.generator import ConversationGenerator
from pratikai.services.identity import build_identity_resolver

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup/shutdown."""
    # Startup: external clients are built once and shared through app.state
    app.state.generator = ConversationGenerator.from_settings(settings)
    app.state.identity_resolver = build_identity_resolver(settings)
    logger.info(
        "Started %s (identity provider: %s, model: %s)",
        settings.app_name,
        settings.identity_provider,
        settings.llm_model,
    )
    yield
    # Shutdown
    await app.state.generator.client.close()


app = FastAPI(
    title=settings.app_name,
    description="Profession-specialized AI chat API",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# ERROR HANDLERS
# =============================================================================


@app.exception_handler(PratikAIError)
async def pratikai_error_handler(request: Request, exc: PratikAIError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    if location:
        message = f"{location}: {message}"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": sanitize_error(exc)},
    )


# Include routers
app.include_router(auth.router)
app.include_router(chat.router)
app.include_router(users.router)
app.include_router(admin.router)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}
