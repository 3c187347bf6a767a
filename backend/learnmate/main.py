import logging

from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from learnmate.config import settings, warn_if_unconfigured

logger = logging.getLogger(__name__)
from learnmate.routes import chat, health, learn, summaries
from learnmate.providers.registry import provider_registry
from learnmate.database import close_db, init_db

# Warn about a missing API key before app starts
warn_if_unconfigured()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle events"""
    # Initialize database
    await init_db()

    # Startup: Initialize model provider from settings
    provider_registry.initialize()

    yield

    # Shutdown: Cleanup resources
    await provider_registry.cleanup()
    await close_db()


app = FastAPI(
    title="LearnMate Backend API",
    description="Generates step-by-step learning paths and answers follow-up questions",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Render HTTP errors as {"error": detail}, the shape the frontend reads."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=exc.headers,
    )


# Include routers
app.include_router(health.router, tags=["health"])
app.include_router(learn.router, prefix="/api", tags=["learn"])
app.include_router(chat.router, prefix="/api", tags=["chat"])
app.include_router(summaries.router, prefix="/api", tags=["summaries"])
