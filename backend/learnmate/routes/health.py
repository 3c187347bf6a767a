from fastapi import APIRouter
from fastapi.responses import PlainTextResponse


router = APIRouter()


@router.get("/", response_class=PlainTextResponse, include_in_schema=False)
async def root():
    """Liveness banner"""
    return "LearnMate API is running"


@router.get("/api/health")
async def health():
    """Health check endpoint"""
    from learnmate.config import settings
    from learnmate.providers.registry import provider_registry

    return {
        "status": "healthy",
        "provider_configured": provider_registry.get_provider() is not None,
        "model": settings.gemini_model,
    }
