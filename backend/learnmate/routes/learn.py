"""
Learning-path routes.

POST /api/learn    - generate a learning path for a topic
POST /api/sessions - turn a learning path into a trackable session
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from learnmate.config import settings
from learnmate.models.learning import LearningSession, ParsedResponse, SessionRequest
from learnmate.models.request import LearnRequest
from learnmate.providers import BaseProvider, GenerationConfig, ProviderError, get_provider
from learnmate.services.parser import parse_learning_response
from learnmate.services.prompts import build_learn_prompt
from learnmate.services.session import build_session
from learnmate.utils.exceptions import raise_internal_error

logger = logging.getLogger(__name__)

router = APIRouter()


def require_provider(provider: Optional[BaseProvider] = Depends(get_provider)) -> BaseProvider:
    """Dependency that fails with 500 when no API key is configured."""
    if provider is None:
        raise_internal_error("Server API Key Missing")
    return provider


@router.post("/learn", response_model=ParsedResponse)
async def learn(
    request: LearnRequest,
    provider: BaseProvider = Depends(require_provider),
):
    """
    POST /api/learn - Generate a step-by-step learning path

    Always returns at least one step when the model answers: malformed
    replies are salvaged or wrapped as a single step.
    """
    prompt = build_learn_prompt(request.topic, request.level)
    config = GenerationConfig(
        temperature=settings.generation_temperature,
        top_p=settings.generation_top_p,
        top_k=settings.generation_top_k,
    )

    try:
        content = await provider.generate(prompt, config)
    except ProviderError:
        logger.exception(f"Learning path generation failed for topic '{request.topic}'")
        raise_internal_error("Failed to generate content")

    return parse_learning_response(content)


@router.post("/sessions", response_model=LearningSession)
async def create_session(request: SessionRequest):
    """POST /api/sessions - Assign step ids and completion state to a learning path"""
    return build_session(request.topic, request)
