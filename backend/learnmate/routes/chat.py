import logging

from fastapi import APIRouter, Depends

from learnmate.config import settings
from learnmate.models.request import ChatRequest, ChatResponse
from learnmate.providers import BaseProvider, ProviderError
from learnmate.routes.learn import require_provider
from learnmate.services.prompts import build_chat_prompt
from learnmate.utils.exceptions import raise_internal_error

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/chat", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    provider: BaseProvider = Depends(require_provider),
):
    """
    POST /api/chat - Answer a follow-up question about the current step

    The model's reply is returned verbatim as markdown.
    """
    prompt = build_chat_prompt(
        topic=request.topic,
        step_title=request.current_step_title,
        step_content=request.current_step_content,
        question=request.question,
        history=request.history,
        context_chars=settings.chat_context_chars,
    )

    try:
        answer = await provider.generate(prompt)
    except ProviderError:
        logger.exception(f"Chat answer failed for step '{request.current_step_title}'")
        raise_internal_error("Failed to get answer")

    return ChatResponse(answer=answer)
