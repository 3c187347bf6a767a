import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from learnmate.config import settings

logger = logging.getLogger(__name__)


class ProviderError(Exception):
    """Transport, auth or empty-reply failure from a model provider."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"[{provider}] {message}")
        self.provider = provider


@dataclass
class GenerationConfig:
    """Sampling parameters for a single generation call"""

    temperature: Optional[float] = None
    top_p: Optional[float] = None
    top_k: Optional[int] = None
    max_output_tokens: Optional[int] = None


class BaseProvider(ABC):
    """Abstract base class for model providers"""

    name: str  # Provider identifier, e.g. "gemini"

    def __init__(self, api_key: Optional[str], model: str):
        self.api_key = api_key
        self.model = model
        self._client = None

    @property
    def timeout(self) -> float:
        """Get the configured provider timeout in seconds."""
        return float(settings.provider_timeout)

    @abstractmethod
    async def generate(
        self, prompt: str, config: Optional[GenerationConfig] = None
    ) -> str:
        """
        Run one prompt to completion and return the reply text.

        Raises:
            ProviderError: on transport/auth failure or an empty reply
        """
        pass

    async def cleanup(self):
        """Cleanup HTTP client resources."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def is_configured(self) -> bool:
        """Check if provider has valid API key"""
        return bool(self.api_key)
