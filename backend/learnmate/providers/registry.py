import logging
from typing import Optional

from learnmate.config import settings
from learnmate.providers.base import BaseProvider
from learnmate.providers.gemini import GeminiProvider

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Holds the process-wide model provider"""

    def __init__(self):
        self._provider: Optional[BaseProvider] = None

    def initialize(self):
        """Create the provider from settings"""
        self._provider = GeminiProvider(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
        )
        if self._provider.is_configured():
            logger.info(f"Loaded provider: {self._provider.name} ({self._provider.model})")
        else:
            logger.warning(f"Provider {self._provider.name} has no API key")

    def get_provider(self) -> Optional[BaseProvider]:
        """Get the configured provider, or None if no API key is set"""
        if self._provider and self._provider.is_configured():
            return self._provider
        return None

    async def cleanup(self):
        """Cleanup provider resources"""
        if self._provider:
            await self._provider.cleanup()
            self._provider = None


# Global registry instance
provider_registry = ProviderRegistry()


def get_provider() -> Optional[BaseProvider]:
    """FastAPI dependency returning the active provider."""
    return provider_registry.get_provider()
