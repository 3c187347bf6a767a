from learnmate.providers.base import BaseProvider, GenerationConfig, ProviderError
from learnmate.providers.registry import get_provider, provider_registry

__all__ = ["BaseProvider", "GenerationConfig", "ProviderError", "get_provider", "provider_registry"]
