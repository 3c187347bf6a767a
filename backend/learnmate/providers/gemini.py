import httpx
from typing import Optional

from learnmate.providers.base import BaseProvider, GenerationConfig, ProviderError


class GeminiProvider(BaseProvider):
    name = "gemini"

    def __init__(self, api_key: Optional[str], model: str, base_url: str):
        super().__init__(api_key, model)
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=self.timeout,
        )

    def _extract_content(self, data: dict) -> str:
        """Join the text parts of the first candidate."""
        candidates = data.get("candidates", [])
        if not candidates:
            return ""
        parts = candidates[0].get("content", {}).get("parts", [])
        return "".join(part.get("text", "") for part in parts)

    def _build_generation_config(self, config: Optional[GenerationConfig]) -> dict:
        if config is None:
            return {}
        generation_config = {
            "temperature": config.temperature,
            "topP": config.top_p,
            "topK": config.top_k,
            "maxOutputTokens": config.max_output_tokens,
        }
        return {k: v for k, v in generation_config.items() if v is not None}

    async def generate(
        self, prompt: str, config: Optional[GenerationConfig] = None
    ) -> str:
        """Generate a full (non-streaming) reply from the Gemini API."""
        if not self.is_configured():
            raise ProviderError(self.name, "API key missing")

        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        }
        generation_config = self._build_generation_config(config)
        if generation_config:
            payload["generationConfig"] = generation_config

        try:
            response = await self._client.post(
                f"/models/{self.model}:generateContent",
                params={"key": self.api_key},
                json=payload,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise ProviderError(self.name, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise ProviderError(self.name, f"request failed: {e}") from e
        except ValueError as e:
            raise ProviderError(self.name, "response was not JSON") from e

        content = self._extract_content(data)
        if not content:
            raise ProviderError(self.name, "No content received from API")
        return content
