"""Gemini provider using google-genai SDK with native async."""

from google import genai
from google.genai import types as genai_types

from config.config_loader import ModelConfig
from devduel.providers.base import Completion, PromptSpec, ProviderError, SDKProvider


class GeminiProvider(SDKProvider):
    def __init__(self, config: ModelConfig) -> None:
        super().__init__(config)
        self._client = genai.Client(api_key=self._api_key)

    async def complete(self, spec: PromptSpec) -> Completion:
        response, latency = await self._timed(
            self._client.aio.models.generate_content(
                model=self._config.model,
                contents=spec.user,
                config=genai_types.GenerateContentConfig(
                    system_instruction=spec.system,
                    max_output_tokens=spec.max_tokens,
                    temperature=spec.temperature,
                ),
            )
        )

        if not response.text:
            raise ProviderError(self.name(), "Empty response text")

        metadata = response.usage_metadata
        return self._completion(response.text, latency, metadata.total_token_count if metadata else None)

    async def ping(self) -> None:
        await self._timed(self._client.aio.models.list(config={"page_size": 1}))
