"""Anthropic Claude provider using anthropic SDK with native async."""

import anthropic as anthropic_sdk

from config.config_loader import ModelConfig
from devduel.providers.base import Completion, PromptSpec, ProviderError, SDKProvider


class AnthropicProvider(SDKProvider):
    """Messages API. The system prompt travels separately from the user turn."""

    def __init__(self, config: ModelConfig) -> None:
        super().__init__(config)
        self._client = anthropic_sdk.AsyncAnthropic(api_key=self._api_key)

    async def complete(self, spec: PromptSpec) -> Completion:
        response, latency = await self._timed(
            self._client.messages.create(
                model=self._config.model,
                max_tokens=spec.max_tokens,
                # Messages API rejects temperatures above 1.0
                temperature=min(spec.temperature, 1.0),
                system=spec.system,
                messages=[{"role": "user", "content": spec.user}],
            )
        )

        if not response.content:
            raise ProviderError(self.name(), "Empty response content")
        text_blocks = [b.text for b in response.content if b.type == "text"]
        if not text_blocks:
            raise ProviderError(self.name(), "No text blocks in response")

        usage = response.usage
        tokens = usage.input_tokens + usage.output_tokens if usage else None
        return self._completion("\n".join(text_blocks), latency, tokens)

    async def ping(self) -> None:
        await self._timed(self._client.models.list(limit=1))
