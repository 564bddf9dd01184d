"""Chat-completions provider: OpenAI itself, or any compatible API (xAI Grok) via base_url."""

from openai import AsyncOpenAI

from config.config_loader import ModelConfig
from devduel.providers.base import Completion, PromptSpec, ProviderError, SDKProvider


class OpenAIProvider(SDKProvider):
    def __init__(self, config: ModelConfig) -> None:
        super().__init__(config)
        self._client = AsyncOpenAI(api_key=self._api_key, base_url=config.base_url)

    async def complete(self, spec: PromptSpec) -> Completion:
        response, latency = await self._timed(
            self._client.chat.completions.create(
                model=self._config.model,
                messages=[
                    {"role": "system", "content": spec.system},
                    {"role": "user", "content": spec.user},
                ],
                max_tokens=spec.max_tokens,
                temperature=spec.temperature,
            )
        )

        choice = response.choices[0] if response.choices else None
        if not choice or not choice.message.content:
            raise ProviderError(self.name(), "Empty response content")

        usage = response.usage
        return self._completion(choice.message.content, latency, usage.total_tokens if usage else None)

    async def ping(self) -> None:
        await self._timed(self._client.models.list())
