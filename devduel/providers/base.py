"""Abstract base for all narrative (language model) providers."""

import asyncio
import logging
import os
import time
from abc import ABC, abstractmethod
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import TypeVar

from config.config_loader import ModelConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ProviderError(Exception):
    """Raised when a provider call fails."""

    def __init__(self, provider_name: str, message: str) -> None:
        self.provider_name = provider_name
        super().__init__(f"[{provider_name}] {message}")


@dataclass
class PromptSpec:
    system: str
    user: str
    max_tokens: int = 1500
    temperature: float = 0.9


@dataclass
class Completion:
    provider: str          # config key: "openai", "claude", "gemini", "grok"
    model: str             # actual model string used
    content: str
    latency_sec: float
    token_count: int | None


class NarrativeProvider(ABC):
    """Abstract base for all narrative providers."""

    @abstractmethod
    def name(self) -> str:
        """Return the short provider name (e.g. 'openai', 'claude')."""
        ...

    @abstractmethod
    def model_string(self) -> str:
        """Return the actual model identifier string."""
        ...

    @abstractmethod
    async def complete(self, spec: PromptSpec) -> Completion:
        """Run one system + user completion.

        Args:
            spec: Prompts and sampling parameters for the call.

        Returns:
            Completion dataclass with content and metadata.

        Raises:
            ProviderError: On API failure, timeout, or empty response.
        """
        ...

    @abstractmethod
    async def ping(self) -> None:
        """Cheap reachability check that spends no completion tokens.

        Raises:
            ProviderError: If the API is unreachable or rejects the key.
        """
        ...


class SDKProvider(NarrativeProvider):
    """A provider backed by a vendor SDK, configured from one ``models`` entry."""

    def __init__(self, config: ModelConfig) -> None:
        self._config = config
        self._api_key = os.environ.get(config.api_key_env, "").strip()
        if not self._api_key:
            raise ProviderError(config.name, f"Missing API key: {config.api_key_env}")

    def name(self) -> str:
        return self._config.name

    def model_string(self) -> str:
        return self._config.model

    async def _timed(self, call: Awaitable[T]) -> tuple[T, float]:
        """Await an SDK call under the model timeout. Returns (response, latency_sec)."""
        start = time.monotonic()
        try:
            response = await asyncio.wait_for(call, timeout=self._config.timeout_sec)
        except TimeoutError as exc:
            raise ProviderError(self.name(), f"Request timed out after {self._config.timeout_sec}s") from exc
        except Exception as exc:
            raise ProviderError(self.name(), f"API call failed: {exc}") from exc
        return response, time.monotonic() - start

    def _completion(self, content: str, latency: float, token_count: int | None) -> Completion:
        logger.info("%s completion: %.2fs, %s tokens", self.name(), latency, token_count)
        return Completion(
            provider=self.name(),
            model=self._config.model,
            content=content,
            latency_sec=latency,
            token_count=token_count,
        )
