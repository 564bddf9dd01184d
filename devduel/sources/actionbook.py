"""ActionBook extract API: CSS-selector capture of a rendered page."""

import logging
import os
from typing import Any

import httpx

from config.config_loader import ActionBookConfig
from devduel.sources.base import SourceError

logger = logging.getLogger(__name__)


class ActionBookClient:
    """DOM-selector capture shared by the GitHub and Wikipedia sources."""

    def __init__(self, config: ActionBookConfig, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._config = config
        self._transport = transport
        self._api_key = os.environ.get(config.api_key_env, "").strip()
        if not self._api_key:
            logger.warning("%s API key not set, DOM extraction will be skipped", config.api_key_env)

    def name(self) -> str:
        return "actionbook"

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._api_key}"}

    async def extract(self, url: str, selectors: dict[str, str]) -> dict[str, Any]:
        """Return the selector -> extracted value map for a page.

        Raises:
            SourceError: On missing key, HTTP failure or non-object response.
        """
        if not self._api_key:
            raise SourceError(self.name(), f"Missing API key: {self._config.api_key_env}")

        logger.info("[ActionBook] Extracting DOM elements from: %s", url)
        try:
            async with httpx.AsyncClient(timeout=self._config.timeout_sec, transport=self._transport) as client:
                response = await client.post(
                    f"{self._config.base_url}/extract",
                    json={"url": url, "selectors": selectors},
                    headers=self._headers(),
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as exc:
            raise SourceError(self.name(), f"Extract failed: {exc}") from exc
        except ValueError as exc:
            raise SourceError(self.name(), f"Malformed response: {exc}") from exc

        if not isinstance(data, dict):
            raise SourceError(self.name(), "Extract response is not an object")
        return data

    async def health_check(self) -> bool:
        try:
            async with httpx.AsyncClient(timeout=5.0, transport=self._transport) as client:
                response = await client.get(f"{self._config.base_url}/health", headers=self._headers())
            return response.status_code == 200
        except httpx.HTTPError:
            return False
