"""Bright Data datasets API: synchronous scrape of LinkedIn and generic pages."""

import logging
import os
from typing import Any

import httpx

from config.config_loader import BrightDataConfig
from devduel.sources.base import ProfileSource, SourceError

logger = logging.getLogger(__name__)


class BrightDataSource(ProfileSource):
    """One Bright Data dataset (e.g. the LinkedIn person profile scraper)."""

    def __init__(
        self,
        config: BrightDataConfig,
        dataset: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._dataset = dataset
        self._transport = transport
        self._api_key = os.environ.get(config.api_key_env, "").strip()
        if not self._api_key:
            logger.warning("%s is not set, %s scrapes will fall back to demo data", config.api_key_env, dataset)

    def name(self) -> str:
        return f"brightdata-{self._dataset}"

    def label(self) -> str:
        return "Bright Data"

    async def fetch(self, url: str) -> dict[str, Any]:
        if not self._api_key:
            raise SourceError(self.name(), f"Missing API key: {self._config.api_key_env}")
        dataset_id = self._config.datasets.get(self._dataset)
        if not dataset_id:
            raise SourceError(self.name(), f"No dataset id configured for '{self._dataset}'")

        logger.info("[BrightData] Scraping %s profile: %s", self._dataset, url)
        try:
            async with httpx.AsyncClient(timeout=self._config.timeout_sec, transport=self._transport) as client:
                response = await client.post(
                    f"{self._config.base_url}/scrape",
                    json=[{"url": url}],
                    params={"dataset_id": dataset_id, "format": "json"},
                    headers={"Authorization": f"Bearer {self._api_key}"},
                )
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException as exc:
            raise SourceError(self.name(), f"Request timed out after {self._config.timeout_sec}s") from exc
        except httpx.HTTPError as exc:
            raise SourceError(self.name(), f"API call failed: {exc}") from exc
        except ValueError as exc:
            raise SourceError(self.name(), f"Malformed response: {exc}") from exc

        if isinstance(data, list) and data and isinstance(data[0], dict):
            return data[0]
        raise SourceError(self.name(), f"No data returned from {self._dataset} scraper")
