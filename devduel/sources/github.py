"""GitHub acquisition: DOM capture + user REST + repo list REST, fetched in parallel."""

import asyncio
import logging
import re
from typing import Any

import httpx

from config.config_loader import GitHubConfig
from devduel.sources.actionbook import ActionBookClient
from devduel.sources.base import ProfileSource, SourceError, soft_fetch

logger = logging.getLogger(__name__)

_USERNAME_RE = re.compile(r"github\.com/([^/?#]+)", re.IGNORECASE)

PROFILE_SELECTORS = {
    "name": ".vcard-fullname",
    "bio": ".p-note.user-profile-bio",
    "location": ".p-label",
    "company": ".p-org",
    "pinned_repos": ".pinned-item-list-item-content .repo",
    "contributions": ".js-yearly-contributions h2",
}


def extract_username(url: str) -> str:
    match = _USERNAME_RE.search(url)
    return match.group(1) if match else ""


class GitHubSource(ProfileSource):
    """Merges three partial views of a GitHub account into one payload."""

    def __init__(
        self,
        config: GitHubConfig,
        dom: ActionBookClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._dom = dom
        self._transport = transport

    def name(self) -> str:
        return "github"

    def label(self) -> str:
        return "ActionBook"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._config.base_url,
            timeout=self._config.timeout_sec,
            headers={"Accept": "application/vnd.github.v3+json"},
            transport=self._transport,
        )

    async def _extract_dom(self, url: str) -> dict[str, Any]:
        if self._dom is None:
            return {}
        return await self._dom.extract(url, PROFILE_SELECTORS)

    async def _fetch_user(self, username: str) -> dict[str, Any]:
        async with self._client() as client:
            response = await client.get(f"/users/{username}")
            response.raise_for_status()
            return response.json()

    async def _fetch_repos(self, username: str) -> list[dict[str, Any]]:
        async with self._client() as client:
            response = await client.get(
                f"/users/{username}/repos",
                params={
                    "sort": "stargazers_count",
                    "direction": "desc",
                    "per_page": self._config.repos_per_page,
                },
            )
            response.raise_for_status()
            return response.json()

    async def fetch(self, url: str) -> dict[str, Any]:
        username = extract_username(url)
        if not username:
            raise SourceError(self.name(), f"Could not extract GitHub username from URL: {url}")

        logger.info("[GitHub] Scraping profile for: %s", username)
        dom_data, api_data, repos = await asyncio.gather(
            soft_fetch("[GitHub] DOM extraction", self._extract_dom(url), {}),
            soft_fetch("[GitHub] user API fetch", self._fetch_user(username), {}),
            soft_fetch("[GitHub] repos fetch", self._fetch_repos(username), []),
        )
        if not isinstance(repos, list):
            repos = []

        merged: dict[str, Any] = {
            **api_data,
            **dom_data,
            "repositories": repos,
            "_sources": {
                "actionbook": bool(dom_data),
                "github_api": bool(api_data),
                "repos": len(repos),
            },
        }

        if not merged.get("login") and not merged.get("name"):
            raise SourceError(self.name(), "No GitHub profile data retrieved from any source")

        logger.info(
            "[GitHub] Data merged: DOM=%s, API=%s, repos=%d",
            bool(dom_data), bool(api_data), len(repos),
        )
        return merged

    async def health_check(self) -> bool:
        try:
            async with self._client() as client:
                response = await client.get("/rate_limit")
            return response.status_code == 200
        except httpx.HTTPError:
            return False
