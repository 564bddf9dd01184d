"""Wikipedia acquisition: REST summary + wikitext infobox + DOM capture, in parallel."""

import asyncio
import logging
import re
from typing import Any
from urllib.parse import quote, unquote

import httpx

from config.config_loader import WikipediaConfig
from devduel.sources.actionbook import ActionBookClient
from devduel.sources.base import ProfileSource, SourceError, soft_fetch

logger = logging.getLogger(__name__)

_TITLE_RE = re.compile(r"wikipedia\.org/wiki/([^#?]+)", re.IGNORECASE)
_INFOBOX_RE = re.compile(r"\{\{Infobox[^\n]*\n(.*?)\n\}\}\s*$", re.MULTILINE | re.DOTALL)
_FIELD_RE = re.compile(r"^\s*\|\s*([A-Za-z_\s]+?)\s*=\s*(.*)")

# Applied in order; date templates must be rewritten before generic templates are dropped.
_MARKUP_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"\{\{(?:flatlist|hlist)\s*\|", re.IGNORECASE), ""),
    (re.compile(r"\{\{unbulleted list\s*\|", re.IGNORECASE), ""),
    (re.compile(r"\{\{start date and age\|(\d{4})\|(\d+)\|(\d+)[^}]*\}\}", re.IGNORECASE), r"\2/\3/\1"),
    (re.compile(r"\{\{birth date and age\|(\d{4})\|(\d+)\|(\d+)[^}]*\}\}", re.IGNORECASE), r"\2/\3/\1 (born \1)"),
    (re.compile(r"\{\{birth date\|(\d{4})\|(\d+)\|(\d+)[^}]*\}\}", re.IGNORECASE), r"\2/\3/\1"),
    (re.compile(r"\{\{(?:circa|c\.)\|(\d+)\}\}", re.IGNORECASE), r"c. \1"),
    (re.compile(r"\{\{url\|([^}|]+)[^}]*\}\}", re.IGNORECASE), r"\1"),
    (re.compile(r"\{\{(?:nowrap|small)\|([^}]+)\}\}", re.IGNORECASE), r"\1"),
    (re.compile(r"\{\{[^}]*\}\}"), ""),
    (re.compile(r"\[\[(?:[^\]|]*\|)?([^\]]*)\]\]"), r"\1"),
    (re.compile(r"<ref[^>]*>.*?</ref>", re.IGNORECASE | re.DOTALL), ""),
    (re.compile(r"<ref[^/]*/>", re.IGNORECASE), ""),
    (re.compile(r"<br\s*/?>", re.IGNORECASE), ", "),
    (re.compile(r"<[^>]*>"), ""),
    (re.compile(r"'{2,3}"), ""),
    (re.compile(r"\s{2,}"), " "),
]

ARTICLE_SELECTORS = {
    "title": "#firstHeading",
    "first_paragraph": "#mw-content-text .mw-parser-output > p:not(.mw-empty-elt)",
    "image": ".infobox img",
    "infobox_rows": ".infobox tr",
}


def extract_title(url: str) -> str:
    match = _TITLE_RE.search(url)
    return unquote(match.group(1).replace("_", " ")) if match else ""


def clean_wiki_markup(text: str) -> str:
    """Strip templates, references, links and HTML from an infobox value."""
    for pattern, replacement in _MARKUP_RULES:
        text = pattern.sub(replacement, text)
    return text.strip()


def parse_infobox(wikitext: str) -> dict[str, str]:
    """Parse the ``{{Infobox ...}}`` block of a lead section into key -> clean text."""
    infobox: dict[str, str] = {}
    match = _INFOBOX_RE.search(wikitext)
    if not match:
        return infobox

    current_key = ""
    current_value = ""
    for line in match.group(1).split("\n"):
        field = _FIELD_RE.match(line)
        if field:
            if current_key:
                infobox[current_key] = clean_wiki_markup(current_value)
            current_key = field.group(1).strip()
            current_value = field.group(2)
        elif current_key:
            current_value += " " + line.strip()
    if current_key:
        infobox[current_key] = clean_wiki_markup(current_value)

    return infobox


class WikipediaSource(ProfileSource):
    """Merges the summary API, the parsed infobox and a DOM capture of an article."""

    def __init__(
        self,
        config: WikipediaConfig,
        dom: ActionBookClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._dom = dom
        self._transport = transport

    def name(self) -> str:
        return "wikipedia"

    def label(self) -> str:
        return "ActionBook"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._config.timeout_sec,
            headers={"Accept": "application/json", "User-Agent": self._config.user_agent},
            transport=self._transport,
        )

    async def _fetch_summary(self, title: str) -> dict[str, Any]:
        async with self._client() as client:
            response = await client.get(self._config.rest_url + quote(title, safe=""))
            response.raise_for_status()
            data = response.json()

        image = (data.get("originalimage") or {}).get("source") or (data.get("thumbnail") or {}).get("source")
        summary = {
            "title": data.get("title"),
            "name": data.get("title"),
            "description": data.get("description"),
            "intro": data.get("extract"),
            "image": image,
            "thumbnail": (data.get("thumbnail") or {}).get("source"),
            "url": ((data.get("content_urls") or {}).get("desktop") or {}).get("page"),
        }
        return {k: v for k, v in summary.items() if v}

    async def _fetch_infobox(self, title: str) -> dict[str, str]:
        async with self._client() as client:
            response = await client.get(
                self._config.api_url,
                params={
                    "action": "parse",
                    "page": title,
                    "prop": "wikitext",
                    "section": 0,
                    "format": "json",
                    "origin": "*",
                },
            )
            response.raise_for_status()
            data = response.json()
        wikitext = ((data.get("parse") or {}).get("wikitext") or {}).get("*", "")
        return parse_infobox(wikitext)

    async def _extract_dom(self, url: str) -> dict[str, Any]:
        if self._dom is None:
            return {}
        return await self._dom.extract(url, ARTICLE_SELECTORS)

    async def fetch(self, url: str) -> dict[str, Any]:
        title = extract_title(url)
        if not title:
            raise SourceError(self.name(), f"Could not extract Wikipedia article title from URL: {url}")

        logger.info("[Wikipedia] Scraping article for: %s", title)
        summary, infobox, dom_data = await asyncio.gather(
            soft_fetch("[Wikipedia] REST summary fetch", self._fetch_summary(title), {}),
            soft_fetch("[Wikipedia] infobox fetch", self._fetch_infobox(title), {}),
            soft_fetch("[Wikipedia] DOM extraction", self._extract_dom(url), {}),
        )

        dom_infobox = dom_data.get("infobox") if isinstance(dom_data.get("infobox"), dict) else {}
        merged: dict[str, Any] = {
            **dom_data,
            **summary,
            "infobox": {**dom_infobox, **infobox},
            "_sources": {
                "actionbook": bool(dom_data),
                "wiki_api": bool(summary),
                "infobox": bool(infobox),
            },
        }

        if not any(merged.get(k) for k in ("title", "name", "intro", "first_paragraph")):
            raise SourceError(self.name(), "No Wikipedia data retrieved from any source")

        logger.info(
            "[Wikipedia] Data merged: REST=%s, infobox=%s, DOM=%s",
            bool(summary), bool(infobox), bool(dom_data),
        )
        return merged
