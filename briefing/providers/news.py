"""Headline feed providers.

Priority within the headlines category:
  1. NewsApiProvider     — newsapi.org top business headlines (requires NEWS_API_KEY)
  2. GoogleNewsProvider  — Google News business-topic RSS, keyless

Both normalize to an ordered list of :class:`Headline` (source, title) capped at
``page_size`` entries.
"""

from typing import List, Optional

import feedparser

from briefing.core.http import DEFAULT_TIMEOUT, fetch_json, fetch_text
from briefing.core.logger import logger
from briefing.models.datatypes import Headline, ProviderResult
from briefing.providers.base import DataProvider

_NEWSAPI_URL = "https://newsapi.org/v2/top-headlines"
_GOOGLE_BUSINESS_RSS = "https://news.google.com/rss/headlines/section/topic/BUSINESS"

MAX_PAGE_SIZE = 8

# NewsAPI placeholder for articles withdrawn by the publisher
REMOVED_TITLE = "[Removed]"


class NewsApiProvider(DataProvider):
    """newsapi.org ``/v2/top-headlines`` for US business news."""

    name = "newsapi"
    requires_key = True

    def __init__(self, api_key: Optional[str] = None, page_size: int = MAX_PAGE_SIZE,
                 timeout: float = DEFAULT_TIMEOUT) -> None:
        super().__init__(api_key)
        self.page_size = min(page_size, MAX_PAGE_SIZE)
        self.timeout = timeout

    def fetch(self) -> ProviderResult:
        params = {
            "country": "us",
            "category": "business",
            "pageSize": self.page_size,
            "apiKey": self.api_key,
        }
        data = fetch_json(_NEWSAPI_URL, params=params, timeout=self.timeout)
        articles = data.get("articles") if isinstance(data, dict) else None
        if not articles:
            return ProviderResult.unavailable(self.name, "no articles in response")

        headlines: List[Headline] = []
        for article in articles:
            if not isinstance(article, dict):
                continue
            title = (article.get("title") or "").strip()
            source = ((article.get("source") or {}).get("name") or "").strip()
            if title == REMOVED_TITLE:
                continue
            if title and source:
                headlines.append(Headline(source=source, title=title))
            if len(headlines) >= self.page_size:
                break

        if not headlines:
            return ProviderResult.unavailable(self.name, "no article had both title and source")
        logger.info(f"{self.name}: {len(headlines)} headlines")
        return ProviderResult.full(self.name, headlines)


class GoogleNewsProvider(DataProvider):
    """Google News business-topic RSS, fetched with a timeout then parsed by feedparser."""

    name = "google_news"

    def __init__(self, page_size: int = MAX_PAGE_SIZE, timeout: float = DEFAULT_TIMEOUT) -> None:
        super().__init__()
        self.page_size = min(page_size, MAX_PAGE_SIZE)
        self.timeout = timeout

    def fetch(self) -> ProviderResult:
        params = {"hl": "en-US", "gl": "US", "ceid": "US:en"}
        body = fetch_text(_GOOGLE_BUSINESS_RSS, params=params, timeout=self.timeout)
        if not body:
            return ProviderResult.unavailable(self.name, "empty RSS body")

        feed = feedparser.parse(body)
        if feed.bozo and not feed.entries:
            return ProviderResult.unavailable(
                self.name, f"RSS parse failure: {getattr(feed, 'bozo_exception', 'unknown')}"
            )

        headlines: List[Headline] = []
        for entry in feed.entries:
            title = (entry.get("title") or "").strip()
            if not title:
                continue
            source_raw = entry.get("source") or {}
            source = (
                source_raw.get("title", "") if isinstance(source_raw, dict) else str(source_raw)
            ).strip() or "Google News"
            # Google appends " - <Source>" to every title
            suffix = f" - {source}"
            if title.endswith(suffix):
                title = title[: -len(suffix)].strip()
            headlines.append(Headline(source=source, title=title))
            if len(headlines) >= self.page_size:
                break

        if not headlines:
            return ProviderResult.unavailable(self.name, "no entries with a title")
        logger.info(f"{self.name}: {len(headlines)} headlines")
        return ProviderResult.full(self.name, headlines)
