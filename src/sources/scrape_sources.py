# src/sources/scrape_sources.py

"""Remote retail sources scraped from public search result pages."""

import asyncio
import json
from typing import Any
from urllib.parse import quote_plus, urljoin

import cloudscraper  # type: ignore[import-untyped]
from bs4 import BeautifulSoup, Tag
from curl_cffi import requests as curl_requests

from src.config.settings import Settings
from src.filters.normalizer import FieldMap, ProductNormalizer
from src.models.product import ProductRecord
from src.models.search import SearchOptions
from src.sources.base_source import SourceAdapter
from src.sources.exceptions import SourceError

_CARD_FIELDS = FieldMap(
    id=("id",),
    title=("title",),
    price=("price",),
    rating=("rating",),
    review_count=("reviews",),
    image_url=("image",),
    url=("url",),
)


class StorefrontScraper(SourceAdapter):
    """Base for sources parsed out of HTML search pages.

    CSS selectors for each source live in ``selectors.json`` under the
    source id.  Pages are fetched with a browser-impersonating curl_cffi
    session, falling back to cloudscraper when that is refused.
    """

    HOMEPAGE: str = ""
    SEARCH_URL: str = ""

    # Cloudflare challenge page markers
    _CHALLENGE_MARKERS: tuple[str, ...] = (
        "challenges.cloudflare.com",
        "cdn-cgi/challenge-platform",
        "cf-turnstile",
        "captcha",
        "verify you are human",
    )

    def __init__(
        self,
        enabled: bool = True,
        timeout: float | None = None,
    ) -> None:
        super().__init__(enabled=enabled, timeout=timeout)
        self.settings = Settings()
        self.selectors: dict[str, str] = self._load_selectors()
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )

    def _load_selectors(self) -> dict[str, str]:
        """Load CSS selectors for this source from selectors.json."""
        with open(self.settings.SELECTORS_PATH, encoding="utf-8") as f:
            all_selectors: dict[str, Any] = json.load(f)
        result: dict[str, str] = all_selectors.get(self.source_id, {})
        return result

    def _is_challenge(self, text: str) -> bool:
        lower = text.lower()
        # Real result pages are large; only short pages are suspect
        if "<body" in lower and len(text) > 5000:
            return False
        return any(marker in lower for marker in self._CHALLENGE_MARKERS)

    def _get_page(self, url: str) -> BeautifulSoup | None:
        """Fetch a page, falling back to cloudscraper on failure."""
        headers: dict[str, str] = {
            **self.settings.DEFAULT_HEADERS,
            "Referer": self.HOMEPAGE,
        }

        try:
            resp = self.session.get(
                url,
                headers=headers,
                timeout=self.settings.REQUEST_TIMEOUT,
            )
            if resp.status_code == 200 and not self._is_challenge(resp.text):
                return BeautifulSoup(resp.text, "lxml")
            self.logger.warning(
                "[%s] HTTP %d or challenge page from curl_cffi",
                self.source_id,
                resp.status_code,
            )
        except Exception as exc:
            self.logger.warning(
                "[%s] curl_cffi request error: %s",
                self.source_id,
                exc,
                exc_info=True,
            )

        self.logger.info(
            "[%s] Falling back to cloudscraper", self.source_id
        )
        try:
            _cs: Any = cloudscraper
            scraper: Any = _cs.create_scraper()
            fallback_resp: Any = scraper.get(
                url,
                headers=headers,
                timeout=self.settings.REQUEST_TIMEOUT,
            )
            text = str(fallback_resp.text)
            if fallback_resp.status_code == 200 and not self._is_challenge(text):
                return BeautifulSoup(text, "lxml")
        except Exception as exc:
            self.logger.error(
                "[%s] cloudscraper fallback also failed: %s",
                self.source_id,
                exc,
                exc_info=True,
            )
        return None

    def _select_text(self, card: Tag, key: str) -> str:
        selector = self.selectors.get(key, "")
        if not selector:
            return ""
        el = card.select_one(selector)
        return el.get_text(strip=True) if el else ""

    def _select_attr(self, card: Tag, key: str, attr: str) -> str:
        selector = self.selectors.get(key, "")
        if not selector:
            return ""
        el = card.select_one(selector)
        if el is None:
            return ""
        value = el.get(attr)
        if isinstance(value, list):
            value = " ".join(value)
        return str(value or "")

    def _parse_card(self, card: Tag, index: int) -> dict[str, Any]:
        """Pull the raw fields out of one result card."""
        href = self._select_attr(card, "url", "href")
        return {
            "id": f"{self.source_id}-{index}",
            "title": self._select_text(card, "title"),
            "price": self._select_text(card, "price"),
            "rating": self._select_text(card, "rating"),
            "reviews": self._select_text(card, "reviews"),
            "image": self._select_attr(card, "image", "src"),
            "url": urljoin(self.HOMEPAGE, href) if href else "",
        }

    def _search_sync(self, term: str, limit: int) -> list[dict[str, Any]]:
        url = self.SEARCH_URL.format(query=quote_plus(term))
        soup = self._get_page(url)
        if soup is None:
            raise SourceError(f"{self.label} search page unavailable")

        cards = soup.select(self.selectors["product_card"])
        return [
            self._parse_card(card, idx)
            for idx, card in enumerate(cards[:limit])
        ]

    async def query(
        self, term: str, options: SearchOptions
    ) -> list[ProductRecord]:
        self.logger.info("[%s] Scraping results for '%s'", self.source_id, term)
        items = await asyncio.to_thread(
            self._search_sync, term, options.limit
        )
        records, _dropped = ProductNormalizer.normalize(
            self.source_id, items, _CARD_FIELDS
        )
        return records


class AmazonWebSource(StorefrontScraper):
    """Scraper for amazon.com search results."""

    source_id = "amazon_web"
    label = "Amazon (web)"
    HOMEPAGE = "https://www.amazon.com/"
    SEARCH_URL = "https://www.amazon.com/s?k={query}"


class WalmartWebSource(StorefrontScraper):
    """Scraper for walmart.com search results."""

    source_id = "walmart_web"
    label = "Walmart (web)"
    HOMEPAGE = "https://www.walmart.com/"
    SEARCH_URL = "https://www.walmart.com/search?q={query}"


class TargetWebSource(StorefrontScraper):
    """Scraper for target.com search results."""

    source_id = "target_web"
    label = "Target (web)"
    HOMEPAGE = "https://www.target.com/"
    SEARCH_URL = "https://www.target.com/s?searchTerm={query}"
