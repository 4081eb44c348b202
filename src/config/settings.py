# src/config/settings.py

"""Central configuration for the storefront_search engine."""

import os
from pathlib import Path
from typing import Any

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the storefront_search engine."""

    # --- Credentials (from .env) ---
    RAPIDAPI_KEY: str = os.getenv("RAPIDAPI_KEY", "")
    EBAY_ACCESS_TOKEN: str = os.getenv("EBAY_ACCESS_TOKEN", "")

    # --- Dispatch ---
    SOURCE_TIMEOUT: float = float(
        os.getenv("SOURCE_TIMEOUT", "5.0")
    )                                   # Per-source budget (secs)
    REQUEST_TIMEOUT: int = 10           # HTTP timeout inside an adapter

    # --- Query ---
    MIN_QUERY_LENGTH: int = 2
    MIN_TERM_LENGTH: int = 2
    DEFAULT_RESULT_LIMIT: int = 20
    MAX_RESULT_LIMIT: int = 100
    SORT_STRATEGIES: tuple[str, ...] = (
        "relevance",
        "price_low",
        "price_high",
        "rating",
        "reviews",
    )

    # --- Cache ---
    QUERY_CACHE_TTL: float = float(
        os.getenv("QUERY_CACHE_TTL", "300")
    )                                   # 5 minutes
    RETRY_PARTIAL_RESULTS: bool = False  # Re-dispatch partial cache hits

    # --- Suggestions ---
    LOCAL_CATEGORIES: list[str] = [
        "dresses",
        "tops",
        "bottoms",
        "shoes",
        "accessories",
        "outerwear",
        "swimwear",
        "lingerie",
        "suits",
        "activewear",
    ]
    POPULAR_SEARCHES: list[str] = [
        "summer dresses",
        "casual shoes",
        "designer handbags",
        "winter coats",
        "workout gear",
        "formal wear",
        "vintage accessories",
        "trending styles",
    ]
    MAX_CATEGORY_SUGGESTIONS: int = 3
    MAX_POPULAR_SUGGESTIONS: int = 4

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": (
            "text/html,application/xhtml+xml,"
            "application/xml;q=0.9,image/avif,"
            "image/webp,image/apng,*/*;q=0.8"
        ),
        "Accept-Language": "en-US,en;q=0.9",
        "sec-ch-ua": (
            '"Google Chrome";v="131", '
            '"Chromium";v="131", '
            '"Not_A Brand";v="24"'
        ),
        "sec-ch-ua-mobile": "?0",
        "sec-ch-ua-platform": '"Windows"',
        "Upgrade-Insecure-Requests": "1",
    }

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    CATALOG_PATH: Path = BASE_DIR / "src" / "config" / "catalog.json"
    SELECTORS_PATH: Path = BASE_DIR / "src" / "config" / "selectors.json"
    LOGS_DIR: Path = BASE_DIR / "logs"
    LOG_RETENTION_RUNS: int = 20        # Newest run logs kept on disk

    # --- Sources (registration order = dispatch and tie-break order) ---
    AVAILABLE_SOURCES: list[dict[str, Any]] = [
        {
            "id": "local",
            "label": "Local Catalog",
            "adapter": "src.sources.local_catalog.LocalCatalogSource",
            "enabled": True,
        },
        {
            "id": "amazon",
            "label": "Amazon",
            "adapter": "src.sources.api_sources.AmazonApiSource",
            "enabled": bool(RAPIDAPI_KEY),
        },
        {
            "id": "ebay",
            "label": "eBay",
            "adapter": "src.sources.api_sources.EbayApiSource",
            "enabled": bool(EBAY_ACCESS_TOKEN),
        },
        {
            "id": "walmart",
            "label": "Walmart",
            "adapter": "src.sources.api_sources.WalmartApiSource",
            "enabled": bool(RAPIDAPI_KEY),
        },
        {
            "id": "target",
            "label": "Target",
            "adapter": "src.sources.api_sources.TargetApiSource",
            "enabled": bool(RAPIDAPI_KEY),
        },
        {
            "id": "etsy",
            "label": "Etsy",
            "adapter": "src.sources.api_sources.EtsyApiSource",
            "enabled": bool(RAPIDAPI_KEY),
        },
        {
            "id": "amazon_web",
            "label": "Amazon (web)",
            "adapter": "src.sources.scrape_sources.AmazonWebSource",
            "enabled": False,
            "timeout": 10.0,
        },
        {
            "id": "walmart_web",
            "label": "Walmart (web)",
            "adapter": "src.sources.scrape_sources.WalmartWebSource",
            "enabled": False,
            "timeout": 10.0,
        },
        {
            "id": "target_web",
            "label": "Target (web)",
            "adapter": "src.sources.scrape_sources.TargetWebSource",
            "enabled": False,
            "timeout": 10.0,
        },
    ]
