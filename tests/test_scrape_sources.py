# tests/test_scrape_sources.py

"""Tests for the HTML scrape sources using mocked HTTP responses."""

import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

from src.models.search import SearchOptions
from src.sources.exceptions import SourceError
from src.sources.scrape_sources import AmazonWebSource, WalmartWebSource

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _fixture_response() -> MagicMock:
    mock_resp = MagicMock()
    mock_resp.status_code = 200
    with open(FIXTURES_DIR / "amazon_web_search.html", encoding="utf-8") as f:
        mock_resp.text = f.read()
    return mock_resp


class TestAmazonWebSource(unittest.IsolatedAsyncioTestCase):
    """Parsing of an Amazon search page fixture."""

    @patch("src.sources.scrape_sources.curl_requests.Session")
    async def test_query_parses_cards(self, mock_session_cls: MagicMock) -> None:
        """Cards without a price are dropped."""
        mock_session = MagicMock()
        mock_session.get.return_value = _fixture_response()
        mock_session_cls.return_value = mock_session

        source = AmazonWebSource()
        records = await source.query("linen shirt", SearchOptions())

        self.assertEqual(len(records), 3)
        self.assertTrue(all(r.source == "amazon_web" for r in records))
        self.assertEqual(
            records[0].title, "Men's Linen Button-Down Shirt Short Sleeve"
        )

    @patch("src.sources.scrape_sources.curl_requests.Session")
    async def test_fields_parsed(self, mock_session_cls: MagicMock) -> None:
        mock_session = MagicMock()
        mock_session.get.return_value = _fixture_response()
        mock_session_cls.return_value = mock_session

        records = await AmazonWebSource().query("linen shirt", SearchOptions())

        first, second, third = records
        self.assertEqual(first.price, 27.99)
        self.assertEqual(first.rating, 4.4)
        self.assertEqual(first.review_count, 2318)
        self.assertEqual(
            first.url, "https://www.amazon.com/Mens-Linen-Shirt/dp/B0C1LIN001"
        )
        self.assertEqual(
            first.image_url,
            "https://m.media-amazon.com/images/I/linen-001.jpg",
        )
        self.assertEqual(second.price, 1034.5)
        self.assertIsNone(third.rating)
        self.assertIsNone(third.review_count)

    @patch("src.sources.scrape_sources.curl_requests.Session")
    async def test_limit_caps_cards(self, mock_session_cls: MagicMock) -> None:
        mock_session = MagicMock()
        mock_session.get.return_value = _fixture_response()
        mock_session_cls.return_value = mock_session

        records = await AmazonWebSource().query(
            "linen", SearchOptions.create(limit=1)
        )
        self.assertEqual(len(records), 1)

    @patch("src.sources.scrape_sources.curl_requests.Session")
    async def test_search_url_encodes_term(
        self, mock_session_cls: MagicMock
    ) -> None:
        mock_session = MagicMock()
        mock_session.get.return_value = _fixture_response()
        mock_session_cls.return_value = mock_session

        await AmazonWebSource().query("linen shirt", SearchOptions())
        url = mock_session.get.call_args[0][0]
        self.assertEqual(url, "https://www.amazon.com/s?k=linen+shirt")

    @patch("src.sources.scrape_sources.cloudscraper.create_scraper")
    @patch("src.sources.scrape_sources.curl_requests.Session")
    async def test_blocked_page_raises(
        self,
        mock_session_cls: MagicMock,
        mock_create_scraper: MagicMock,
    ) -> None:
        """Both transports refused: the source reports an error."""
        blocked = MagicMock()
        blocked.status_code = 403
        blocked.text = "<html>verify you are human</html>"
        mock_session = MagicMock()
        mock_session.get.return_value = blocked
        mock_session_cls.return_value = mock_session
        mock_create_scraper.return_value.get.return_value = blocked

        with self.assertRaises(SourceError):
            await AmazonWebSource().query("linen", SearchOptions())
        mock_create_scraper.assert_called_once()

    @patch("src.sources.scrape_sources.cloudscraper.create_scraper")
    @patch("src.sources.scrape_sources.curl_requests.Session")
    async def test_cloudscraper_fallback(
        self,
        mock_session_cls: MagicMock,
        mock_create_scraper: MagicMock,
    ) -> None:
        """A challenge page from curl_cffi falls back to cloudscraper."""
        challenge = MagicMock()
        challenge.status_code = 200
        challenge.text = "<html>challenges.cloudflare.com</html>"
        mock_session = MagicMock()
        mock_session.get.return_value = challenge
        mock_session_cls.return_value = mock_session
        mock_create_scraper.return_value.get.return_value = _fixture_response()

        records = await AmazonWebSource().query("linen", SearchOptions())
        self.assertEqual(len(records), 3)


class TestStorefrontScraperSelectors(unittest.TestCase):
    """Selector loading per source."""

    @patch("src.sources.scrape_sources.curl_requests.Session")
    def test_selectors_loaded_by_source_id(
        self, mock_session_cls: MagicMock
    ) -> None:
        source = WalmartWebSource()
        self.assertIn("product_card", source.selectors)
        self.assertEqual(source.source_id, "walmart_web")

    def test_challenge_detection(self) -> None:
        with patch("src.sources.scrape_sources.curl_requests.Session"):
            source = AmazonWebSource()
        self.assertTrue(source._is_challenge("<p>Captcha required</p>"))
        self.assertFalse(source._is_challenge("<p>Linen shirts</p>"))


if __name__ == "__main__":
    unittest.main()
