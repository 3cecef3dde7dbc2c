"""
Tests for news aggregation and the Finnhub adapter.
"""
from datetime import UTC, date, datetime

import httpx

from stockreport.news.providers.base import rank_articles
from stockreport.news.providers.finnhub import (
    FINNHUB_NEWS_URL,
    FinnhubNewsProvider,
    article_from_item,
)
from stockreport.news.service import NewsService

from tests.fakes import NOW, FakeNewsProvider, make_article


class TestAggregation:
    async def test_caps_and_sorts_across_symbols(self):
        provider = FakeNewsProvider(
            {
                symbol: [make_article(symbol, offset + 3 * i) for i in range(5)]
                for offset, symbol in enumerate(["AAPL", "MSFT", "TSLA"])
            }
        )
        articles = await NewsService(provider).get_news(["AAPL", "MSFT", "TSLA"])

        assert len(articles) <= 20
        assert len(articles) == 15
        published = [a.published_at for a in articles]
        assert published == sorted(published, reverse=True)

    def test_per_symbol_cap_keeps_newest(self):
        articles = [make_article("AAPL", hours) for hours in range(8, 0, -1)]
        ranked = rank_articles(articles)
        assert len(ranked) == 5
        assert [a.published_at for a in ranked][0] == make_article("AAPL", 1).published_at

    def test_global_cap(self):
        symbols = [f"S{i}" for i in range(6)]
        articles = [make_article(s, h) for s in symbols for h in range(5)]
        assert len(rank_articles(articles)) == 20

    async def test_failed_symbol_is_skipped(self):
        provider = FakeNewsProvider({"AAPL": [make_article("AAPL", 2)]})
        articles = await NewsService(provider).get_news(["AAPL", "FAIL"])
        assert [a.symbol for a in articles] == ["AAPL"]

    async def test_uses_trailing_window(self):
        provider = FakeNewsProvider({"AAPL": []})
        await provider.fetch(["AAPL"], window_days=7, now=NOW)
        assert provider.windows == [(date(2026, 10, 9), date(2026, 10, 16))]


class TestFinnhubNewsProvider:
    async def test_maps_company_news(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = f"{request.url.scheme}://{request.url.host}{request.url.path}"
            seen["params"] = dict(request.url.params)
            return httpx.Response(
                200,
                json=[
                    {
                        "headline": "Apple unveils new chip",
                        "summary": "",
                        "url": "https://example.com/a",
                        "source": "Bloomberg",
                        "datetime": 1760600000,
                        "image": "https://example.com/a.png",
                    },
                    {"headline": "", "url": "https://example.com/skip", "datetime": 1},
                ],
            )

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        provider = FinnhubNewsProvider("secret", client=client)
        articles = await provider.get_company_news("AAPL", date(2026, 10, 9), date(2026, 10, 16))
        await provider.aclose()

        assert seen["url"] == FINNHUB_NEWS_URL
        assert seen["params"] == {
            "symbol": "AAPL",
            "from": "2026-10-09",
            "to": "2026-10-16",
            "token": "secret",
        }
        assert len(articles) == 1
        article = articles[0]
        assert article.title == "Apple unveils new chip"
        assert article.description is None
        assert article.source == "Bloomberg"
        assert article.published_at == datetime.fromtimestamp(1760600000, UTC)

    def test_malformed_timestamp_is_skipped(self):
        item = {"headline": "h", "url": "https://x", "datetime": "yesterday"}
        assert article_from_item("AAPL", item) is None
        assert article_from_item("AAPL", {**item, "datetime": 10**20}) is None

    async def test_malformed_timestamp_keeps_other_articles(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json=[
                    {"headline": "bad", "url": "https://x/bad", "datetime": "not-a-time"},
                    {"headline": "good", "url": "https://x/good", "source": "s", "datetime": 10},
                ],
            )

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        provider = FinnhubNewsProvider("secret", client=client)
        articles = await provider.get_company_news("AAPL", date(2026, 10, 9), date(2026, 10, 16))
        await provider.aclose()

        assert [a.title for a in articles] == ["good"]

    async def test_http_error_skips_symbol(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.params["symbol"] == "MSFT":
                return httpx.Response(429, json={"error": "API limit reached"})
            return httpx.Response(
                200,
                json=[{"headline": "h", "url": "https://x", "source": "s", "datetime": 10}],
            )

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        provider = FinnhubNewsProvider("secret", client=client)
        articles = await provider.fetch(["AAPL", "MSFT"])
        await provider.aclose()

        assert [a.symbol for a in articles] == ["AAPL"]
