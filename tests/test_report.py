"""
Tests for the market summary and the rendered report.
"""
from stockreport.market.schemas import Quote
from stockreport.report.service import ReportComposer, report_subject, summarize_market

from tests.fakes import NOW, make_article, make_quote


class TestSummarizeMarket:
    def test_counts_gainers_losers_unchanged(self):
        quotes = [make_quote("UP", 1.0), make_quote("DOWN", -1.0), make_quote("FLAT", 0.0)]
        summary = summarize_market(quotes)
        assert summary.tracked == 3
        assert (summary.gainers, summary.losers, summary.unchanged) == (1, 1, 1)

    def test_biggest_movers_by_change_percent(self):
        quotes = [
            make_quote("AAA", 5.0, change_percent=1.0),
            make_quote("BBB", 1.0, change_percent=4.0),
            make_quote("CCC", -2.0, change_percent=-3.0),
        ]
        summary = summarize_market(quotes)
        assert summary.biggest_gainer.symbol == "BBB"
        assert summary.biggest_loser.symbol == "CCC"

    def test_error_quotes_are_ignored(self):
        quotes = [make_quote("AAPL", 2.0), Quote.failed("NOPE", "not found")]
        summary = summarize_market(quotes)
        assert summary.tracked == 1
        assert summary.gainers == 1

    def test_quote_without_change_is_tracked_but_not_bucketed(self):
        unpriced = make_quote("NEW").model_copy(update={"change": None, "change_percent": None})
        summary = summarize_market([make_quote("AAPL", 2.0), unpriced])
        assert summary.tracked == 2
        assert (summary.gainers, summary.losers, summary.unchanged) == (1, 0, 0)
        assert summary.biggest_gainer.symbol == "AAPL"

    def test_only_unpriced_quotes_still_counted(self):
        unpriced = make_quote("NEW").model_copy(update={"change": None, "change_percent": None})
        summary = summarize_market([unpriced])
        assert summary.tracked == 1
        assert summary.biggest_gainer is None

    def test_no_valid_quotes(self):
        summary = summarize_market([Quote.failed("NOPE", "not found")])
        assert summary.tracked == 0
        assert summary.biggest_gainer is None


class TestReportComposer:
    def test_subject_uses_short_date(self):
        assert report_subject(NOW) == "Stock Report - Oct 16, 2026"

    def test_renders_quotes_news_and_errors(self):
        quotes = [make_quote("AAPL", 2.0), Quote.failed("NOPE", "not found")]
        articles = [make_article("AAPL", 2, title="Apple <beats> estimates")]

        report = ReportComposer().compose(quotes, articles, generated_at=NOW)

        assert report.subject == "Stock Report - Oct 16, 2026"
        assert "Friday, October 16, 2026" in report.html
        assert "AAPL - AAPL Inc." in report.html
        assert "+$2.00" in report.html
        assert "Error: Failed to fetch data: not found" in report.html
        assert "Apple &lt;beats&gt; estimates" in report.html
        assert "Unchanged" not in report.html
        assert report.summary.gainers == 1

    def test_empty_report(self):
        report = ReportComposer().compose([], [], generated_at=NOW)
        assert "No market data available." in report.html
        assert "No recent news." in report.html
