from datetime import UTC, datetime

import structlog

from stockreport.market.schemas import Quote
from stockreport.news.schemas import NewsArticle
from stockreport.report.schemas import MarketSummary, Report
from stockreport.report.templates import render_report

logger = structlog.get_logger()


def summarize_market(quotes: list[Quote]) -> MarketSummary:
    """Count movers over the successful quotes; error quotes are ignored.

    A quote without a change value is tracked but counted in no mover bucket.
    """
    valid = [q for q in quotes if not q.error]
    if not valid:
        return MarketSummary()

    priced = [q for q in valid if q.change is not None]
    ranked = [q for q in priced if q.change_percent is not None]
    return MarketSummary(
        tracked=len(valid),
        gainers=sum(1 for q in priced if q.change > 0),
        losers=sum(1 for q in priced if q.change < 0),
        unchanged=sum(1 for q in priced if q.change == 0),
        biggest_gainer=max(ranked, key=lambda q: q.change_percent, default=None),
        biggest_loser=min(ranked, key=lambda q: q.change_percent, default=None),
    )


def report_subject(when: datetime) -> str:
    return f"Stock Report - {when:%b} {when.day}, {when.year}"


class ReportComposer:
    def compose(
        self,
        quotes: list[Quote],
        articles: list[NewsArticle],
        generated_at: datetime | None = None,
    ) -> Report:
        generated_at = generated_at or datetime.now(UTC)
        summary = summarize_market(quotes)
        html = render_report(summary, quotes, articles, generated_at)
        logger.info(
            "report_composed",
            quotes=len(quotes),
            articles=len(articles),
            gainers=summary.gainers,
            losers=summary.losers,
        )
        return Report(
            subject=report_subject(generated_at),
            html=html,
            summary=summary,
            quotes=quotes,
            articles=articles,
            generated_at=generated_at,
        )
