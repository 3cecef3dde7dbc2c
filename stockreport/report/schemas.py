from datetime import datetime

from stockreport.market.schemas import Quote
from stockreport.news.schemas import NewsArticle
from stockreport.schemas import CamelModel


class MarketSummary(CamelModel):
    tracked: int = 0
    gainers: int = 0
    losers: int = 0
    unchanged: int = 0
    biggest_gainer: Quote | None = None
    biggest_loser: Quote | None = None


class Report(CamelModel):
    subject: str
    html: str
    summary: MarketSummary
    quotes: list[Quote]
    articles: list[NewsArticle]
    generated_at: datetime
