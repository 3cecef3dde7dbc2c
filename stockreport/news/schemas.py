from datetime import datetime

from stockreport.schemas import CamelModel


class NewsArticle(CamelModel):
    symbol: str
    title: str
    description: str | None = None
    url: str
    source: str
    published_at: datetime
    image: str | None = None


class NewsResponse(CamelModel):
    success: bool = True
    data: list[NewsArticle]
