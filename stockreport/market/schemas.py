from datetime import datetime

from stockreport.schemas import CamelModel


class Quote(CamelModel):
    symbol: str
    name: str | None = None
    price: float | None = None
    change: float | None = None
    change_percent: float | None = None
    previous_close: float | None = None
    day_high: float | None = None
    day_low: float | None = None
    volume: int | None = None
    market_cap: float | None = None
    fifty_two_week_high: float | None = None
    fifty_two_week_low: float | None = None
    error: bool = False
    message: str | None = None

    @classmethod
    def failed(cls, symbol: str, reason: str) -> "Quote":
        return cls(symbol=symbol, error=True, message=f"Failed to fetch data: {reason}")


class QuotesResponse(CamelModel):
    success: bool = True
    data: list[Quote]


class LiveQuotesResponse(QuotesResponse):
    timestamp: datetime
