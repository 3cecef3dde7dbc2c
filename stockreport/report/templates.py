from datetime import datetime
from html import escape

from stockreport.market.schemas import Quote
from stockreport.news.schemas import NewsArticle
from stockreport.report.schemas import MarketSummary

_STYLE = """
    body {
      font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Arial, sans-serif;
      line-height: 1.6;
      color: #333;
      max-width: 800px;
      margin: 0 auto;
      padding: 20px;
    }
    h2 { color: #34495e; margin-top: 30px; }
    .header {
      background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
      color: white;
      padding: 30px;
      border-radius: 10px;
      margin-bottom: 30px;
    }
    .summary-box { background: #f8f9fa; padding: 20px; border-radius: 8px; margin: 20px 0; }
    .footer {
      margin-top: 40px;
      padding-top: 20px;
      border-top: 1px solid #ddd;
      text-align: center;
      color: #666;
      font-size: 0.9em;
    }
"""


def _money(value: float | None) -> str:
    return f"${value:,.2f}" if value is not None else "N/A"


def _signed(value: float | None, prefix: str = "", suffix: str = "") -> str:
    if value is None:
        return "N/A"
    sign = "+" if value >= 0 else "-"
    return f"{sign}{prefix}{abs(value):,.2f}{suffix}"


def render_summary(summary: MarketSummary) -> str:
    if summary.tracked == 0:
        return "<p>No market data available.</p>"

    items = [
        f"<li>📊 Tracking {summary.tracked} stocks</li>",
        f"<li>🟢 Gainers: {summary.gainers}</li>",
        f"<li>🔴 Losers: {summary.losers}</li>",
    ]
    if summary.unchanged > 0:
        items.append(f"<li>⚪ Unchanged: {summary.unchanged}</li>")
    if summary.biggest_gainer is not None:
        top = summary.biggest_gainer
        items.append(
            f"<li>🚀 Biggest Gainer: {escape(top.symbol)} "
            f"({_signed(top.change_percent, suffix='%')})</li>"
        )
    if summary.biggest_loser is not None:
        bottom = summary.biggest_loser
        items.append(
            f"<li>📉 Biggest Loser: {escape(bottom.symbol)} "
            f"({_signed(bottom.change_percent, suffix='%')})</li>"
        )
    return "<p><strong>Today's Summary:</strong></p><ul>" + "".join(items) + "</ul>"


def render_quote(quote: Quote) -> str:
    if quote.error:
        return (
            '<div style="border: 1px solid #f56565; padding: 15px; margin: 10px 0; '
            'border-radius: 5px; background-color: #fed7d7;">'
            f"<h3>❌ {escape(quote.symbol)}</h3>"
            f'<p style="color: #c53030;">Error: {escape(quote.message or "unknown error")}</p>'
            "</div>"
        )

    marker = "🟢" if (quote.change or 0) >= 0 else "🔴"
    market_cap = f"${quote.market_cap / 1e9:,.2f}B" if quote.market_cap else "N/A"
    volume = f"{quote.volume:,}" if quote.volume is not None else "N/A"
    return (
        '<div style="border: 1px solid #ddd; padding: 15px; margin: 10px 0; '
        'border-radius: 5px; background-color: white;">'
        f'<h3 style="margin-top: 0;">{marker} {escape(quote.symbol)} - '
        f"{escape(quote.name or quote.symbol)}</h3>"
        f"<p><strong>Current Price:</strong> {_money(quote.price)}</p>"
        f"<p><strong>Change:</strong> {_signed(quote.change, prefix='$')} "
        f"({_signed(quote.change_percent, suffix='%')})</p>"
        f"<p><strong>Day Range:</strong> {_money(quote.day_low)} - {_money(quote.day_high)}</p>"
        f"<p><strong>Volume:</strong> {volume}</p>"
        f"<p><strong>Market Cap:</strong> {market_cap}</p>"
        f"<p><strong>52 Week Range:</strong> {_money(quote.fifty_two_week_low)} - "
        f"{_money(quote.fifty_two_week_high)}</p>"
        "</div>"
    )


def render_article(article: NewsArticle) -> str:
    published = article.published_at
    date_label = f"{published:%b} {published.day}, {published.year}"
    return (
        '<div style="border-left: 3px solid #007bff; padding-left: 15px; margin: 15px 0;">'
        f'<h4 style="margin: 5px 0;">{escape(article.title)}</h4>'
        '<p style="color: #666; font-size: 0.9em;">'
        f"<strong>{escape(article.symbol)}</strong> | {escape(article.source)} | {date_label}</p>"
        f'<p style="margin: 10px 0;">'
        f"{escape(article.description or 'No description available.')}</p>"
        f'<a href="{escape(article.url, quote=True)}" '
        'style="color: #007bff; text-decoration: none;">Read more →</a>'
        "</div>"
    )


def render_report(
    summary: MarketSummary,
    quotes: list[Quote],
    articles: list[NewsArticle],
    generated_at: datetime,
) -> str:
    date_label = f"{generated_at:%A, %B} {generated_at.day}, {generated_at.year}"
    stocks_html = "".join(render_quote(q) for q in quotes) or "<p>No stocks tracked.</p>"
    news_html = "".join(render_article(a) for a in articles) or "<p>No recent news.</p>"
    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <style>{_STYLE}</style>
</head>
<body>
  <div class="header">
    <h1 style="color: white; border: none; margin: 0;">📈 Daily Stock Report</h1>
    <p style="margin: 10px 0 0 0; opacity: 0.9;">{date_label}</p>
  </div>
  <div class="summary-box">
    <h2>Market Overview</h2>
    {render_summary(summary)}
  </div>
  <h2>Stock Performance</h2>
  {stocks_html}
  <h2>Latest News</h2>
  {news_html}
  <div class="footer">
    <p>This is an automated daily stock report.</p>
    <p>Generated at {generated_at:%H:%M:%S} UTC</p>
  </div>
</body>
</html>
"""
