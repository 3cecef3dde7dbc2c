from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

DEFAULT_SYMBOLS = ["AAPL", "GOOGL", "MSFT", "TSLA", "AMZN"]


def parse_symbol_list(raw: str | None) -> list[str]:
    """Split a comma separated STOCK_SYMBOLS value, falling back to the default set."""
    if not raw:
        return list(DEFAULT_SYMBOLS)
    return [s.strip().upper() for s in raw.split(",") if s.strip()]


class Settings(BaseSettings):
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "populate_by_name": True,
    }

    email_user: str = Field(default="")
    email_pass: str = Field(default="")
    email_to: str = Field(default="")
    smtp_host: str = Field(default="")
    smtp_port: int = Field(default=587, gt=0)
    smtp_secure: bool = Field(default=False)
    news_api_key: str = Field(default="")
    stock_symbols: str = Field(default="")
    cron_schedule: str = Field(default="0 8 * * *")
    redis_url: str = Field(
        default="",
        validation_alias=AliasChoices("redis_url", "REDIS_URL", "REDIS_PRIVATE_URL"),
    )
    env_file_path: str = Field(default=".env")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)
    log_level: str = Field(default="INFO")
    quote_concurrency: int = Field(default=4, ge=1)
    news_window_days: int = Field(default=7, ge=1)
    preview_limit: int = Field(default=5, ge=1)

    @property
    def default_symbols(self) -> list[str]:
        return parse_symbol_list(self.stock_symbols)

    @property
    def recipients(self) -> list[str]:
        raw = self.email_to or self.email_user
        return [r.strip() for r in raw.split(",") if r.strip()]

    @property
    def has_email_config(self) -> bool:
        return bool(self.email_user and self.email_pass)

    def missing_required(self) -> list[str]:
        required = {
            "EMAIL_USER": self.email_user,
            "EMAIL_PASS": self.email_pass,
            "NEWS_API_KEY": self.news_api_key,
        }
        return [name for name, value in required.items() if not value]


@lru_cache
def get_settings() -> Settings:
    return Settings()
