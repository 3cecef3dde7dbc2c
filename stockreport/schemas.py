from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for payloads exchanged with the browser client, serialized in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SafeConfig(CamelModel):
    email_to: str
    cron_schedule: str
    schedule_description: str
    stock_count: int
    has_email_config: bool
    has_news_api: bool
    storage: str


class ConfigResponse(CamelModel):
    success: bool = True
    config: SafeConfig
