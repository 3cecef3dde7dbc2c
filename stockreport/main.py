from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stockreport.config import get_settings
from stockreport.context import AppContext, build_context, validate_settings
from stockreport.dependencies import ContextDep
from stockreport.exception_handlers import register_exception_handlers
from stockreport.logging_config import setup_logging
from stockreport.market.router import router as market_router
from stockreport.news.router import router as news_router
from stockreport.scheduler.cron import describe_cron
from stockreport.scheduler.router import router as scheduler_router
from stockreport.schemas import ConfigResponse, SafeConfig
from stockreport.watchlist.router import router as watchlist_router

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # A context handed to create_app() is owned by the caller.
    if app.state.context is not None:
        yield
        return

    settings = get_settings()
    setup_logging(settings.log_level)
    validate_settings(settings)
    context = await build_context(settings)
    context.scheduler.start()
    app.state.context = context
    logger.info("service_started", storage=context.watchlist.backend.name)
    try:
        yield
    finally:
        logger.info("service_stopping")
        await context.aclose()
        app.state.context = None


def create_app(context: AppContext | None = None) -> FastAPI:
    app = FastAPI(
        title="Stock Report",
        description="Watchlist-driven daily stock report mailer",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(market_router, prefix="/api/stocks", tags=["market"])
    app.include_router(watchlist_router, prefix="/api/stocks", tags=["watchlist"])
    app.include_router(news_router, prefix="/api/news", tags=["news"])
    app.include_router(scheduler_router, prefix="/api", tags=["reports"])

    @app.get("/api/config", response_model=ConfigResponse)
    async def get_config(context: ContextDep) -> ConfigResponse:
        settings = context.settings
        symbols = await context.watchlist.list()
        return ConfigResponse(
            config=SafeConfig(
                email_to=", ".join(settings.recipients),
                cron_schedule=settings.cron_schedule,
                schedule_description=describe_cron(settings.cron_schedule),
                stock_count=len(symbols),
                has_email_config=settings.has_email_config,
                has_news_api=bool(settings.news_api_key),
                storage=context.watchlist.backend.name,
            )
        )

    return app


app = create_app()
