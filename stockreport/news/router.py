from fastapi import APIRouter

from stockreport.dependencies import NewsServiceDep, WatchlistServiceDep
from stockreport.news.schemas import NewsResponse

router = APIRouter()


@router.get("/preview", response_model=NewsResponse)
async def preview_news(watchlist: WatchlistServiceDep, news: NewsServiceDep) -> NewsResponse:
    return NewsResponse(data=await news.get_news(await watchlist.list()))
