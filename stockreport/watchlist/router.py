from fastapi import APIRouter

from stockreport.dependencies import WatchlistServiceDep
from stockreport.watchlist.schemas import SymbolCreate, SymbolsReplace, SymbolsResponse

router = APIRouter()


@router.get("", response_model=SymbolsResponse)
async def list_symbols(service: WatchlistServiceDep) -> SymbolsResponse:
    return SymbolsResponse(symbols=await service.list())


@router.post("", response_model=SymbolsResponse)
async def add_symbol(data: SymbolCreate, service: WatchlistServiceDep) -> SymbolsResponse:
    return SymbolsResponse(symbols=await service.add(data.symbol or ""))


@router.put("", response_model=SymbolsResponse)
async def replace_symbols(data: SymbolsReplace, service: WatchlistServiceDep) -> SymbolsResponse:
    return SymbolsResponse(symbols=await service.replace(data.symbols))


@router.delete("/{symbol}", response_model=SymbolsResponse)
async def remove_symbol(symbol: str, service: WatchlistServiceDep) -> SymbolsResponse:
    return SymbolsResponse(symbols=await service.remove(symbol))
