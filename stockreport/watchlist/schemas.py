from pydantic import BaseModel

from stockreport.schemas import CamelModel


class SymbolCreate(BaseModel):
    symbol: str | None = None


class SymbolsReplace(BaseModel):
    symbols: list[str]


class SymbolsResponse(CamelModel):
    success: bool = True
    symbols: list[str]
