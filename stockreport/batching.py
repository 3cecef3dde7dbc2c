import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class SymbolResult(Generic[T]):
    """Outcome of one per-symbol fetch: either a value or the exception it raised."""

    symbol: str
    value: T | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def fetch_each(
    symbols: Sequence[str],
    fetch: Callable[[str], Awaitable[T]],
    max_concurrency: int = 4,
) -> list[SymbolResult[T]]:
    """Run ``fetch`` for every symbol without short-circuiting, results in input order."""
    semaphore = asyncio.Semaphore(max_concurrency)

    async def _one(symbol: str) -> SymbolResult[T]:
        async with semaphore:
            try:
                return SymbolResult(symbol=symbol, value=await fetch(symbol))
            except Exception as exc:
                return SymbolResult(symbol=symbol, error=exc)

    return list(await asyncio.gather(*(_one(s) for s in symbols)))
