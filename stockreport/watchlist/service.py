from __future__ import annotations

import re

import structlog

from stockreport.exceptions import (
    BackendUnavailableError,
    DuplicateSymbolError,
    InvalidSymbolError,
    SymbolNotFoundError,
    ValidationError,
)
from stockreport.watchlist.backends import WatchlistBackend

logger = structlog.get_logger()

_TICKER_PATTERN = re.compile(r"^[A-Z0-9.\-]{1,10}$")


def normalize_symbol(symbol: str) -> str:
    return symbol.strip().upper()


def validate_symbol(symbol: str) -> bool:
    """Return True when the symbol, uppercased, matches the ticker grammar."""
    return bool(_TICKER_PATTERN.fullmatch(symbol.upper()))


class WatchlistService:
    """Owns the tracked symbol list and writes every change through to its backend."""

    def __init__(self, backend: WatchlistBackend, symbols: list[str]) -> None:
        self._backend = backend
        self._symbols = list(symbols)

    @classmethod
    async def create(cls, backend: WatchlistBackend, defaults: list[str]) -> "WatchlistService":
        symbols = _dedupe(normalize_symbol(s) for s in defaults if s.strip())

        try:
            stored = await backend.load_symbols()
        except BackendUnavailableError as exc:
            # Unknown stored state: never seed over it.
            logger.warning("watchlist_load_failed", backend=backend.name, error=exc.message)
            return cls(backend, symbols)

        if stored is not None:
            logger.info("watchlist_loaded", backend=backend.name, symbols=stored)
            return cls(backend, stored)

        if not backend.durable:
            logger.info("watchlist_defaults", backend=backend.name, symbols=symbols)
            return cls(backend, symbols)

        try:
            await backend.save_symbols(symbols)
        except BackendUnavailableError as exc:
            logger.warning("watchlist_seed_failed", backend=backend.name, error=exc.message)
        else:
            logger.info("watchlist_seeded", backend=backend.name, symbols=symbols)
        return cls(backend, symbols)

    @property
    def backend(self) -> WatchlistBackend:
        return self._backend

    @staticmethod
    def validate(symbol: str) -> bool:
        return validate_symbol(symbol)

    async def list(self) -> list[str]:
        if self._backend.durable:
            try:
                stored = await self._backend.load_symbols()
            except BackendUnavailableError as exc:
                logger.warning("watchlist_refresh_failed", error=exc.message)
            else:
                if stored is not None:
                    self._symbols = stored
        return list(self._symbols)

    async def add(self, symbol: str) -> list[str]:
        symbol = normalize_symbol(symbol or "")
        if not symbol:
            raise ValidationError("Symbol is required")
        if not validate_symbol(symbol):
            raise InvalidSymbolError([symbol])

        current = await self.list()
        if symbol in current:
            raise DuplicateSymbolError(symbol)

        updated = [*current, symbol]
        await self._persist(updated)
        logger.info("watchlist_symbol_added", symbol=symbol, count=len(updated))
        return list(updated)

    async def remove(self, symbol: str) -> list[str]:
        symbol = normalize_symbol(symbol or "")
        current = await self.list()
        if symbol not in current:
            raise SymbolNotFoundError(symbol)

        updated = [s for s in current if s != symbol]
        await self._persist(updated)
        logger.info("watchlist_symbol_removed", symbol=symbol, count=len(updated))
        return list(updated)

    async def replace(self, symbols: list[str]) -> list[str]:
        invalid = [s for s in symbols if not validate_symbol(normalize_symbol(s))]
        if invalid:
            raise InvalidSymbolError(invalid)

        updated = _dedupe(normalize_symbol(s) for s in symbols)
        await self._persist(updated)
        logger.info("watchlist_replaced", symbols=updated)
        return list(updated)

    async def _persist(self, symbols: list[str]) -> None:
        await self._backend.save_symbols(symbols)
        self._symbols = list(symbols)


def _dedupe(symbols) -> list[str]:
    seen: dict[str, None] = {}
    for symbol in symbols:
        seen.setdefault(symbol, None)
    return list(seen)
