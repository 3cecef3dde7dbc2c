import asyncio
import json
import re
from abc import ABC, abstractmethod
from pathlib import Path

import redis.asyncio as aioredis
import structlog
from redis.exceptions import RedisError

from stockreport.config import Settings
from stockreport.exceptions import BackendUnavailableError

logger = structlog.get_logger()

SYMBOLS_KEY = "stock_symbols"
STATUS_KEY = "email_status"

_SYMBOLS_LINE = re.compile(r"^STOCK_SYMBOLS=(.*)$", re.MULTILINE)


class WatchlistBackend(ABC):
    """Storage for the symbol list and the last report run status."""

    name: str = "abstract"
    durable: bool = False

    @abstractmethod
    async def load_symbols(self) -> list[str] | None:
        """Return the stored list, or None when nothing has been stored yet."""
        ...

    @abstractmethod
    async def save_symbols(self, symbols: list[str]) -> None: ...

    @abstractmethod
    async def load_status(self) -> dict | None: ...

    @abstractmethod
    async def save_status(self, status: dict) -> None: ...

    async def aclose(self) -> None:
        return None


class InMemoryBackend(WatchlistBackend):
    name = "memory"

    def __init__(self, symbols: list[str] | None = None, durable: bool = False) -> None:
        self.symbols = list(symbols) if symbols is not None else None
        self.status: dict | None = None
        self.durable = durable

    async def load_symbols(self) -> list[str] | None:
        return list(self.symbols) if self.symbols is not None else None

    async def save_symbols(self, symbols: list[str]) -> None:
        self.symbols = list(symbols)

    async def load_status(self) -> dict | None:
        return dict(self.status) if self.status is not None else None

    async def save_status(self, status: dict) -> None:
        self.status = dict(status)


class EnvFileBackend(WatchlistBackend):
    """Degraded mode: keeps the list on the STOCK_SYMBOLS line of a dotenv file.

    Run status is held in memory only.
    """

    name = "env_file"

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._status: dict | None = None

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> str:
        if not self._path.exists():
            return ""
        return self._path.read_text(encoding="utf-8")

    def _write_symbols(self, symbols: list[str]) -> None:
        content = self._read()
        line = f"STOCK_SYMBOLS={','.join(symbols)}"
        if _SYMBOLS_LINE.search(content):
            content = _SYMBOLS_LINE.sub(lambda _: line, content, count=1)
        else:
            if content and not content.endswith("\n"):
                content += "\n"
            content += line + "\n"
        self._path.write_text(content, encoding="utf-8")

    async def load_symbols(self) -> list[str] | None:
        match = _SYMBOLS_LINE.search(self._read())
        if match is None:
            return None
        return [s.strip().upper() for s in match.group(1).split(",") if s.strip()]

    async def save_symbols(self, symbols: list[str]) -> None:
        try:
            await asyncio.to_thread(self._write_symbols, symbols)
        except OSError as exc:
            raise BackendUnavailableError(
                f"Failed to save configuration to {self._path}: {exc}"
            ) from exc
        logger.info("watchlist_saved_to_file", path=str(self._path), symbols=symbols)

    async def load_status(self) -> dict | None:
        return dict(self._status) if self._status is not None else None

    async def save_status(self, status: dict) -> None:
        self._status = dict(status)


class RedisBackend(WatchlistBackend):
    name = "redis"
    durable = True

    def __init__(self, client: aioredis.Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisBackend":
        client = aioredis.Redis.from_url(
            url,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
        return cls(client)

    async def connect(self) -> None:
        try:
            await self._client.ping()
        except (RedisError, OSError) as exc:
            raise BackendUnavailableError(f"Redis unreachable: {exc}") from exc

    async def _get_json(self, key: str):
        try:
            raw = await self._client.get(key)
        except (RedisError, OSError) as exc:
            raise BackendUnavailableError(f"Error reading {key} from Redis: {exc}") from exc
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("redis_value_corrupt", key=key)
            return None

    async def _set_json(self, key: str, value) -> None:
        try:
            await self._client.set(key, json.dumps(value))
        except (RedisError, OSError) as exc:
            raise BackendUnavailableError(f"Error writing {key} to Redis: {exc}") from exc

    async def load_symbols(self) -> list[str] | None:
        data = await self._get_json(SYMBOLS_KEY)
        if not isinstance(data, list):
            return None
        return [str(s).strip().upper() for s in data if str(s).strip()]

    async def save_symbols(self, symbols: list[str]) -> None:
        await self._set_json(SYMBOLS_KEY, symbols)
        logger.info("watchlist_saved_to_redis", symbols=symbols)

    async def load_status(self) -> dict | None:
        data = await self._get_json(STATUS_KEY)
        return data if isinstance(data, dict) else None

    async def save_status(self, status: dict) -> None:
        await self._set_json(STATUS_KEY, status)

    async def aclose(self) -> None:
        await self._client.aclose()


async def open_backend(settings: Settings) -> WatchlistBackend:
    """Pick Redis when it answers a PING, otherwise fall back to the dotenv file."""
    file_backend = EnvFileBackend(settings.env_file_path)
    if not settings.redis_url:
        logger.info(
            "redis_not_configured",
            fallback=file_backend.name,
            path=str(file_backend.path),
        )
        return file_backend

    backend = RedisBackend.from_url(settings.redis_url)
    try:
        await backend.connect()
    except BackendUnavailableError as exc:
        logger.warning("redis_unavailable", error=exc.message, fallback=file_backend.name)
        await backend.aclose()
        return file_backend

    logger.info("redis_connected")
    return backend
