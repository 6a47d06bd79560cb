"""Per-conversation bot state: selected chain and the awaiting-address flag.

Handlers receive a SessionStore through the dispatcher and load/save an
explicit SessionContext keyed by chat id.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace

from loguru import logger
from redis.asyncio import Redis

from src.utils.chains import normalize_chain

DEFAULT_CHAIN = "eth"
KEY_PREFIX = "bubblebot:session:"


@dataclass
class SessionContext:
    chain: str = DEFAULT_CHAIN
    awaiting_address: bool = False


class SessionStore(ABC):
    def __init__(self, default_chain: str = DEFAULT_CHAIN) -> None:
        self._default_chain = normalize_chain(default_chain) or DEFAULT_CHAIN

    def _new_context(self) -> SessionContext:
        return SessionContext(chain=self._default_chain)

    @abstractmethod
    async def get(self, chat_id: int) -> SessionContext: ...

    @abstractmethod
    async def save(self, chat_id: int, ctx: SessionContext) -> None: ...

    async def close(self) -> None:
        pass


class InMemorySessionStore(SessionStore):
    """Process-local store; state is lost on restart."""

    def __init__(self, default_chain: str = DEFAULT_CHAIN) -> None:
        super().__init__(default_chain)
        self._sessions: dict[int, SessionContext] = {}

    async def get(self, chat_id: int) -> SessionContext:
        ctx = self._sessions.get(chat_id)
        # Copy so callers must save() to persist changes
        return replace(ctx) if ctx else self._new_context()

    async def save(self, chat_id: int, ctx: SessionContext) -> None:
        self._sessions[chat_id] = replace(ctx)


class RedisSessionStore(SessionStore):
    """Redis hash per chat: ``bubblebot:session:<chat_id>`` -> {chain, awaiting}."""

    def __init__(self, redis: Redis, default_chain: str = DEFAULT_CHAIN) -> None:
        super().__init__(default_chain)
        self._redis = redis

    async def get(self, chat_id: int) -> SessionContext:
        raw = await self._redis.hgetall(f"{KEY_PREFIX}{chat_id}")
        if not raw:
            return self._new_context()
        return SessionContext(
            chain=normalize_chain(raw.get("chain")) or self._default_chain,
            awaiting_address=raw.get("awaiting") == "1",
        )

    async def save(self, chat_id: int, ctx: SessionContext) -> None:
        await self._redis.hset(
            f"{KEY_PREFIX}{chat_id}",
            mapping={"chain": ctx.chain, "awaiting": "1" if ctx.awaiting_address else "0"},
        )

    async def close(self) -> None:
        await self._redis.aclose()


def create_session_store() -> SessionStore:
    """Redis-backed store when REDIS_URL is set, in-memory otherwise."""
    from config.settings import settings

    if settings.redis_url:
        logger.info("[BOT] Sessions stored in Redis")
        redis = Redis.from_url(settings.redis_url, decode_responses=True)
        return RedisSessionStore(redis, default_chain=settings.default_chain)
    logger.info("[BOT] Sessions stored in memory (REDIS_URL not set)")
    return InMemorySessionStore(default_chain=settings.default_chain)
