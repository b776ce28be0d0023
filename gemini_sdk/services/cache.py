"""In-memory response cache with expiry and a size bound."""

import asyncio
import hashlib
import json
import time
from collections import OrderedDict
from collections.abc import Callable

from loguru import logger

from gemini_sdk.config import CacheConfig
from gemini_sdk.models.response import GeminiResponse


class ResponseCache:
    """Read-through, write-through cache of generation responses.

    Entries expire ``ttl`` seconds after they were stored; once ``max_size``
    entries are held the least recently used one is evicted. All access goes
    through an ``asyncio.Lock`` so concurrent calls may share one instance.
    """

    def __init__(self, config: CacheConfig, clock: Callable[[], float] = time.monotonic):
        self.config = config
        self._clock = clock
        self._entries: OrderedDict[str, tuple[float, GeminiResponse]] = OrderedDict()
        self._lock = asyncio.Lock()
        self.hits = 0
        self.misses = 0

    @staticmethod
    def fingerprint(path: str, body: dict) -> str:
        """Stable key for a request: SHA-256 over path and canonical JSON body."""
        canonical = json.dumps(
            {"path": path, "body": body},
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
        )
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()

    def _is_expired(self, created_at: float) -> bool:
        return self._clock() - created_at >= self.config.ttl

    async def get(self, key: str) -> GeminiResponse | None:
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None

            created_at, response = entry
            if self._is_expired(created_at):
                del self._entries[key]
                self.misses += 1
                return None

            self._entries.move_to_end(key)
            self.hits += 1
            return response

    async def put(self, key: str, response: GeminiResponse) -> None:
        async with self._lock:
            self._entries[key] = (self._clock(), response)
            self._entries.move_to_end(key)
            while len(self._entries) > self.config.max_size:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Evicted cached response {evicted[:12]}")

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
