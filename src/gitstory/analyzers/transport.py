"""Token rotation and response caching for GitHub requests."""

from __future__ import annotations

import os
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

# Environment variables checked for server tokens, in rotation order
TOKEN_ENV_VARS = ("GITHUB_TOKEN", "GITHUB_TOKEN_2", "GITHUB_TOKEN_3", "GITHUB_TOKEN_4")


class TokenPool:
    """Round-robin rotation over a fixed set of API tokens.

    Each GitHub token carries its own rate limit, so spreading requests
    over several tokens raises the effective limit.
    """

    def __init__(self, tokens: list[str] | None = None) -> None:
        self._tokens = [t for t in (tokens or []) if t]
        self._index = 0

    @classmethod
    def from_env(cls) -> TokenPool:
        """Build a pool from GITHUB_TOKEN, GITHUB_TOKEN_2, ... variables."""
        return cls([os.environ.get(name, "") for name in TOKEN_ENV_VARS])

    def __len__(self) -> int:
        return len(self._tokens)

    def next_token(self) -> str | None:
        """Return the next token, or None if the pool is empty."""
        if not self._tokens:
            return None
        token = self._tokens[self._index]
        self._index = (self._index + 1) % len(self._tokens)
        return token


@dataclass
class CacheEntry:
    """A cached response body with its status code."""

    data: Any
    status: int
    stored_at: float


class ResponseCache:
    """Time-bounded cache of API responses keyed by endpoint."""

    DEFAULT_TTL = 5 * 60  # 5 minutes

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def _expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.stored_at >= self.ttl_seconds

    def get(self, key: str) -> CacheEntry | None:
        """Return a live entry, or None on a miss or expiry."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._expired(entry, self._clock()):
            del self._entries[key]
            return None
        return entry

    def set(self, key: str, data: Any, status: int = 200) -> None:
        self._entries[key] = CacheEntry(data=data, status=status, stored_at=self._clock())

    def purge_expired(self) -> int:
        """Drop expired entries. Returns how many were removed."""
        now = self._clock()
        stale = [key for key, entry in self._entries.items() if self._expired(entry, now)]
        for key in stale:
            del self._entries[key]
        return len(stale)
