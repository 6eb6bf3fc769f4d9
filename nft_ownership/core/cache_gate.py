"""
Cache gate for ownership resolution.

Decides whether a resolution can be skipped because the wallet was checked
recently. Any wallet change invalidates the cache regardless of age.
"""

import time
from typing import Callable, Optional

from nft_ownership.core.state import CacheState

CACHE_TTL_MS = 30000


def now_ms() -> float:
    return time.time() * 1000


class CacheGate:
    """Time-based skip decision; has no side effects."""

    def __init__(self, clock: Callable[[], float] = now_ms, ttl_ms: float = CACHE_TTL_MS):
        self.clock = clock
        self.ttl_ms = ttl_ms

    def should_skip(self, cache: Optional[CacheState], wallet: str, force_refresh: bool = False) -> bool:
        if force_refresh or cache is None:
            return False
        if cache.for_wallet != wallet:
            return False
        return self.clock() - cache.last_checked_at_ms < self.ttl_ms
