"""
Observable Ownership State

Holds the state a UI layer watches (ownership flag, metadata record,
loading and minting flags) together with the ownership cache, and notifies
subscribers after every change.

Writes from a resolution go through a StoreWriter. Starting a new
resolution supersedes older writers, and commits from a superseded writer
are dropped so a slow earlier call cannot overwrite a newer result.
"""

import logging
from dataclasses import dataclass, replace
from typing import Callable, List, Optional

from nft_ownership.models import MetadataRecord

logger = logging.getLogger(__name__)

_UNSET = object()


@dataclass(frozen=True)
class ObservableState:
    """Snapshot of the state exposed to UI collaborators."""
    has_nft: bool = False
    user_nft: Optional[MetadataRecord] = None
    is_loading: bool = True
    is_minting: bool = False


@dataclass(frozen=True)
class CacheState:
    """When ownership was last checked, and for which wallet."""
    last_checked_at_ms: float
    for_wallet: str


StateCallback = Callable[[ObservableState], None]


class OwnershipStore:
    """
    State holder with subscribers.

    Subscribers receive the new snapshot synchronously after each commit.
    A failing subscriber is logged and does not affect the commit or the
    other subscribers.
    """

    def __init__(self, initial: Optional[ObservableState] = None):
        self._state = initial or ObservableState()
        self._cache: Optional[CacheState] = None
        self._generation = 0
        self._subscribers: List[StateCallback] = []

    @property
    def state(self) -> ObservableState:
        return self._state

    @property
    def cache(self) -> Optional[CacheState]:
        return self._cache

    @property
    def generation(self) -> int:
        return self._generation

    def subscribe(self, callback: StateCallback) -> None:
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: StateCallback) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def commit(self, has_nft=_UNSET, user_nft=_UNSET, is_loading=_UNSET, is_minting=_UNSET) -> ObservableState:
        """Apply the given field changes and notify subscribers."""
        changes = {}
        if has_nft is not _UNSET:
            changes["has_nft"] = has_nft
        if user_nft is not _UNSET:
            changes["user_nft"] = user_nft
        if is_loading is not _UNSET:
            changes["is_loading"] = is_loading
        if is_minting is not _UNSET:
            changes["is_minting"] = is_minting

        new_state = replace(self._state, **changes)
        if not new_state.has_nft and new_state.user_nft is not None:
            new_state = replace(new_state, user_nft=None)

        if new_state == self._state:
            return self._state

        self._state = new_state
        self._notify(new_state)
        return new_state

    def record_check(self, wallet: str, checked_at_ms: float) -> None:
        self._cache = CacheState(last_checked_at_ms=checked_at_ms, for_wallet=wallet)

    def begin_resolution(self) -> "StoreWriter":
        """Start a resolution, superseding any resolution still in flight."""
        self._generation += 1
        return StoreWriter(self, self._generation)

    def _notify(self, state: ObservableState) -> None:
        for callback in list(self._subscribers):
            try:
                callback(state)
            except Exception as e:
                logger.error(f"OwnershipStore: subscriber {getattr(callback, '__name__', callback)} failed: {e}")


class StoreWriter:
    """Commit handle for one resolution."""

    def __init__(self, store: OwnershipStore, generation: int):
        self._store = store
        self.generation = generation

    @property
    def is_current(self) -> bool:
        return self._store.generation == self.generation

    @property
    def state(self) -> ObservableState:
        return self._store.state

    @property
    def cache(self) -> Optional[CacheState]:
        return self._store.cache

    def commit(self, **changes) -> ObservableState:
        if not self.is_current:
            logger.debug(
                f"OwnershipStore: dropping commit from superseded resolution "
                f"{self.generation} (current {self._store.generation})"
            )
            return self._store.state
        return self._store.commit(**changes)

    def record_check(self, wallet: str, checked_at_ms: float) -> None:
        if self.is_current:
            self._store.record_check(wallet, checked_at_ms)
