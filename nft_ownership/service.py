"""
NFT Ownership Service

The surface UI collaborators use: observable fields, the three operations
(check, mint, update), change subscriptions, and the session triggers for
wallet and contract changes.
"""

import logging
from typing import Any, Dict, Optional

from nft_ownership.core.state import ObservableState, StateCallback
from nft_ownership.core.state_machine import OwnershipPhase, OwnershipStateMachine
from nft_ownership.integrations.contract_client import ContractQueryClient
from nft_ownership.models import MetadataRecord

logger = logging.getLogger(__name__)


class NFTOwnershipService:
    """Service object for one wallet session."""

    def __init__(self, state_machine: OwnershipStateMachine):
        self.state_machine = state_machine

    # === OBSERVABLE STATE ===

    @property
    def state(self) -> ObservableState:
        return self.state_machine.state

    @property
    def phase(self) -> OwnershipPhase:
        return self.state_machine.phase

    @property
    def user_nft(self) -> Optional[MetadataRecord]:
        return self.state.user_nft

    @property
    def has_nft(self) -> bool:
        return self.state.has_nft

    @property
    def is_minting(self) -> bool:
        return self.state.is_minting

    @property
    def is_loading(self) -> bool:
        return self.state.is_loading

    def subscribe(self, callback: StateCallback) -> None:
        self.state_machine.store.subscribe(callback)

    def unsubscribe(self, callback: StateCallback) -> None:
        self.state_machine.store.unsubscribe(callback)

    # === OPERATIONS ===

    async def check_nft_ownership(self, force_refresh: bool = False) -> ObservableState:
        """Check ownership on chain; degrades internally and never raises."""
        return await self.state_machine.refresh(force_refresh=force_refresh)

    async def mint_nft(self, data: Any) -> Any:
        """
        Mint through the external collaborator and refresh ownership.

        Raises:
            MintTransactionError: on any submission failure. The
                collaborator's exception is kept as ``original_error`` and
                chained as ``__cause__``, so callers can still inspect it.
        """
        return await self.state_machine.mint(data)

    async def update_nft(self, updates: Any) -> ObservableState:
        """Refresh from the chain; the chain is the only source of metadata."""
        return await self.state_machine.update(updates)

    # === SESSION TRIGGERS ===

    async def start(self) -> ObservableState:
        return await self.state_machine.start()

    async def set_wallet(self, wallet: Optional[str]) -> ObservableState:
        return await self.state_machine.set_wallet(wallet)

    async def set_contract(self, contract: Optional[ContractQueryClient]) -> ObservableState:
        return await self.state_machine.set_contract(contract)

    def get_service_status(self) -> Dict[str, Any]:
        """Get the current status of the service."""
        cache = self.state_machine.store.cache
        return {
            "wallet_connected": bool(self.state_machine.wallet),
            "contract_available": self.state_machine.contract is not None,
            "phase": self.phase.value,
            "has_nft": self.has_nft,
            "is_minting": self.is_minting,
            "last_checked_at_ms": cache.last_checked_at_ms if cache else None,
            "service_name": "NFTOwnershipService",
        }
