"""
Ownership State Machine

Drives the observable ownership state for one session:

    IDLE -> LOADING -> SETTLED_OWNED | SETTLED_NOT_OWNED

with an orthogonal minting flag. Refreshes are triggered by start(), by a
wallet or contract change, by explicit refresh/update calls and after every
mint attempt. Overlapping refreshes are not de-duplicated; of those that
query the contract, the latest one started is the one whose result is kept.
A refresh answered from the cache changes nothing.
"""

import logging
from enum import Enum
from typing import Any, Optional

from nft_ownership.core.resolver import OwnershipResolver
from nft_ownership.core.state import ObservableState, OwnershipStore
from nft_ownership.exceptions import MintTransactionError
from nft_ownership.integrations.contract_client import ContractQueryClient, MintSubmitter

logger = logging.getLogger(__name__)


class OwnershipPhase(Enum):
    IDLE = "idle"
    LOADING = "loading"
    SETTLED_OWNED = "settled_owned"
    SETTLED_NOT_OWNED = "settled_not_owned"


class OwnershipStateMachine:
    """Holds the session's wallet and contract and applies state transitions."""

    def __init__(
        self,
        resolver: OwnershipResolver,
        store: Optional[OwnershipStore] = None,
        wallet: Optional[str] = None,
        contract: Optional[ContractQueryClient] = None,
        mint_submitter: Optional[MintSubmitter] = None,
    ):
        self.resolver = resolver
        self.store = store or OwnershipStore()
        self.wallet = wallet
        self.contract = contract
        self.mint_submitter = mint_submitter
        self._settled_once = False

    @property
    def state(self) -> ObservableState:
        return self.store.state

    @property
    def phase(self) -> OwnershipPhase:
        state = self.store.state
        if state.is_loading:
            return OwnershipPhase.LOADING
        if not self._settled_once:
            return OwnershipPhase.IDLE
        if state.has_nft:
            return OwnershipPhase.SETTLED_OWNED
        return OwnershipPhase.SETTLED_NOT_OWNED

    async def start(self) -> ObservableState:
        """Run the initial resolution."""
        return await self.refresh()

    async def set_wallet(self, wallet: Optional[str]) -> ObservableState:
        if wallet == self.wallet:
            return self.store.state
        logger.info(f"OwnershipStateMachine: wallet changed to {wallet}")
        self.wallet = wallet
        return await self.refresh()

    async def set_contract(self, contract: Optional[ContractQueryClient]) -> ObservableState:
        if contract is self.contract:
            return self.store.state
        logger.info("OwnershipStateMachine: contract handle changed")
        self.contract = contract
        return await self.refresh()

    async def refresh(self, force_refresh: bool = False) -> ObservableState:
        """
        Re-resolve ownership. Never raises.

        A refresh answered from the cache leaves the state untouched and does
        not supersede a resolution already in flight.
        """
        if self.resolver.is_cached(self.wallet, self.contract, force_refresh, self.store.cache):
            logger.debug(f"OwnershipStateMachine: cache fresh for {self.wallet}, nothing to refresh")
            return self.store.state

        writer = self.store.begin_resolution()
        writer.commit(is_loading=True)
        state = await self.resolver.resolve(self.wallet, self.contract, force_refresh, writer)
        if writer.is_current:
            self._settled_once = True
        return state

    async def mint(self, payload: Any) -> Any:
        """
        Submit a mint through the external collaborator and refresh afterwards.

        The minting flag is always cleared, and ownership is force-refreshed
        whether or not the submission succeeded.

        Raises:
            MintTransactionError: if the submission failed. The submitter's
                own exception is available as ``original_error`` and as
                ``__cause__``; a MintTransactionError raised by the
                submitter propagates unchanged.
        """
        self.store.commit(is_minting=True)
        try:
            try:
                result = None
                if self.mint_submitter is not None:
                    result = await self.mint_submitter(payload)
            finally:
                await self.refresh(force_refresh=True)
            return result
        except MintTransactionError:
            logger.error(f"OwnershipStateMachine: failed to mint NFT for {self.wallet}")
            raise
        except Exception as e:
            logger.error(f"OwnershipStateMachine: failed to mint NFT for {self.wallet}: {e}")
            raise MintTransactionError(payload, e) from e
        finally:
            self.store.commit(is_minting=False)

    async def update(self, payload: Any = None) -> ObservableState:
        """Refresh from the chain; the payload is not stored."""
        return await self.refresh(force_refresh=True)
