"""
Ownership Resolver

Determines whether a wallet owns a token on the collectible contract and
commits the result, with attached metadata, to the observable state.

Failures never leave the resolver: an unreachable or undeployed contract
reads as "no NFT", missing metadata reads as the placeholder record, and
anything unexpected reads as "no NFT".
"""

import logging
import time
from typing import Optional

from nft_ownership.core.cache_gate import CacheGate
from nft_ownership.core.results import Degraded, Ok, StageResult
from nft_ownership.core.state import CacheState, ObservableState, StoreWriter
from nft_ownership.exceptions import ContractUnavailableError
from nft_ownership.integrations.contract_client import ContractQueryClient
from nft_ownership.integrations.metadata_fetcher import MetadataFetcher
from nft_ownership.models import OwnershipRecord
from nft_ownership.utils.logging_config import performance_logger

logger = logging.getLogger(__name__)


class OwnershipResolver:
    """Orchestrates the contract query, cache gate and metadata fetcher."""

    def __init__(self, metadata_fetcher: MetadataFetcher, cache_gate: Optional[CacheGate] = None):
        self.metadata_fetcher = metadata_fetcher
        self.cache_gate = cache_gate or CacheGate()

    async def resolve(
        self,
        wallet: Optional[str],
        contract: Optional[ContractQueryClient],
        force_refresh: bool,
        writer: StoreWriter,
    ) -> ObservableState:
        """
        Resolve ownership for wallet and commit it through writer.

        Args:
            wallet: Wallet identity to check, or None when not connected
            contract: Contract handle, or None when unavailable
            force_refresh: Bypass the ownership cache
            writer: Commit handle for this resolution

        Returns:
            The observable state after this resolution
        """
        if contract is None or not wallet:
            return writer.commit(has_nft=False, user_nft=None, is_loading=False)

        if self.cache_gate.should_skip(writer.cache, wallet, force_refresh):
            logger.debug(f"OwnershipResolver: cache fresh for {wallet}, skipping contract query", extra={"wallet": wallet})
            return writer.commit(is_loading=False)

        try:
            await self._resolve_uncached(wallet, contract, writer)
        except Exception as e:
            logger.error(
                f"OwnershipResolver: unexpected error checking NFT for {wallet}: {e}",
                exc_info=True,
                extra={"wallet": wallet},
            )
            writer.commit(has_nft=False, user_nft=None)
        finally:
            writer.commit(is_loading=False)
        return writer.state

    def is_cached(
        self,
        wallet: Optional[str],
        contract: Optional[ContractQueryClient],
        force_refresh: bool,
        cache: Optional[CacheState],
    ) -> bool:
        """True when resolve() would answer from the cache without querying the contract."""
        if contract is None or not wallet:
            return False
        return self.cache_gate.should_skip(cache, wallet, force_refresh)

    async def _resolve_uncached(self, wallet: str, contract: ContractQueryClient, writer: StoreWriter) -> None:
        checked_at = self.cache_gate.clock()
        ownership = await self._query_ownership(wallet, contract)

        if isinstance(ownership, Degraded):
            logger.info(
                f"OwnershipResolver: {ownership.reason}, assuming no NFT for {wallet} ({ownership.error})",
                extra={"wallet": wallet},
            )
            writer.commit(has_nft=False, user_nft=None)
            writer.record_check(wallet, checked_at)
            return

        record = ownership.value
        writer.commit(has_nft=record.owned)
        writer.record_check(wallet, checked_at)

        if not record.owned:
            writer.commit(user_nft=None)
            return

        metadata = await self.metadata_fetcher.fetch_metadata(record.token_id, contract, wallet)
        writer.commit(user_nft=metadata)
        logger.info(f"OwnershipResolver: {wallet} owns token {record.token_id}", extra={"wallet": wallet})

    async def _query_ownership(self, wallet: str, contract: ContractQueryClient) -> StageResult[OwnershipRecord]:
        started = time.perf_counter()
        try:
            raw_token_id = await contract.address_to_token_id(wallet)
        except Exception as e:
            performance_logger.log_contract_call("addressToTokenId", _elapsed_ms(started), success=False)
            error = e if isinstance(e, ContractUnavailableError) else ContractUnavailableError("addressToTokenId", e)
            return Degraded("contract call failed", error)
        performance_logger.log_contract_call("addressToTokenId", _elapsed_ms(started), success=True)

        # bool is an int subclass but never a valid token id
        if isinstance(raw_token_id, bool) or not isinstance(raw_token_id, int) or raw_token_id < 0:
            return Degraded(
                "contract returned an invalid token id",
                ContractUnavailableError("addressToTokenId", message=f"unexpected value {raw_token_id!r}"),
            )
        return Ok(OwnershipRecord(token_id=raw_token_id))


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000
