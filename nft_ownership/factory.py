"""
Service construction from configuration.
"""

import logging
from typing import Optional

from nft_ownership.config import AppConfig, get_settings
from nft_ownership.core.cache_gate import CacheGate
from nft_ownership.core.resolver import OwnershipResolver
from nft_ownership.core.state_machine import OwnershipStateMachine
from nft_ownership.exceptions import ConfigurationError
from nft_ownership.integrations.contract_client import (
    ContractQueryClient,
    MintSubmitter,
    Web3ContractQueryClient,
)
from nft_ownership.integrations.metadata_fetcher import MetadataFetcher
from nft_ownership.service import NFTOwnershipService
from nft_ownership.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def build_contract_client(config: AppConfig) -> Optional[ContractQueryClient]:
    """Create the web3 contract client, or None when the chain is not configured."""
    rpc_url = config.chain.rpc_url
    contract_address = config.chain.nft_contract_address
    if not rpc_url and not contract_address:
        logger.warning("Chain access not configured, ownership checks will report no NFT")
        return None
    if not (rpc_url and contract_address):
        raise ConfigurationError("CHAIN_RPC_URL and CHAIN_NFT_CONTRACT_ADDRESS must both be set")
    return Web3ContractQueryClient.from_rpc(rpc_url, contract_address)


def create_ownership_service(
    config: Optional[AppConfig] = None,
    wallet: Optional[str] = None,
    contract: Optional[ContractQueryClient] = None,
    mint_submitter: Optional[MintSubmitter] = None,
    configure_logging: bool = True,
) -> NFTOwnershipService:
    """
    Assemble an NFTOwnershipService.

    Args:
        config: Application configuration; the global settings when omitted
        wallet: Initial wallet identity
        contract: Contract handle; built from the chain settings when omitted
        mint_submitter: External collaborator that submits mint transactions
        configure_logging: Apply the configured logging setup

    Returns:
        A service in its initial loading state; call start() to resolve
    """
    config = config or get_settings()
    if configure_logging:
        setup_logging(log_level=config.log_level, log_format=config.log_format, log_file=config.log_file)

    if contract is None:
        contract = build_contract_client(config)

    resolver = OwnershipResolver(
        metadata_fetcher=MetadataFetcher(timeout=config.metadata.request_timeout),
        cache_gate=CacheGate(),
    )
    state_machine = OwnershipStateMachine(
        resolver,
        wallet=wallet,
        contract=contract,
        mint_submitter=mint_submitter,
    )
    return NFTOwnershipService(state_machine)
