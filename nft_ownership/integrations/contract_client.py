"""
Contract Query Client

The ownership engine reads two functions from the collectible contract:
addressToTokenId(address) and tokenURI(uint256). ContractQueryClient is the
interface it relies on; Web3ContractQueryClient is an adapter over a
web3.py async contract.
"""

import logging
from typing import Any, List, Optional, Protocol, runtime_checkable

from web3 import AsyncHTTPProvider, AsyncWeb3

from nft_ownership.exceptions import ContractUnavailableError

logger = logging.getLogger(__name__)

# Read-only fragment of the Origin NFT ABI used for ownership checks
ORIGIN_NFT_READ_ABI: List[dict] = [
    {
        "inputs": [{"internalType": "address", "name": "", "type": "address"}],
        "name": "addressToTokenId",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [{"internalType": "uint256", "name": "tokenId", "type": "uint256"}],
        "name": "tokenURI",
        "outputs": [{"internalType": "string", "name": "", "type": "string"}],
        "stateMutability": "view",
        "type": "function",
    },
]


@runtime_checkable
class ContractQueryClient(Protocol):
    """Read surface of the collectible contract."""

    async def address_to_token_id(self, wallet: str) -> int:
        ...

    async def token_uri(self, token_id: int) -> str:
        ...


@runtime_checkable
class MintSubmitter(Protocol):
    """External collaborator that submits the mint transaction."""

    async def __call__(self, payload: Any) -> Any:
        ...


class Web3ContractQueryClient:
    """ContractQueryClient backed by a web3.py AsyncContract."""

    def __init__(self, contract: Any):
        self.contract = contract

    @classmethod
    def from_rpc(
        cls,
        rpc_url: str,
        contract_address: str,
        abi: Optional[List[dict]] = None,
    ) -> "Web3ContractQueryClient":
        web3 = AsyncWeb3(AsyncHTTPProvider(rpc_url))
        contract = web3.eth.contract(
            address=AsyncWeb3.to_checksum_address(contract_address),
            abi=abi or ORIGIN_NFT_READ_ABI,
        )
        logger.info(f"Web3ContractQueryClient: using contract {contract_address} via {rpc_url}")
        return cls(contract)

    async def address_to_token_id(self, wallet: str) -> int:
        try:
            checksum_wallet = AsyncWeb3.to_checksum_address(wallet)
            return await self.contract.functions.addressToTokenId(checksum_wallet).call()
        except Exception as e:
            raise ContractUnavailableError("addressToTokenId", e) from e

    async def token_uri(self, token_id: int) -> str:
        try:
            return await self.contract.functions.tokenURI(token_id).call()
        except Exception as e:
            raise ContractUnavailableError("tokenURI", e) from e
