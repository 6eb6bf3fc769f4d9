"""
Token Metadata Fetcher

Resolves a token's metadata URI through the contract, rewrites ipfs:// URIs
to the HTTP gateway and fetches the JSON document. Any failure along the way
degrades to the placeholder record; fetch_metadata never raises.
"""

import logging
import time
from datetime import date
from typing import Callable, Optional

import httpx
from pydantic import ValidationError

from nft_ownership.core.results import Degraded, Ok, StageResult
from nft_ownership.exceptions import MetadataUnavailableError
from nft_ownership.integrations.contract_client import ContractQueryClient
from nft_ownership.models import MetadataRecord, TokenMetadataDocument, rewrite_ipfs_uri
from nft_ownership.utils.logging_config import performance_logger

logger = logging.getLogger(__name__)


class MetadataFetcher:
    """Fetches displayable metadata for an owned token."""

    def __init__(
        self,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        today: Callable[[], date] = date.today,
    ):
        """
        Initialize the metadata fetcher.

        Args:
            timeout: Timeout in seconds for the gateway request
            transport: Optional httpx transport, used to route requests in tests
            today: Source of the local date stamped on fetched records
        """
        self.timeout = timeout
        self.transport = transport
        self.today = today

    async def fetch_metadata(self, token_id: int, contract: ContractQueryClient, wallet: str) -> MetadataRecord:
        """
        Build the metadata record for a token owned by wallet.

        Args:
            token_id: Token identifier (positive)
            contract: Contract to read the token URI from
            wallet: Owner of the token

        Returns:
            The fetched record, or the placeholder record if anything failed
        """
        uri_result = await self._lookup_token_uri(token_id, contract)
        if isinstance(uri_result, Degraded):
            return self._placeholder(token_id, wallet, uri_result)

        document_result = await self._load_document(token_id, rewrite_ipfs_uri(uri_result.value))
        if isinstance(document_result, Degraded):
            return self._placeholder(token_id, wallet, document_result)

        return MetadataRecord.from_document(
            token_id, wallet, document_result.value, minted_on=self.today()
        )

    async def _lookup_token_uri(self, token_id: int, contract: ContractQueryClient) -> StageResult[str]:
        started = time.perf_counter()
        try:
            token_uri = await contract.token_uri(token_id)
        except Exception as e:
            performance_logger.log_contract_call("tokenURI", _elapsed_ms(started), success=False)
            return Degraded("token URI lookup failed", MetadataUnavailableError(token_id, str(e)))
        performance_logger.log_contract_call("tokenURI", _elapsed_ms(started), success=True)

        if not isinstance(token_uri, str) or not token_uri:
            return Degraded(
                "empty token URI",
                MetadataUnavailableError(token_id, f"contract returned {token_uri!r}"),
            )
        return Ok(token_uri)

    async def _load_document(self, token_id: int, url: str) -> StageResult[TokenMetadataDocument]:
        started = time.perf_counter()
        status_code = None
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url)
                status_code = response.status_code
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            return Degraded(
                f"gateway returned {e.response.status_code}",
                MetadataUnavailableError(token_id, f"HTTP {e.response.status_code} from {url}"),
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return Degraded("gateway request failed", MetadataUnavailableError(token_id, str(e)))
        except ValueError as e:
            return Degraded("metadata is not JSON", MetadataUnavailableError(token_id, str(e)))
        finally:
            performance_logger.log_metadata_fetch(url, _elapsed_ms(started), status_code)

        try:
            return Ok(TokenMetadataDocument.model_validate(data))
        except ValidationError as e:
            return Degraded("metadata is malformed", MetadataUnavailableError(token_id, str(e)))

    def _placeholder(self, token_id: int, wallet: str, degraded: Degraded) -> MetadataRecord:
        logger.info(f"MetadataFetcher: {degraded.reason} for token {token_id}, using basic data ({degraded.error})")
        return MetadataRecord.placeholder(token_id, wallet)


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000
