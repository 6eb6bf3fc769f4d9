"""
Custom Exception Classes

This module defines custom exceptions for the NFT ownership service
to provide better error handling and debugging information.

Only MintTransactionError ever crosses the service boundary. The other
errors are raised inside the read path and absorbed there as state.
"""

from typing import Any, Optional


class NFTOwnershipBaseException(Exception):
    """Base exception for the NFT ownership service."""

    pass


class ContractUnavailableError(NFTOwnershipBaseException):
    """Raised when a contract query fails (not deployed, wrong network, revert)."""

    def __init__(
        self,
        method: str,
        original_error: Optional[Exception] = None,
        message: Optional[str] = None,
    ):
        self.method = method
        self.original_error = original_error
        details = f"Contract call '{method}' failed"
        if original_error is not None:
            details = f"{details}: {original_error}"
        if message:
            super().__init__(f"{message} - Details: {details}")
        else:
            super().__init__(details)


class MetadataUnavailableError(NFTOwnershipBaseException):
    """Raised when token metadata cannot be retrieved or parsed."""

    def __init__(self, token_id: int, reason: str):
        self.token_id = token_id
        self.reason = reason
        super().__init__(f"Metadata for token {token_id} unavailable: {reason}")


class MintTransactionError(NFTOwnershipBaseException):
    """Raised when the external mint collaborator fails."""

    def __init__(
        self,
        payload: Any,
        original_error: Exception,
        message: Optional[str] = None,
    ):
        self.payload = payload
        self.original_error = original_error
        details = f"Mint failed with payload {payload}: {original_error}"
        if message:
            super().__init__(f"{message} - Details: {details}")
        else:
            super().__init__(details)


class ConfigurationError(NFTOwnershipBaseException):
    """Raised for configuration problems."""

    pass
