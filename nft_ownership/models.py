"""
Data records for NFT ownership and display metadata.

Gateway responses are validated into TokenMetadataDocument at the I/O
boundary; everything downstream works with MetadataRecord.
"""

from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

IPFS_SCHEME = "ipfs://"
IPFS_GATEWAY_PREFIX = "https://gateway.pinata.cloud/ipfs/"

PLACEHOLDER_DESCRIPTION = "IOPn Origin NFT"
PLACEHOLDER_IMAGE = "/placeholder.svg"


def default_token_name(token_id: int) -> str:
    return f"Origin NFT #{token_id}"


def rewrite_ipfs_uri(uri: str) -> str:
    """Rewrite a content-addressed ipfs:// URI to the HTTP gateway; other URIs pass through."""
    if uri.startswith(IPFS_SCHEME):
        return IPFS_GATEWAY_PREFIX + uri[len(IPFS_SCHEME):]
    return uri


def display_date(day: date) -> str:
    """Format a date for display, e.g. 10/19/2026."""
    return f"{day.month}/{day.day}/{day.year}"


class Trait(BaseModel):
    """A single metadata attribute, kept in the gateway's own shape."""

    model_config = ConfigDict(extra="allow")

    trait_type: Optional[str] = None
    value: Any = None


class TokenMetadataDocument(BaseModel):
    """JSON body served by the metadata gateway."""

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    attributes: Optional[List[Trait]] = None


class OwnershipRecord(BaseModel):
    """Raw resolver output before metadata is attached."""

    model_config = ConfigDict(frozen=True)

    token_id: int = Field(ge=0)

    @property
    def owned(self) -> bool:
        return self.token_id > 0


class MetadataRecord(BaseModel):
    """Displayable metadata for an owned token."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    description: Optional[str] = None
    image: Optional[str] = None
    traits: List[Trait] = Field(default_factory=list)
    minted_at: Optional[str] = None
    owner: str

    @classmethod
    def placeholder(cls, token_id: int, owner: str) -> "MetadataRecord":
        """Deterministic fallback used when metadata cannot be retrieved."""
        return cls(
            id=token_id,
            name=default_token_name(token_id),
            description=PLACEHOLDER_DESCRIPTION,
            image=PLACEHOLDER_IMAGE,
            traits=[],
            owner=owner,
        )

    @classmethod
    def from_document(
        cls,
        token_id: int,
        owner: str,
        document: TokenMetadataDocument,
        minted_on: Optional[date] = None,
    ) -> "MetadataRecord":
        image = rewrite_ipfs_uri(document.image) if document.image else None
        return cls(
            id=token_id,
            name=document.name or default_token_name(token_id),
            description=document.description,
            image=image,
            traits=list(document.attributes or []),
            minted_at=display_date(minted_on or date.today()),
            owner=owner,
        )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()
