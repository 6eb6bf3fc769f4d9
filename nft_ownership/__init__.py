"""
NFT Ownership - on-chain collectible ownership resolution with caching.

This package answers whether a wallet owns a token on a collectible
contract and what its displayable metadata is:
- Time-bounded ownership cache keyed by wallet
- Graceful degradation for unreachable contracts and metadata
- Observable state for UI layers (ownership, metadata, loading, minting)
"""

__version__ = "0.1.0"
__author__ = "NFT Ownership Team"
