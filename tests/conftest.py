"""
Global test configuration and fixtures.
"""

from typing import Any, Dict, Optional, Tuple

import pytest

from nft_ownership.core.cache_gate import CacheGate
from nft_ownership.core.resolver import OwnershipResolver
from nft_ownership.core.state import OwnershipStore
from nft_ownership.core.state_machine import OwnershipStateMachine
from nft_ownership.integrations.metadata_fetcher import MetadataFetcher
from nft_ownership.service import NFTOwnershipService
from tests.test_utils import FIXED_TODAY, FakeClock, FakeContract, gateway_transport


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> OwnershipStore:
    return OwnershipStore()


@pytest.fixture
def make_fetcher():
    def _make(routes: Optional[Dict[str, Tuple[int, Any]]] = None) -> MetadataFetcher:
        return MetadataFetcher(
            timeout=1.0,
            transport=gateway_transport(routes or {}),
            today=lambda: FIXED_TODAY,
        )
    return _make


@pytest.fixture
def make_resolver(clock, make_fetcher):
    def _make(routes: Optional[Dict[str, Tuple[int, Any]]] = None) -> OwnershipResolver:
        return OwnershipResolver(make_fetcher(routes), cache_gate=CacheGate(clock=clock))
    return _make


@pytest.fixture
def make_service(make_resolver):
    """Build an NFTOwnershipService around a fake contract and mock gateway."""
    def _make(
        contract: Optional[FakeContract] = None,
        wallet: Optional[str] = "0xA",
        routes: Optional[Dict[str, Tuple[int, Any]]] = None,
        mint_submitter=None,
    ) -> NFTOwnershipService:
        machine = OwnershipStateMachine(
            make_resolver(routes),
            wallet=wallet,
            contract=contract,
            mint_submitter=mint_submitter,
        )
        return NFTOwnershipService(machine)
    return _make


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests - fast, isolated tests"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests - test component interactions"
    )
