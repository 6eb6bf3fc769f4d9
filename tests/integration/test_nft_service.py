"""
Integration tests for NFTOwnershipService.

Runs the service surface against a fake contract and a mock metadata
gateway, covering the end-to-end ownership scenarios.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from nft_ownership.core.state_machine import OwnershipPhase
from nft_ownership.exceptions import ContractUnavailableError, MintTransactionError
from tests.test_utils import GATEWAY, FakeContract, GatedContract

COOL_ROUTES = {
    f"{GATEWAY}abc": (200, {
        "name": "Cool #7",
        "attributes": [{"trait_type": "Color", "value": "Blue"}],
    }),
}


@pytest.mark.integration
class TestNFTOwnershipService:
    """End-to-end ownership flows through the public surface."""

    @pytest.mark.asyncio
    async def test_owned_token_with_gateway_metadata(self, make_service):
        contract = FakeContract(token_ids={"0xA": 7}, uris={7: "ipfs://abc"})
        service = make_service(contract, routes=COOL_ROUTES)

        await service.start()

        assert service.has_nft is True
        assert service.is_loading is False
        assert service.phase == OwnershipPhase.SETTLED_OWNED
        nft = service.user_nft.to_dict()
        assert nft["id"] == 7
        assert nft["name"] == "Cool #7"
        assert nft["image"] is None
        assert nft["traits"] == [{"trait_type": "Color", "value": "Blue"}]
        assert nft["owner"] == "0xA"

    @pytest.mark.asyncio
    async def test_unreachable_contract_reports_no_nft(self, make_service):
        contract = FakeContract(token_ids={"0xA": ContractUnavailableError("addressToTokenId")})
        service = make_service(contract)

        state = await service.check_nft_ownership()

        assert (state.has_nft, state.user_nft, state.is_loading) == (False, None, False)

    @pytest.mark.asyncio
    async def test_no_contract_reports_not_ready(self, make_service):
        service = make_service(contract=None)

        await service.start()

        assert service.has_nft is False
        assert service.is_loading is False
        assert service.get_service_status()["contract_available"] is False

    @pytest.mark.asyncio
    async def test_cache_bounds_contract_queries(self, make_service, clock):
        contract = FakeContract(token_ids={"0xA": 7}, uris={7: "ipfs://abc"})
        service = make_service(contract, routes=COOL_ROUTES)

        await service.start()
        clock.advance(10_000)
        await service.check_nft_ownership()
        assert contract.token_id_calls == ["0xA"]

        clock.advance(21_000)
        await service.check_nft_ownership()
        assert contract.token_id_calls == ["0xA", "0xA"]

        await service.check_nft_ownership(force_refresh=True)
        assert contract.token_id_calls == ["0xA", "0xA", "0xA"]

    @pytest.mark.asyncio
    async def test_wallet_switch_inside_ttl_requeries(self, make_service, clock):
        contract = FakeContract(token_ids={"0xA": 7, "0xB": 0}, uris={7: "ipfs://abc"})
        service = make_service(contract, routes=COOL_ROUTES)

        await service.start()
        clock.advance(3_000)
        await service.set_wallet("0xB")

        assert contract.token_id_calls == ["0xA", "0xB"]
        assert service.has_nft is False
        assert service.user_nft is None

    @pytest.mark.asyncio
    async def test_missing_metadata_uses_placeholder(self, make_service):
        contract = FakeContract(token_ids={"0xA": 7})
        service = make_service(contract)

        await service.start()

        assert service.has_nft is True
        assert service.user_nft.image == "/placeholder.svg"
        assert service.user_nft.name == "Origin NFT #7"

    @pytest.mark.asyncio
    async def test_failed_mint_clears_flag_and_propagates(self, make_service):
        contract = FakeContract(token_ids={"0xA": 0})
        boom = RuntimeError("insufficient funds")
        service = make_service(contract, mint_submitter=AsyncMock(side_effect=boom))
        minting_flags = []
        service.subscribe(lambda state: minting_flags.append(state.is_minting))

        with pytest.raises(MintTransactionError) as exc_info:
            await service.mint_nft({"name": "Origin"})

        assert exc_info.value.original_error is boom
        assert exc_info.value.__cause__ is boom
        assert minting_flags[0] is True
        assert minting_flags[-1] is False
        assert service.is_minting is False

    @pytest.mark.asyncio
    async def test_update_nft_refreshes_from_chain(self, make_service):
        contract = FakeContract(token_ids={"0xA": 0}, uris={7: "ipfs://abc"})
        service = make_service(contract, routes=COOL_ROUTES)
        await service.start()

        contract.token_ids["0xA"] = 7
        await service.update_nft({"name": "ignored"})

        assert service.has_nft is True
        assert service.user_nft.name == "Cool #7"

    @pytest.mark.asyncio
    async def test_subscribers_see_settled_state(self, make_service):
        contract = FakeContract(token_ids={"0xA": 7}, uris={7: "ipfs://abc"})
        service = make_service(contract, routes=COOL_ROUTES)
        seen = []
        service.subscribe(seen.append)

        await service.start()
        service.unsubscribe(seen.append)
        await service.check_nft_ownership(force_refresh=True)

        assert seen[-1].has_nft is True
        assert seen[-1].user_nft.name == "Cool #7"
        assert all(not s.has_nft or s.user_nft is None or s.user_nft.owner == "0xA" for s in seen)

    @pytest.mark.asyncio
    async def test_service_status(self, make_service):
        service = make_service(FakeContract(token_ids={"0xA": 0}))
        await service.start()

        status = service.get_service_status()

        assert status["wallet_connected"] is True
        assert status["phase"] == "settled_not_owned"
        assert status["last_checked_at_ms"] is not None

    @pytest.mark.asyncio
    async def test_cached_check_during_forced_check_keeps_forced_result(self, make_service, clock):
        contract = GatedContract(token_ids={"0xA": 0}, uris={7: "ipfs://abc"})
        contract.gates["0xA"].set()
        service = make_service(contract, routes=COOL_ROUTES)
        await service.start()

        contract.token_ids["0xA"] = 7
        contract.gates["0xA"].clear()
        forced = asyncio.create_task(service.check_nft_ownership(force_refresh=True))
        await asyncio.sleep(0)
        clock.advance(1_000)
        await service.check_nft_ownership()
        assert service.is_loading is True

        contract.gates["0xA"].set()
        await forced

        assert contract.token_id_calls == ["0xA", "0xA"]
        assert service.has_nft is True
        assert service.user_nft.name == "Cool #7"
