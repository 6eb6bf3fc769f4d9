"""Tests for metadata record helpers."""

import pytest

from nft_ownership.models import IPFS_GATEWAY_PREFIX, rewrite_ipfs_uri


@pytest.mark.unit
class TestRewriteIpfsUri:

    def test_scheme_prefix_is_rewritten(self):
        assert rewrite_ipfs_uri("ipfs://abc") == f"{IPFS_GATEWAY_PREFIX}abc"

    def test_only_the_leading_scheme_is_rewritten(self):
        assert rewrite_ipfs_uri("ipfs://Qm/ipfs://x") == f"{IPFS_GATEWAY_PREFIX}Qm/ipfs://x"

    @pytest.mark.parametrize("uri", [
        "https://cdn.example.com/?src=ipfs://img.png",
        "ar://tx",
        "/placeholder.svg",
        "",
    ])
    def test_other_uris_pass_through(self, uri):
        assert rewrite_ipfs_uri(uri) == uri
