"""
Tests for the NetworkConfig module.
"""
import pytest
import os
from unittest.mock import patch

from tint_sdk.config import NetworkConfig
from tint_sdk.exceptions import ConfigurationError

# Sample network configuration
MOCK_NETWORKS = {
    "test-network": {
        "chainId": 123,
        "rpc": "https://test.example.com",
        "router": "0x1234567890123456789012345678901234567890",
        "poolManager": "0x0987654321098765432109876543210987654321",
        "tokens": {
            "USDC": "0x1111111111111111111111111111111111111111",
            "WETH": "0x2222222222222222222222222222222222222222",
        },
    }
}


class TestNetworkConfig:
    """Test NetworkConfig class."""

    def test_load_networks_cached(self):
        """Networks are cached after the first load."""
        NetworkConfig._networks_cache = MOCK_NETWORKS

        with patch("importlib.resources.files") as mock_files:
            result = NetworkConfig.load_networks()
            mock_files.assert_not_called()

        assert result == MOCK_NETWORKS

    def test_packaged_networks(self):
        """The packaged table carries the three supported testnets."""
        networks = NetworkConfig.load_networks()

        assert {"base", "arbitrum", "ethereum"} <= set(networks)
        assert NetworkConfig.get_chain_id("base") == 84532
        assert NetworkConfig.get_chain_id("arbitrum") == 421614
        assert NetworkConfig.get_chain_id("ethereum") == 11155111
        for name in ("base", "arbitrum", "ethereum"):
            assert NetworkConfig.get_router_address(name).startswith("0x")
            assert NetworkConfig.get_pool_manager_address(name).startswith("0x")
            assert set(NetworkConfig.get_tokens(name)) >= {"USDC", "WETH"}

    def test_get_network(self):
        NetworkConfig._networks_cache = MOCK_NETWORKS

        result = NetworkConfig.get_network("test-network")

        assert result == MOCK_NETWORKS["test-network"]
        assert result["chainId"] == 123

    def test_get_network_not_found(self):
        """Unknown networks name the available ones."""
        NetworkConfig._networks_cache = MOCK_NETWORKS

        with pytest.raises(ConfigurationError) as exc_info:
            NetworkConfig.get_network("non-existent-network")

        assert "test-network" in str(exc_info.value)

    def test_get_rpc_url_default(self):
        NetworkConfig._networks_cache = MOCK_NETWORKS
        assert NetworkConfig.get_rpc_url("test-network") == "https://test.example.com"

    def test_get_rpc_url_override(self):
        NetworkConfig._networks_cache = MOCK_NETWORKS
        result = NetworkConfig.get_rpc_url("test-network", override="https://override.example.com")
        assert result == "https://override.example.com"

    def test_get_rpc_url_env_var(self):
        """The environment variable beats the table but not an explicit override."""
        NetworkConfig._networks_cache = MOCK_NETWORKS

        with patch.dict(os.environ, {"TEST_NETWORK_RPC_URL": "https://env.example.com"}):
            assert NetworkConfig.get_rpc_url("test-network") == "https://env.example.com"
            assert NetworkConfig.get_rpc_url("test-network", override="https://o.example.com") == "https://o.example.com"

    def test_get_addresses(self):
        NetworkConfig._networks_cache = MOCK_NETWORKS

        assert NetworkConfig.get_chain_id("test-network") == 123
        assert NetworkConfig.get_router_address("test-network") == "0x1234567890123456789012345678901234567890"
        assert NetworkConfig.get_pool_manager_address("test-network") == "0x0987654321098765432109876543210987654321"

    def test_missing_liquidity_manager(self):
        NetworkConfig._networks_cache = MOCK_NETWORKS

        with pytest.raises(ConfigurationError, match="liquidity manager"):
            NetworkConfig.get_liquidity_manager_address("test-network")

    def test_token_lookup_is_case_insensitive(self):
        NetworkConfig._networks_cache = MOCK_NETWORKS

        assert NetworkConfig.get_token_address("test-network", "usdc") == "0x1111111111111111111111111111111111111111"
        assert NetworkConfig.get_token_address("test-network", "WETH") == "0x2222222222222222222222222222222222222222"

    def test_eth_aliases_weth(self):
        NetworkConfig._networks_cache = MOCK_NETWORKS

        assert NetworkConfig.get_token_address("test-network", "eth") == "0x2222222222222222222222222222222222222222"
        assert "ETH" not in MOCK_NETWORKS["test-network"]["tokens"]

    def test_unsupported_token(self):
        NetworkConfig._networks_cache = MOCK_NETWORKS

        with pytest.raises(ConfigurationError, match="DAI"):
            NetworkConfig.get_token_address("test-network", "DAI")
