"""
Static per-network configuration for the TINT SDK.

Networks are read from the packaged ``networks.json``. RPC endpoints can be
overridden per network with ``<NETWORK>_RPC_URL`` environment variables.
"""
import importlib.resources
import json
import logging
import os
from typing import Dict, Any, Optional

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Symbols that resolve to another symbol's address
TOKEN_ALIASES = {"ETH": "WETH"}


class NetworkConfig:
    """Access to the packaged network table."""

    _networks_cache: Optional[Dict[str, Dict[str, Any]]] = None

    @classmethod
    def load_networks(cls) -> Dict[str, Dict[str, Any]]:
        """
        Load network definitions, caching them after the first read.

        Returns:
            Mapping of network name to its configuration
        """
        if cls._networks_cache is not None:
            return cls._networks_cache

        resource = importlib.resources.files("tint_sdk").joinpath("networks.json")
        with resource.open("r", encoding="utf-8") as f:
            cls._networks_cache = json.load(f)
        logger.debug(f"Loaded {len(cls._networks_cache)} network definitions")
        return cls._networks_cache

    @classmethod
    def get_network(cls, network: str) -> Dict[str, Any]:
        """
        Get the configuration for a network.

        Raises:
            ConfigurationError: If the network is unknown
        """
        networks = cls.load_networks()
        if network not in networks:
            available = ", ".join(sorted(networks))
            raise ConfigurationError(
                f"Config not found for network '{network}'. Available networks: {available}"
            )
        return networks[network]

    @classmethod
    def get_rpc_url(cls, network: str, override: Optional[str] = None) -> str:
        """
        Resolve the RPC URL: explicit override, then environment, then the table.
        """
        if override:
            return override

        env_var = f"{network.upper().replace('-', '_')}_RPC_URL"
        env_url = os.environ.get(env_var)
        if env_url:
            logger.debug(f"Using RPC URL from {env_var}")
            return env_url

        return cls.get_network(network)["rpc"]

    @classmethod
    def get_chain_id(cls, network: str) -> int:
        return int(cls.get_network(network)["chainId"])

    @classmethod
    def _get_address(cls, network: str, key: str, label: str) -> str:
        address = cls.get_network(network).get(key)
        if not address:
            raise ConfigurationError(f"No {label} address configured for network '{network}'")
        return address

    @classmethod
    def get_router_address(cls, network: str) -> str:
        return cls._get_address(network, "router", "swap router")

    @classmethod
    def get_pool_manager_address(cls, network: str) -> str:
        return cls._get_address(network, "poolManager", "pool manager")

    @classmethod
    def get_liquidity_manager_address(cls, network: str) -> str:
        return cls._get_address(network, "liquidityManager", "liquidity manager")

    @classmethod
    def get_tokens(cls, network: str) -> Dict[str, str]:
        """Token symbol table for a network, including aliases."""
        tokens = dict(cls.get_network(network).get("tokens", {}))
        for alias, target in TOKEN_ALIASES.items():
            if target in tokens and alias not in tokens:
                tokens[alias] = tokens[target]
        return tokens

    @classmethod
    def get_token_address(cls, network: str, symbol: str) -> str:
        """
        Look up a token address by symbol (case-insensitive).

        Raises:
            ConfigurationError: If the token is not supported on the network
        """
        tokens = cls.get_tokens(network)
        address = tokens.get(symbol.upper())
        if not address:
            raise ConfigurationError(f"Token not supported on {network}: {symbol}")
        return address
