"""
Pytest fixtures for the TINT SDK tests.
"""
import pytest
from web3.providers.rpc import HTTPProvider

from tint_sdk._rate_limited_log import reset_rate_limits
from tint_sdk.config import NetworkConfig
from tint_sdk.pool_discovery import compute_pool_key, compute_pool_id
from tests.test_helpers import FakeChain, USDC, WETH, POOL_MANAGER

# Constants for testing
TEST_RPC_URL = "https://rpc.example.com"
TEST_PRIV_KEY = "0x0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"

# sqrt(price) * 2**96 for a price of 1
SQRT_PRICE_1 = 2 ** 96


@pytest.fixture(autouse=True)
def _patch_http_provider(monkeypatch):
    """
    Stub every Web3 HTTP call so no DNS / network traffic is triggered.
    """
    def _dummy(self, method, params=None, _=None):
        if method in {"eth_chainId"}:
            return {"jsonrpc": "2.0", "id": 1, "result": "0x14a34"}     # base sepolia
        if method in {"eth_gasPrice"}:
            return {"jsonrpc": "2.0", "id": 1, "result": "0x3b9aca00"}  # 1 gwei
        return {"jsonrpc": "2.0", "id": 1, "result": "0x0"}

    monkeypatch.setattr(HTTPProvider, "make_request", _dummy, raising=True)


@pytest.fixture(autouse=True)
def _reset_shared_state():
    """Clear module-level caches between tests."""
    reset_rate_limits()
    NetworkConfig._networks_cache = None
    yield
    reset_rate_limits()
    NetworkConfig._networks_cache = None


@pytest.fixture
def chain():
    """Fake chain with USDC (6 decimals) and WETH (18 decimals)."""
    fake = FakeChain()
    fake.add_token(USDC, decimals=6)
    fake.add_token(WETH, decimals=18)
    return fake


@pytest.fixture
def pool_manager(chain):
    return chain.pool_manager(POOL_MANAGER)


@pytest.fixture
def liquid_pool(pool_manager):
    """USDC/WETH pool in the 0.3% tier with liquidity, returned as its key."""
    key = compute_pool_key(USDC, WETH, 3000, 60)
    pool_manager.add_pool(compute_pool_id(key), SQRT_PRICE_1, 0, 10 ** 18)
    return key
