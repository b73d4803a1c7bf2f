"""
Test helpers for the TINT SDK tests.
"""
from .fakes import (
    FakeChain, FakeToken, FakePoolManager, FakeSwapRouter, FakeLiquidityManager,
    ACCOUNT, RECIPIENT, USDC, WETH, POOL_MANAGER, ROUTER, LIQUIDITY_MANAGER
)

__all__ = [
    "FakeChain", "FakeToken", "FakePoolManager", "FakeSwapRouter", "FakeLiquidityManager",
    "ACCOUNT", "RECIPIENT", "USDC", "WETH", "POOL_MANAGER", "ROUTER", "LIQUIDITY_MANAGER",
]
