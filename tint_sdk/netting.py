"""
Netting of opposing intents into a single residual trade.
"""
from typing import Iterable, Sequence

from .models import Direction, Intent, NetResult


def _total(amounts: Iterable[int], side: str) -> int:
    total = 0
    for amount in amounts:
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise ValueError(f"{side} amounts must be integers, got {type(amount).__name__}")
        if amount < 0:
            raise ValueError(f"{side} amounts must be non-negative, got {amount}")
        total += amount
    return total


def compute_net_position(sell_amounts: Sequence[int], buy_amounts: Sequence[int]) -> NetResult:
    """
    Reduce revealed sell and buy amounts to one residual.

    Totals use Python integers, so there is no overflow for on-chain sized
    amounts. A tie nets to zero and reports direction BUY. Efficiency is the
    share of volume cancelled out, as a percentage truncated to two decimals;
    it is 0 for an empty batch.

    Args:
        sell_amounts: Sell amounts in smallest token units
        buy_amounts: Buy amounts in smallest token units

    Returns:
        NetResult for the batch

    Raises:
        ValueError: If any amount is negative or not an integer
    """
    total_sell = _total(sell_amounts, "Sell")
    total_buy = _total(buy_amounts, "Buy")

    residual = abs(total_sell - total_buy)
    direction = Direction.SELL if total_sell > total_buy else Direction.BUY

    total_volume = total_sell + total_buy
    netted_volume = total_volume - residual
    if total_volume > 0:
        efficiency = ((netted_volume * 10000) // total_volume) / 100
    else:
        efficiency = 0.0

    return NetResult(
        total_sell=total_sell,
        total_buy=total_buy,
        residual=residual,
        direction=direction,
        netted_volume=netted_volume,
        total_volume=total_volume,
        efficiency=efficiency,
    )


def net_intents(sell_intents: Sequence[Intent], buy_intents: Sequence[Intent]) -> NetResult:
    """Net two batches of intents by their amounts."""
    return compute_net_position(
        [intent.amount for intent in sell_intents],
        [intent.amount for intent in buy_intents],
    )
