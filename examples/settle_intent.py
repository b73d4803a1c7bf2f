#!/usr/bin/env python3
"""
Example of settling a swap intent with the TINT SDK.
"""
import logging
import os

from tint_sdk import TintClient, TintError


def main():
    """
    Demonstrate the intent pipeline.

    This example shows how to:
    1. Create a client for a packaged network
    2. Record an intent to sell USDC for WETH
    3. Net it against opposing demand and settle the residual on-chain
    """
    logging.basicConfig(level=logging.INFO)

    # Read configuration from environment
    NETWORK = os.environ.get("TINT_NETWORK", "base")
    AMOUNT = os.environ.get("TINT_AMOUNT", "1.5")
    RECIPIENT = os.environ.get("TINT_RECIPIENT")

    if not os.environ.get("TINT_PRIVATE_KEY"):
        print("ERROR: TINT_PRIVATE_KEY environment variable is required")
        return

    client = TintClient.from_network(NETWORK)

    intent = client.create_intent("USDC", "ETH", AMOUNT, recipient=RECIPIENT)
    print(f"Created intent {intent.id}")

    # Opposing demand for USDC, in its smallest units (6 decimals)
    opposing = [500_000]

    try:
        outcome = client.settle_intent(intent.id, opposing)
    except TintError as e:
        print(f"Settlement failed: {e}")
        return

    print(f"Netting efficiency: {outcome.net.efficiency}%")
    if outcome.receipt:
        print(f"Swap transaction: {outcome.receipt.tx_hash}")
        print(f"Pool fee tier: {outcome.venue.fee}")
        print(f"Received: {outcome.receipt.amount_out}")
    else:
        print("Fully netted, nothing traded on-chain")

    for entry in outcome.intent.timeline:
        print(f"  {entry.status.value:<15} {entry.message}")


if __name__ == "__main__":
    main()
