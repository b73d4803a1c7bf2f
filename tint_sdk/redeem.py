"""
Redemption of pool-manager claim balances back into transferable tokens.
"""
import logging
from typing import Optional, Union

from web3.exceptions import Web3Exception

from .chain import Chain
from .exceptions import InsufficientClaimError, RedeemError, TransactionError, revert_reason
from .models import RedeemReceipt
from .units import format_units, parse_units

logger = logging.getLogger(__name__)

REDEEM_ALL = "all"


def claim_token_id(token: str) -> int:
    """ERC-6909 id of a currency's claims: the address as an integer."""
    return int(token, 16)


class ClaimRedeemer:
    """Redeems claims held by the chain account; balances can be read for any owner."""

    def __init__(self, chain: Chain, pool_manager_address: str, liquidity_manager_address: str):
        self.chain = chain
        self.pool_manager = chain.pool_manager(pool_manager_address)
        self.liquidity_manager = chain.liquidity_manager(liquidity_manager_address)

    def claim_balance(self, token: str, owner: Optional[str] = None) -> int:
        return self.pool_manager.balance_of(owner or self.chain.address, claim_token_id(token))

    def redeem(
        self,
        token: str,
        amount: Union[str, None] = REDEEM_ALL,
    ) -> RedeemReceipt:
        """
        Redeem the chain account's claims for ``token``.

        The redeem transaction burns the sender's claims, so the balance
        checked up front is always the sender's own.

        Args:
            token: Token address whose claims are redeemed
            amount: Human-readable amount, or "all" (or None) for the full balance

        Returns:
            RedeemReceipt with the redeemed amount in smallest and human units

        Raises:
            ConversionError: If amount is malformed
            InsufficientClaimError: If the amount is zero or exceeds the balance;
                no transaction is submitted
            RedeemError: If the redeem transaction fails
        """
        decimals = self.chain.token(token).decimals()
        balance = self.claim_balance(token)

        if amount is None or amount == REDEEM_ALL:
            requested = balance
        else:
            requested = parse_units(amount, decimals)

        if requested == 0:
            raise InsufficientClaimError("No claims to redeem", available=balance, requested=0)
        if requested > balance:
            raise InsufficientClaimError(
                f"Insufficient claims. Have: {format_units(balance, decimals)}",
                available=balance,
                requested=requested,
            )

        formatted = format_units(requested, decimals)
        logger.info(f"Redeeming {formatted} claims of {token}")

        try:
            tx_hash = self.liquidity_manager.redeem(token, requested)
        except (TransactionError, Web3Exception) as e:
            logger.error(f"Redeem failed: {e}")
            raise RedeemError(f"Redeem failed: {e}", reason=revert_reason(e)) from e
        logger.info(f"Redeem pending: {tx_hash}")

        try:
            receipt = self.chain.wait_for_receipt(tx_hash)
        except (TransactionError, Web3Exception) as e:
            raise RedeemError(
                f"Redeem {tx_hash} was not confirmed: {e}", tx_hash=tx_hash, reason=revert_reason(e)
            ) from e
        if not receipt.succeeded:
            logger.error(f"Redeem {tx_hash} reverted in block {receipt.block_number}")
            raise RedeemError(
                f"Redeem {tx_hash} reverted in block {receipt.block_number}",
                tx_hash=tx_hash, receipt=receipt,
            )

        logger.info(f"Redeem confirmed in block {receipt.block_number}")
        return RedeemReceipt(
            tx_hash=receipt.tx_hash,
            block_number=receipt.block_number,
            redeemed_amount=requested,
            redeemed_amount_formatted=formatted,
            token=token,
        )
