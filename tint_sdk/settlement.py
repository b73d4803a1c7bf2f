"""
Settlement of a residual amount against a single pool.

``SettlementExecutor.execute`` runs, in order and each waiting for
confirmation before the next:

1. convert the human amount to smallest units using the input token's decimals
2. approve the router for the maximum allowance, only if the current allowance is short
3. swap exact-input through the router
4. measure the output as the balance delta of the executing account
5. forward the output to the recipient, if one was given

Progress is tracked on a :class:`Settlement` so a failure reports exactly
what already happened on-chain. Nothing is retried.
"""
import logging
import time
from enum import Enum
from typing import List, Optional, Tuple

from web3.exceptions import Web3Exception

from .chain import Chain
from .exceptions import (
    AuthorizationError, ConfigurationError, ConversionError, TintError,
    TradeError, TransactionError, TransferError, revert_reason
)
from .models import SwapParams, SwapReceipt, TxReceipt, Venue
from .units import parse_units

logger = logging.getLogger(__name__)

MAX_UINT256 = 2 ** 256 - 1

# TickMath.MIN_SQRT_PRICE + 1 and TickMath.MAX_SQRT_PRICE - 1
MIN_SQRT_PRICE_LIMIT = 4295128740
MAX_SQRT_PRICE_LIMIT = 1461446703485210103287273052203988822378723970341


class SettlementPhase(str, Enum):
    PENDING = "pending"
    APPROVING = "approving"
    APPROVED = "approved"
    SUBMITTED = "submitted"
    CONFIRMED = "confirmed"
    REVERTED = "reverted"
    FORWARDING = "forwarding"
    FORWARDED = "forwarded"
    FORWARD_FAILED = "forward_failed"


_TRANSITIONS = {
    SettlementPhase.PENDING: {SettlementPhase.APPROVING, SettlementPhase.SUBMITTED, SettlementPhase.REVERTED},
    SettlementPhase.APPROVING: {SettlementPhase.APPROVED, SettlementPhase.REVERTED},
    SettlementPhase.APPROVED: {SettlementPhase.SUBMITTED, SettlementPhase.REVERTED},
    SettlementPhase.SUBMITTED: {SettlementPhase.CONFIRMED, SettlementPhase.REVERTED},
    SettlementPhase.CONFIRMED: {SettlementPhase.FORWARDING},
    SettlementPhase.FORWARDING: {SettlementPhase.FORWARDED, SettlementPhase.FORWARD_FAILED},
}


class Settlement:
    """
    Progress of one ``execute`` call.

    Attributes:
        phase: Current phase
        history: (phase, unix time) pairs in the order they were entered
        approval_tx_hash, swap_tx_hash, transfer_tx_hash: Submitted transactions
        swap_receipt: Set once the swap is confirmed
    """

    def __init__(self):
        self.phase = SettlementPhase.PENDING
        self.history: List[Tuple[SettlementPhase, float]] = [(self.phase, time.time())]
        self.approval_tx_hash: Optional[str] = None
        self.swap_tx_hash: Optional[str] = None
        self.transfer_tx_hash: Optional[str] = None
        self.swap_receipt: Optional[SwapReceipt] = None

    def advance(self, phase: SettlementPhase) -> None:
        if phase not in _TRANSITIONS.get(self.phase, set()):
            raise TintError(f"Invalid settlement transition {self.phase.value} -> {phase.value}")
        self.phase = phase
        self.history.append((phase, time.time()))

    @property
    def swap_confirmed(self) -> bool:
        return self.swap_receipt is not None

    def __repr__(self) -> str:
        return f"Settlement(phase={self.phase.value})"


def swap_params_for(venue: Venue, token_in: str, amount_in: int) -> SwapParams:
    """
    Exact-input swap parameters with the widest valid price limit.

    The price limit never stops the swap; slippage protection is left to the
    caller's own quote.
    """
    zero_for_one = token_in.lower() == venue.key.currency0.lower()
    return SwapParams(
        zero_for_one=zero_for_one,
        amount_specified=-amount_in,
        sqrt_price_limit_x96=MIN_SQRT_PRICE_LIMIT if zero_for_one else MAX_SQRT_PRICE_LIMIT,
    )


class SettlementExecutor:
    """Executes residual swaps for one authorized account through one router."""

    def __init__(self, chain: Chain, router_address: str):
        self.chain = chain
        self.router = chain.swap_router(router_address)
        self.last_settlement: Optional[Settlement] = None

    def _wait(self, tx_hash: str, error_cls, action: str, settlement: Settlement, **extra) -> TxReceipt:
        try:
            receipt = self.chain.wait_for_receipt(tx_hash)
        except (TransactionError, Web3Exception) as e:
            raise error_cls(
                f"{action} {tx_hash} was not confirmed: {e}",
                tx_hash=tx_hash, reason=revert_reason(e), settlement=settlement, **extra
            ) from e
        if not receipt.succeeded:
            raise error_cls(
                f"{action} {tx_hash} reverted in block {receipt.block_number}",
                tx_hash=tx_hash, receipt=receipt, settlement=settlement, **extra
            )
        return receipt

    def execute(
        self,
        venue: Venue,
        token_in: str,
        token_out: str,
        amount_in: str,
        recipient: Optional[str] = None,
    ) -> SwapReceipt:
        """
        Swap ``amount_in`` of ``token_in`` for ``token_out`` in ``venue``.

        Args:
            venue: Pool to trade in, as returned by pool discovery
            token_in: Address of the token sold
            token_out: Address of the token bought
            amount_in: Human-readable decimal amount of token_in
            recipient: Optional final recipient of the output

        Returns:
            SwapReceipt whose amount_out is the measured balance delta

        Raises:
            ConfigurationError: If the tokens are not the venue's pair
            ConversionError: If amount_in is malformed or zero
            AuthorizationError: If the approval fails
            TradeError: If the swap fails
            TransferError: If forwarding fails after a confirmed swap;
                ``swap_receipt`` holds the swap's result
        """
        pair = {venue.key.currency0.lower(), venue.key.currency1.lower()}
        if {token_in.lower(), token_out.lower()} != pair or token_in.lower() == token_out.lower():
            raise ConfigurationError(
                f"Tokens {token_in} -> {token_out} do not match pool "
                f"{venue.key.currency0}/{venue.key.currency1}"
            )

        settlement = Settlement()
        self.last_settlement = settlement
        account = self.chain.address
        token_in_contract = self.chain.token(token_in)
        token_out_contract = self.chain.token(token_out)

        # 1. Parse amount
        decimals = token_in_contract.decimals()
        amount = parse_units(amount_in, decimals)
        if amount == 0:
            raise ConversionError("Swap amount must be greater than zero")

        # 2. Approve router if needed
        allowance = token_in_contract.allowance(account, self.router.address)
        logger.debug(f"Allowance of {token_in} for {self.router.address}: {allowance}")
        if allowance < amount:
            settlement.advance(SettlementPhase.APPROVING)
            logger.info(f"Approving {self.router.address} to spend {token_in}")
            try:
                settlement.approval_tx_hash = token_in_contract.approve(self.router.address, MAX_UINT256)
            except (TransactionError, Web3Exception) as e:
                settlement.advance(SettlementPhase.REVERTED)
                raise AuthorizationError(
                    f"Approval failed: {e}", reason=revert_reason(e), settlement=settlement
                ) from e
            try:
                self._wait(settlement.approval_tx_hash, AuthorizationError, "Approval", settlement)
            except AuthorizationError:
                settlement.advance(SettlementPhase.REVERTED)
                raise
            settlement.advance(SettlementPhase.APPROVED)

        # 3. Swap params
        params = swap_params_for(venue, token_in, amount)

        # 4. Swap and measure
        balance_before = token_out_contract.balance_of(account)
        logger.info(f"Executing swap of {amount} {token_in} in pool {venue.pool_id}")
        try:
            settlement.swap_tx_hash = self.router.swap(venue.key, params)
        except (TransactionError, Web3Exception) as e:
            settlement.advance(SettlementPhase.REVERTED)
            raise TradeError(f"Swap failed: {e}", reason=revert_reason(e), settlement=settlement) from e
        settlement.advance(SettlementPhase.SUBMITTED)

        try:
            receipt = self._wait(settlement.swap_tx_hash, TradeError, "Swap", settlement)
        except TradeError:
            settlement.advance(SettlementPhase.REVERTED)
            raise
        settlement.advance(SettlementPhase.CONFIRMED)

        try:
            balance_after = token_out_contract.balance_of(account)
        except Exception as e:
            logger.error(f"Swap {receipt.tx_hash} confirmed but reading the output balance failed: {e}")
            raise TradeError(
                f"Swap {receipt.tx_hash} confirmed in block {receipt.block_number} "
                f"but the output balance could not be read: {e}",
                tx_hash=receipt.tx_hash, receipt=receipt, settlement=settlement,
            ) from e
        amount_out = balance_after - balance_before
        logger.info(f"Swap confirmed in block {receipt.block_number}, received {amount_out}")

        swap_receipt = SwapReceipt(
            tx_hash=receipt.tx_hash,
            block_number=receipt.block_number,
            amount_in=amount,
            amount_out=amount_out,
            token_in=token_in,
            token_out=token_out,
            pool_id=venue.pool_id,
            approval_tx_hash=settlement.approval_tx_hash,
        )
        settlement.swap_receipt = swap_receipt

        # 5. Forward to recipient
        if recipient and recipient.lower() != account.lower() and amount_out > 0:
            settlement.advance(SettlementPhase.FORWARDING)
            logger.info(f"Transferring {amount_out} {token_out} to {recipient}")
            try:
                settlement.transfer_tx_hash = token_out_contract.transfer(recipient, amount_out)
                self._wait(
                    settlement.transfer_tx_hash, TransferError, "Transfer", settlement,
                    swap_receipt=swap_receipt,
                )
            except TransferError:
                settlement.advance(SettlementPhase.FORWARD_FAILED)
                logger.error(f"Swap {swap_receipt.tx_hash} succeeded but forwarding to {recipient} failed")
                raise
            except (TransactionError, Web3Exception) as e:
                settlement.advance(SettlementPhase.FORWARD_FAILED)
                logger.error(f"Swap {swap_receipt.tx_hash} succeeded but forwarding to {recipient} failed: {e}")
                raise TransferError(
                    f"Swap succeeded but transfer to {recipient} failed: {e}",
                    swap_receipt=swap_receipt, reason=revert_reason(e), settlement=settlement,
                ) from e
            settlement.advance(SettlementPhase.FORWARDED)
            swap_receipt = swap_receipt.model_copy(update={"transfer_tx_hash": settlement.transfer_tx_hash})
            settlement.swap_receipt = swap_receipt

        return swap_receipt
