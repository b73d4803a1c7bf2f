"""
Exceptions for the TINT SDK.
"""
from typing import Any, Optional


class TintError(Exception):
    """Base exception for all TINT SDK errors."""
    pass


class ConfigurationError(TintError):
    """Raised for an unknown network, unsupported token or missing contract address."""
    pass


class ConversionError(TintError, ValueError):
    """Raised when an amount string cannot be converted to smallest token units."""
    pass


class NoVenueError(TintError):
    """Raised when an intent cannot settle because no liquid pool was found."""
    pass


class InsufficientClaimError(TintError):
    """Raised before any transaction when a claim redemption cannot be covered."""

    def __init__(self, message: str, available: int = 0, requested: int = 0):
        self.available = available
        self.requested = requested
        super().__init__(message)


class TransactionError(TintError):
    """
    Raised when an on-chain transaction fails to submit or reverts.

    Attributes:
        tx_hash: Hash of the failed transaction, if it was submitted
        receipt: Receipt of the reverted transaction, if one was mined
        reason: Revert reason reported by the node, if available
        settlement: Settlement progress at the time of failure, if any
    """

    def __init__(
        self,
        message: str,
        tx_hash: Optional[str] = None,
        receipt: Optional[Any] = None,
        reason: Optional[str] = None,
        settlement: Optional[Any] = None,
    ):
        self.tx_hash = tx_hash
        self.receipt = receipt
        self.reason = reason
        self.settlement = settlement
        super().__init__(message)


class AuthorizationError(TransactionError):
    """Raised when the spending approval transaction fails."""
    pass


class TradeError(TransactionError):
    """Raised when the swap transaction fails."""
    pass


class TransferError(TransactionError):
    """
    Raised when forwarding swap output to the recipient fails.

    The swap itself is already final on-chain; its receipt is attached as
    ``swap_receipt``.
    """

    def __init__(self, message: str, swap_receipt: Optional[Any] = None, **kwargs):
        self.swap_receipt = swap_receipt
        super().__init__(message, **kwargs)


class RedeemError(TransactionError):
    """Raised when the claim redemption transaction fails."""
    pass


class IntentStateError(TintError):
    """Raised on an invalid intent lifecycle transition."""
    pass


class IntentNotFoundError(TintError, KeyError):
    """Raised when an intent id is not present in the store."""
    pass


def revert_reason(error: Exception) -> Optional[str]:
    """Node-reported reason for a failed call, for TransactionError or a raw web3 error."""
    if isinstance(error, TransactionError):
        return error.reason
    return str(error)
