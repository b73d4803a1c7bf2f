"""
Hash commitments to intent amounts.

A commitment is ``keccak256(amount_be32 || blinding)``. It hides the amount
from counterparties until the owner reveals ``(amount, blinding)``, and the
same digest can be recomputed on-chain with ``keccak256(abi.encodePacked(...))``.

This is a plain hash commitment, not a Pedersen commitment: digests cannot be
added together, so netting works on revealed openings only.
"""
import hmac
import logging
import secrets
from typing import Union

from eth_utils import keccak

from .models import Commitment

logger = logging.getLogger(__name__)

BLINDING_SIZE = 32
AMOUNT_SIZE = 32
MAX_AMOUNT = 2 ** 256 - 1

BytesLike = Union[bytes, bytearray, str]


def _to_bytes(value: BytesLike) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        text = value[2:] if value.startswith(("0x", "0X")) else value
        return bytes.fromhex(text)
    raise TypeError(f"Expected bytes or hex string, got {type(value).__name__}")


def _digest(amount: int, blinding: bytes) -> bytes:
    return keccak(amount.to_bytes(AMOUNT_SIZE, "big") + blinding)


class HashCommitmentScheme:
    """Commit to and verify unsigned 256-bit amounts."""

    def commit(self, amount: int, blinding: BytesLike = None) -> Commitment:
        """
        Commit to an amount.

        Args:
            amount: Amount in smallest token units, 0 <= amount < 2**256
            blinding: Optional 32-byte blinding value (bytes or hex string).
                A fresh random value is drawn when omitted.

        Returns:
            The commitment, including its opening

        Raises:
            ValueError: If the amount is out of range or the blinding is not 32 bytes
        """
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise ValueError(f"Amount must be an integer, got {type(amount).__name__}")
        if amount < 0 or amount > MAX_AMOUNT:
            raise ValueError("Amount must fit in an unsigned 256-bit integer")

        if blinding is None:
            blinding_bytes = secrets.token_bytes(BLINDING_SIZE)
        else:
            try:
                blinding_bytes = _to_bytes(blinding)
            except (TypeError, ValueError) as e:
                raise ValueError(f"Invalid blinding value: {e}")
            if len(blinding_bytes) != BLINDING_SIZE:
                raise ValueError(
                    f"Blinding must be {BLINDING_SIZE} bytes, got {len(blinding_bytes)}"
                )

        return Commitment(
            digest=_digest(amount, blinding_bytes),
            amount=amount,
            blinding=blinding_bytes,
        )

    def verify(self, digest: BytesLike, amount: int, blinding: BytesLike) -> bool:
        """
        Check an opening against a digest. Malformed openings verify False.
        """
        try:
            digest_bytes = _to_bytes(digest)
            blinding_bytes = _to_bytes(blinding)
        except (TypeError, ValueError):
            return False

        if isinstance(amount, bool) or not isinstance(amount, int):
            return False
        if amount < 0 or amount > MAX_AMOUNT:
            return False
        if len(blinding_bytes) != BLINDING_SIZE or len(digest_bytes) != 32:
            return False

        return hmac.compare_digest(_digest(amount, blinding_bytes), digest_bytes)


_default_scheme = HashCommitmentScheme()


def commit(amount: int, blinding: BytesLike = None) -> Commitment:
    """Commit to an amount with the default scheme."""
    return _default_scheme.commit(amount, blinding)


def verify(digest: BytesLike, amount: int, blinding: BytesLike) -> bool:
    """Verify an opening with the default scheme."""
    return _default_scheme.verify(digest, amount, blinding)
