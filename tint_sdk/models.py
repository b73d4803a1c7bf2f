"""
Data models for the TINT SDK.
"""
from enum import Enum
from typing import Dict, Any, Optional, List, Tuple

from pydantic import BaseModel, Field

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


class Direction(str, Enum):
    """Side of the net residual after netting"""
    SELL = "SELL"
    BUY = "BUY"


class IntentStatus(str, Enum):
    """Lifecycle states of an intent, in order"""
    CREATED = "created"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"
    SUBMITTED = "submitted"
    MATCHED = "matched"
    UNMATCHED = "unmatched"
    SETTLING = "settling"
    SETTLED = "settled"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (IntentStatus.SETTLED, IntentStatus.FAILED)


class TxReceipt(BaseModel):
    """Transaction receipt from the blockchain"""
    tx_hash: str = Field(..., alias="transactionHash")
    block_number: int = Field(..., alias="blockNumber")
    block_hash: str = Field(..., alias="blockHash")
    status: int
    gas_used: int = Field(..., alias="gasUsed")
    from_address: str = Field(..., alias="from")
    to_address: Optional[str] = Field(None, alias="to")
    logs: List[Dict[str, Any]] = Field(default_factory=list)

    class Config:
        populate_by_name = True

    @property
    def succeeded(self) -> bool:
        return self.status == 1


class Commitment(BaseModel):
    """Hash commitment to an amount: digest = keccak256(amount_be32 || blinding)"""
    digest: bytes
    amount: int
    blinding: bytes

    class Config:
        frozen = True

    @property
    def digest_hex(self) -> str:
        return "0x" + self.digest.hex()

    @property
    def blinding_hex(self) -> str:
        return "0x" + self.blinding.hex()


class NetResult(BaseModel):
    """
    Outcome of netting a batch of opposing intents.

    ``efficiency`` is a percentage with two decimals (57.14 means 57.14%);
    ``efficiency_ratio`` is the same figure as a fraction in [0, 1].
    """
    total_sell: int
    total_buy: int
    residual: int
    direction: Direction
    netted_volume: int
    total_volume: int
    efficiency: float

    class Config:
        frozen = True

    @property
    def efficiency_ratio(self) -> float:
        return self.efficiency / 100


class PoolKey(BaseModel):
    """Canonical pool key; currency0 sorts before currency1 case-insensitively"""
    currency0: str
    currency1: str
    fee: int
    tick_spacing: int
    hooks: str = ZERO_ADDRESS

    class Config:
        frozen = True

    def as_tuple(self) -> Tuple[str, str, int, int, str]:
        return (self.currency0, self.currency1, self.fee, self.tick_spacing, self.hooks)


class PoolState(BaseModel):
    """Snapshot of a pool's price and in-range liquidity"""
    sqrt_price_x96: int
    tick: int
    liquidity: int

    @property
    def is_initialized(self) -> bool:
        return self.sqrt_price_x96 > 0


class Venue(BaseModel):
    """A liquidity pool selected for execution"""
    pool_id: str
    key: PoolKey
    state: PoolState

    @property
    def fee(self) -> int:
        return self.key.fee

    @property
    def tick_spacing(self) -> int:
        return self.key.tick_spacing

    @property
    def liquidity(self) -> int:
        return self.state.liquidity


class SwapParams(BaseModel):
    """Swap parameters; a negative amount_specified means exact input"""
    zero_for_one: bool
    amount_specified: int
    sqrt_price_limit_x96: int

    def as_tuple(self) -> Tuple[bool, int, int]:
        return (self.zero_for_one, self.amount_specified, self.sqrt_price_limit_x96)


class SwapReceipt(BaseModel):
    """Result of an executed settlement; amount_out is the measured balance delta"""
    success: bool = True
    tx_hash: str
    block_number: int
    amount_in: int
    amount_out: int
    token_in: str
    token_out: str
    pool_id: str
    approval_tx_hash: Optional[str] = None
    transfer_tx_hash: Optional[str] = None


class RedeemReceipt(BaseModel):
    """Result of a claim redemption"""
    success: bool = True
    tx_hash: str
    block_number: int
    redeemed_amount: int
    redeemed_amount_formatted: str
    token: str


class TimelineEntry(BaseModel):
    """One recorded lifecycle transition"""
    status: IntentStatus
    message: str = ""
    timestamp: int


class Intent(BaseModel):
    """A user's declared swap, tracked through its lifecycle"""
    id: str
    from_token: str
    to_token: str
    amount: int
    network: str
    recipient: Optional[str] = None
    status: IntentStatus = IntentStatus.CREATED
    created_at: int
    timeline: List[TimelineEntry] = Field(default_factory=list)
    commitment: Optional[Commitment] = None
