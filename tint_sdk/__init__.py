"""
TINT SDK - commit to swap intents, net them, and settle the residual on-chain.
"""
from .version import __version__
from .client import TintClient, LocalSession, SessionConnector, SettlementOutcome
from .chain import ChainClient
from .commitment import HashCommitmentScheme, commit, verify
from .netting import compute_net_position, net_intents
from .pool_discovery import (
    DEFAULT_FEE_TIERS, FeeTier, Found, NotFound, QueryError, VenueSelector,
    compute_pool_id, compute_pool_key, find_best_pool
)
from .settlement import Settlement, SettlementExecutor, SettlementPhase
from .redeem import ClaimRedeemer
from .intents import InMemoryIntentStore, IntentStore
from .config import NetworkConfig
from .models import (
    Commitment, Direction, Intent, IntentStatus, NetResult, PoolKey, PoolState,
    RedeemReceipt, SwapReceipt, TxReceipt, Venue
)
from .exceptions import (
    TintError, ConfigurationError, ConversionError, NoVenueError, InsufficientClaimError,
    TransactionError, AuthorizationError, TradeError, TransferError, RedeemError,
    IntentStateError, IntentNotFoundError
)

__all__ = [
    "__version__",
    "TintClient",
    "LocalSession",
    "SessionConnector",
    "SettlementOutcome",
    "ChainClient",
    "HashCommitmentScheme",
    "commit",
    "verify",
    "compute_net_position",
    "net_intents",
    "DEFAULT_FEE_TIERS",
    "FeeTier",
    "Found",
    "NotFound",
    "QueryError",
    "VenueSelector",
    "compute_pool_id",
    "compute_pool_key",
    "find_best_pool",
    "Settlement",
    "SettlementExecutor",
    "SettlementPhase",
    "ClaimRedeemer",
    "InMemoryIntentStore",
    "IntentStore",
    "NetworkConfig",
    "Commitment",
    "Direction",
    "Intent",
    "IntentStatus",
    "NetResult",
    "PoolKey",
    "PoolState",
    "RedeemReceipt",
    "SwapReceipt",
    "TxReceipt",
    "Venue",
    "TintError",
    "ConfigurationError",
    "ConversionError",
    "NoVenueError",
    "InsufficientClaimError",
    "TransactionError",
    "AuthorizationError",
    "TradeError",
    "TransferError",
    "RedeemError",
    "IntentStateError",
    "IntentNotFoundError",
]
