"""
Pool discovery: find the most liquid pool for a token pair across fee tiers.

A pool is identified by ``keccak256(abi.encode(currency0, currency1, fee,
tickSpacing, hooks))`` with the pair in canonical order, so the same pair
yields the same pool ids whichever way round it is given.
"""
import logging
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Sequence, Union

from eth_abi import encode
from eth_utils import keccak
from web3 import Web3

from ._rate_limited_log import rate_limited_log
from .chain import PoolManager
from .exceptions import ConfigurationError
from .models import PoolKey, PoolState, Venue, ZERO_ADDRESS

logger = logging.getLogger(__name__)


class FeeTier(NamedTuple):
    fee: int
    tick_spacing: int


DEFAULT_FEE_TIERS = (
    FeeTier(100, 1),       # 0.01%
    FeeTier(500, 10),      # 0.05%
    FeeTier(3000, 60),     # 0.3%
    FeeTier(10000, 200),   # 1%
)


@dataclass(frozen=True)
class Found:
    """The pool exists, is initialized and has liquidity."""
    venue: Venue


@dataclass(frozen=True)
class NotFound:
    """The pool answered but is absent, uninitialized or empty."""
    pool_id: str
    key: PoolKey
    state: Optional[PoolState] = None


@dataclass(frozen=True)
class QueryError:
    """The pool could not be queried (node error or timeout)."""
    pool_id: str
    key: PoolKey
    error: BaseException


TierQueryResult = Union[Found, NotFound, QueryError]


def sort_currencies(token_a: str, token_b: str):
    """Return the pair as (currency0, currency1), compared case-insensitively."""
    if token_a.lower() < token_b.lower():
        return token_a, token_b
    return token_b, token_a


def compute_pool_key(token_a: str, token_b: str, fee: int, tick_spacing: int) -> PoolKey:
    """
    Build the canonical pool key for a pair and fee tier, with no hooks.

    Raises:
        ConfigurationError: If both tokens are the same
        ValueError: If either token is not a valid address
    """
    if token_a.lower() == token_b.lower():
        raise ConfigurationError(f"Pool needs two different tokens, got {token_a} twice")
    currency0, currency1 = sort_currencies(token_a, token_b)
    return PoolKey(
        currency0=Web3.to_checksum_address(currency0),
        currency1=Web3.to_checksum_address(currency1),
        fee=fee,
        tick_spacing=tick_spacing,
        hooks=ZERO_ADDRESS,
    )


def compute_pool_id(key: PoolKey) -> str:
    """Pool id as 0x-prefixed hex."""
    encoded = encode(
        ["address", "address", "uint24", "int24", "address"],
        list(key.as_tuple()),
    )
    return "0x" + keccak(encoded).hex()


class VenueSelector:
    """
    Queries every candidate fee tier of a pair and picks the pool with the
    most liquidity.

    Queries run concurrently, by default one worker per tier, under a shared deadline.
    A tier whose query fails or times out counts as having no liquidity.
    """

    def __init__(
        self,
        pool_manager: PoolManager,
        query_timeout: float = 10.0,
        max_workers: Optional[int] = None,
    ):
        self.pool_manager = pool_manager
        self.query_timeout = query_timeout
        self.max_workers = max_workers

    def query_tier(self, key: PoolKey) -> TierQueryResult:
        """Read one pool's state. Never raises."""
        pool_id = compute_pool_id(key)
        try:
            sqrt_price_x96, tick = self.pool_manager.get_slot0(pool_id)
            liquidity = self.pool_manager.get_liquidity(pool_id)
        except Exception as e:
            rate_limited_log(
                f"Pool query failed for {key.currency0}/{key.currency1} fee {key.fee}: {e}",
                level="warning",
                logger_instance=logger,
            )
            return QueryError(pool_id=pool_id, key=key, error=e)

        state = PoolState(sqrt_price_x96=sqrt_price_x96, tick=tick, liquidity=liquidity)
        if state.is_initialized and liquidity > 0:
            logger.debug(f"Found pool {pool_id}: fee {key.fee}, liquidity {liquidity}")
            return Found(Venue(pool_id=pool_id, key=key, state=state))
        return NotFound(pool_id=pool_id, key=key, state=state)

    def discover(
        self,
        token_a: str,
        token_b: str,
        tiers: Sequence[FeeTier] = DEFAULT_FEE_TIERS,
    ) -> List[TierQueryResult]:
        """
        Query every tier of the pair.

        Returns:
            One result per tier, in the order the tiers were given
        """
        keys = [compute_pool_key(token_a, token_b, tier[0], tier[1]) for tier in tiers]
        if not keys:
            return []

        workers = min(len(keys), self.max_workers) if self.max_workers else len(keys)
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="pool-discovery")
        try:
            futures = [executor.submit(self.query_tier, key) for key in keys]
            wait(futures, timeout=self.query_timeout)

            results: List[TierQueryResult] = []
            for key, future in zip(keys, futures):
                if future.done():
                    results.append(future.result())
                else:
                    future.cancel()
                    rate_limited_log(
                        f"Pool query timed out for {key.currency0}/{key.currency1} fee {key.fee}",
                        level="warning",
                        logger_instance=logger,
                    )
                    results.append(QueryError(
                        pool_id=compute_pool_id(key),
                        key=key,
                        error=TimeoutError(f"No response within {self.query_timeout}s"),
                    ))
            return results
        finally:
            # Do not block on queries that are still hanging
            executor.shutdown(wait=False)

    def find_best_pool(
        self,
        token_a: str,
        token_b: str,
        tiers: Sequence[FeeTier] = DEFAULT_FEE_TIERS,
    ) -> Optional[Venue]:
        """
        Select the pool with the strictly greatest liquidity.

        Ties go to the earliest tier in ``tiers`` (the lowest fee with the
        default tiers). An empty market returns None.
        """
        best: Optional[Venue] = None
        for result in self.discover(token_a, token_b, tiers):
            if isinstance(result, Found):
                if best is None or result.venue.liquidity > best.liquidity:
                    best = result.venue

        currency0, currency1 = sort_currencies(token_a, token_b)
        if best is None:
            logger.info(f"No pools found for {currency0}/{currency1}")
            return None

        logger.info(
            f"Best pool for {currency0}/{currency1}: fee {best.fee}, liquidity {best.liquidity}"
        )
        return best


def find_best_pool(
    pool_manager: PoolManager,
    token_a: str,
    token_b: str,
    tiers: Sequence[FeeTier] = DEFAULT_FEE_TIERS,
    query_timeout: float = 10.0,
) -> Optional[Venue]:
    """Find the most liquid pool for a pair with a one-off selector."""
    return VenueSelector(pool_manager, query_timeout=query_timeout).find_best_pool(
        token_a, token_b, tiers
    )
