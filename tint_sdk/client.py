"""
TintClient - intent commitment and settlement pipeline.
"""
import logging
import os
from dataclasses import dataclass
from typing import Dict, Optional, Protocol, Sequence

from web3 import Web3

from .chain import Chain, ChainClient, Signer
from .commitment import HashCommitmentScheme
from .config import NetworkConfig
from .exceptions import ConfigurationError, ConversionError, IntentStateError, NoVenueError
from .intents import IntentStore, InMemoryIntentStore, create_intent
from .models import (
    Commitment, Direction, Intent, IntentStatus, NetResult, RedeemReceipt, SwapReceipt, Venue
)
from .netting import compute_net_position
from .pool_discovery import DEFAULT_FEE_TIERS, FeeTier, VenueSelector
from .redeem import ClaimRedeemer, REDEEM_ALL
from .settlement import SettlementExecutor
from .units import format_units, parse_units

logger = logging.getLogger(__name__)


class SessionConnector(Protocol):
    """Connection to the off-chain session network that authorizes an intent."""

    def connect(self, intent: Intent) -> None: ...

    def authenticate(self, intent: Intent) -> str: ...


class LocalSession:
    """Session connector for settling directly, without an off-chain session network."""

    def connect(self, intent: Intent) -> None:
        return None

    def authenticate(self, intent: Intent) -> str:
        return f"local-{intent.id}"


@dataclass
class SettlementOutcome:
    """What happened to an intent in ``settle_intent``."""
    intent: Intent
    net: NetResult
    venue: Optional[Venue] = None
    receipt: Optional[SwapReceipt] = None


class TintClient:
    """
    Client for committing, netting and settling swap intents.

    This client handles:
    1. Intent intake and lifecycle tracking
    2. Hash commitments to intent amounts
    3. Netting an intent against opposing flow
    4. Executing the residual in the most liquid pool
    5. Redeeming pool-manager claims
    """

    def __init__(
        self,
        chain: Chain,
        pool_manager_address: str,
        router_address: str,
        liquidity_manager_address: Optional[str] = None,
        network: str = "custom",
        tokens: Optional[Dict[str, str]] = None,
        store: Optional[IntentStore] = None,
        session: Optional[SessionConnector] = None,
        fee_tiers: Sequence[FeeTier] = DEFAULT_FEE_TIERS,
        query_timeout: float = 10.0,
    ):
        """
        Initialize the TintClient

        Args:
            chain: On-chain collaborator for the executing account
            pool_manager_address: Pool manager holding pool state and claims
            router_address: Swap router used for settlement
            liquidity_manager_address: Contract used to redeem claims (optional)
            network: Network name recorded on intents
            tokens: Symbol to address table used by resolve_token
            store: Intent store (defaults to an in-memory store)
            session: Session connector (defaults to LocalSession)
            fee_tiers: Fee tiers searched during pool discovery
            query_timeout: Deadline in seconds for pool discovery queries
        """
        self.chain = chain
        self.network = network
        self.tokens = {symbol.upper(): address for symbol, address in (tokens or {}).items()}
        self.store = store if store is not None else InMemoryIntentStore()
        self.session = session or LocalSession()
        self.fee_tiers = tuple(fee_tiers)
        self.commitments = HashCommitmentScheme()
        self.selector = VenueSelector(chain.pool_manager(pool_manager_address), query_timeout=query_timeout)
        self.executor = SettlementExecutor(chain, router_address)
        self.redeemer: Optional[ClaimRedeemer] = None
        if liquidity_manager_address:
            self.redeemer = ClaimRedeemer(chain, pool_manager_address, liquidity_manager_address)

    @classmethod
    def from_network(
        cls,
        network: str,
        priv_key: Optional[str] = None,
        signer: Optional[Signer] = None,
        rpc_url: Optional[str] = None,
        liquidity_manager_address: Optional[str] = None,
        **kwargs
    ) -> "TintClient":
        """
        Create a client from the packaged network table.

        The private key falls back to the TINT_PRIVATE_KEY environment variable.

        Raises:
            ConfigurationError: If the network is unknown or the key is missing
        """
        config = NetworkConfig.get_network(network)
        priv_key = priv_key or os.environ.get("TINT_PRIVATE_KEY")
        if not priv_key and not signer:
            raise ConfigurationError("Server misconfigured: missing wallet private key")

        chain = ChainClient(
            rpc_url=NetworkConfig.get_rpc_url(network, override=rpc_url),
            priv_key=priv_key,
            signer=signer,
        )
        return cls(
            chain=chain,
            pool_manager_address=NetworkConfig.get_pool_manager_address(network),
            router_address=NetworkConfig.get_router_address(network),
            liquidity_manager_address=liquidity_manager_address or config.get("liquidityManager"),
            network=network,
            tokens=NetworkConfig.get_tokens(network),
            **kwargs
        )

    def resolve_token(self, token: str) -> str:
        """
        Resolve a token symbol or address to a checksummed address.

        Raises:
            ConfigurationError: If the token is neither a known symbol nor an address
        """
        address = self.tokens.get(token.upper())
        if address:
            return Web3.to_checksum_address(address)
        if Web3.is_address(token):
            return Web3.to_checksum_address(token)
        raise ConfigurationError(f"Token not supported on {self.network}: {token}")

    # Intent lifecycle

    def create_intent(
        self,
        from_token: str,
        to_token: str,
        amount: str,
        recipient: Optional[str] = None,
    ) -> Intent:
        """
        Record a new intent; ``amount`` is in human units of ``from_token``.

        Raises:
            ConfigurationError: If a token is unsupported
            ConversionError: If the amount is malformed or zero
        """
        token_in = self.resolve_token(from_token)
        token_out = self.resolve_token(to_token)
        if token_in == token_out:
            raise ConfigurationError(f"Token not supported: {from_token} -> {to_token}")

        amount_units = parse_units(amount, self.chain.token(token_in).decimals())
        if amount_units == 0:
            raise ConversionError("Intent amount must be greater than zero")
        intent = create_intent(token_in, token_out, amount_units, self.network, recipient)
        self.store.put(intent)
        logger.info(f"Created intent {intent.id}: {amount} {from_token} -> {to_token}")
        return intent

    def get_intent(self, intent_id: str) -> Intent:
        return self.store.get(intent_id)

    def _fail(self, intent_id: str, error: Exception) -> None:
        intent = self.store.get(intent_id)
        if not intent.status.is_terminal:
            self.store.update_status(intent_id, IntentStatus.FAILED, str(error))

    def authenticate(self, intent_id: str) -> Intent:
        """Drive an intent from ``created`` to ``authenticated`` through the session."""
        intent = self.store.get(intent_id)
        try:
            self.store.update_status(intent_id, IntentStatus.CONNECTING, "Connecting to session network")
            self.session.connect(intent)
            self.store.update_status(intent_id, IntentStatus.CONNECTED, "Connected")
            self.store.update_status(intent_id, IntentStatus.AUTHENTICATING, "Authenticating")
            session_id = self.session.authenticate(intent)
            return self.store.update_status(
                intent_id, IntentStatus.AUTHENTICATED, f"Authenticated, session {session_id[:8]}"
            )
        except IntentStateError:
            raise
        except Exception as e:
            logger.error(f"[{intent_id}] Session setup failed: {e}")
            self._fail(intent_id, e)
            raise

    def commit_intent(self, intent_id: str, blinding: Optional[bytes] = None) -> Commitment:
        """Commit to the intent's amount and keep the opening on the intent."""
        intent = self.store.get(intent_id)
        commitment = self.commitments.commit(intent.amount, blinding)
        intent.commitment = commitment
        self.store.put(intent)
        logger.debug(f"[{intent_id}] Commitment {commitment.digest_hex}")
        return commitment

    def settle_intent(self, intent_id: str, opposing_amounts: Sequence[int] = ()) -> SettlementOutcome:
        """
        Net the intent against opposing flow and execute its residual on-chain.

        ``opposing_amounts`` are counterparties' demand for the intent's
        ``from_token``, in its smallest units. When they cover the whole
        intent, nothing is traded on-chain for it.

        Raises:
            NoVenueError: If a residual remains but no liquid pool exists
            TintError: Any settlement failure; the intent is marked failed
        """
        intent = self.store.get(intent_id)
        if intent.status is IntentStatus.CREATED:
            self.authenticate(intent_id)

        try:
            if intent.commitment is None:
                self.commit_intent(intent_id)
                intent = self.store.get(intent_id)
            self.store.update_status(
                intent_id, IntentStatus.SUBMITTED, f"Commitment {intent.commitment.digest_hex} submitted"
            )

            net = compute_net_position([intent.amount], list(opposing_amounts))
            matched = IntentStatus.MATCHED if net.netted_volume > 0 else IntentStatus.UNMATCHED
            self.store.update_status(
                intent_id, matched, f"Netted {net.efficiency}%, residual {net.residual}"
            )
            self.store.update_status(intent_id, IntentStatus.SETTLING, "Settling residual")

            covered = net.direction is not Direction.SELL or net.residual == 0
            if covered and net.netted_volume > 0:
                self.store.update_status(intent_id, IntentStatus.SETTLED, "Fully netted off-chain")
                return SettlementOutcome(intent=self.store.get(intent_id), net=net)

            venue = self.selector.find_best_pool(intent.from_token, intent.to_token, self.fee_tiers)
            if venue is None:
                raise NoVenueError(f"No liquid pool for {intent.from_token}/{intent.to_token}")

            decimals = self.chain.token(intent.from_token).decimals()
            receipt = self.executor.execute(
                venue,
                intent.from_token,
                intent.to_token,
                format_units(net.residual, decimals),
                recipient=intent.recipient,
            )
            self.store.update_status(intent_id, IntentStatus.SETTLED, f"Settled in {receipt.tx_hash}")
            return SettlementOutcome(intent=self.store.get(intent_id), net=net, venue=venue, receipt=receipt)
        except IntentStateError:
            raise
        except Exception as e:
            logger.error(f"[{intent_id}] Settlement failed: {e}")
            self._fail(intent_id, e)
            raise

    # Direct operations

    def find_best_pool(self, token_a: str, token_b: str) -> Optional[Venue]:
        return self.selector.find_best_pool(
            self.resolve_token(token_a), self.resolve_token(token_b), self.fee_tiers
        )

    def swap(
        self,
        from_token: str,
        to_token: str,
        amount: str,
        recipient: Optional[str] = None,
        venue: Optional[Venue] = None,
    ) -> SwapReceipt:
        """
        Swap ``amount`` (human units) without netting.

        Raises:
            NoVenueError: If no venue is given and none is liquid
        """
        token_in = self.resolve_token(from_token)
        token_out = self.resolve_token(to_token)
        if venue is None:
            venue = self.selector.find_best_pool(token_in, token_out, self.fee_tiers)
            if venue is None:
                raise NoVenueError(f"No liquid pool for {from_token}/{to_token}")
        return self.executor.execute(venue, token_in, token_out, amount, recipient=recipient)

    def redeem(self, token: str, amount: Optional[str] = REDEEM_ALL) -> RedeemReceipt:
        """
        Redeem claims for ``token``.

        Raises:
            ConfigurationError: If no liquidity manager is configured
        """
        if self.redeemer is None:
            raise ConfigurationError(f"No liquidity manager configured for {self.network}")
        return self.redeemer.redeem(self.resolve_token(token), amount)

    def claim_balance(self, token: str) -> str:
        """Claim balance of the chain account in human units."""
        if self.redeemer is None:
            raise ConfigurationError(f"No liquidity manager configured for {self.network}")
        address = self.resolve_token(token)
        return format_units(self.redeemer.claim_balance(address), self.chain.token(address).decimals())
