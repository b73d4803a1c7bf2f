"""
On-chain collaborators for the TINT SDK.

The settlement pipeline talks to the chain only through the narrow
interfaces defined here. State-changing calls return a transaction hash
once submitted; confirmation is a separate, explicit ``wait_for_receipt``.
``ChainClient`` implements them over web3.py.
"""
import logging
import urllib.parse
from typing import Any, Dict, Optional, Protocol, Tuple

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
from hexbytes import HexBytes
from web3 import Web3
from web3.exceptions import ContractLogicError, TimeExhausted, Web3Exception
from web3.types import TxReceipt as Web3TxReceipt
from eth_account import Account
from eth_account.signers.base import BaseAccount

from .abi import ERC20_ABI, POOL_MANAGER_ABI, SWAP_ROUTER_ABI, LIQUIDITY_MANAGER_ABI
from .exceptions import TransactionError
from .models import PoolKey, SwapParams, TxReceipt


class Signer(Protocol):
    """Protocol for custom signers"""
    address: str

    def sign_transaction(self, transaction_dict: Dict[str, Any]) -> Any:
        """Sign transaction and return signed tx object"""
        ...


class Erc20Token(Protocol):
    address: str

    def decimals(self) -> int: ...

    def balance_of(self, account: str) -> int: ...

    def allowance(self, owner: str, spender: str) -> int: ...

    def approve(self, spender: str, amount: int) -> str: ...

    def transfer(self, to: str, amount: int) -> str: ...


class PoolManager(Protocol):
    address: str

    def get_slot0(self, pool_id: str) -> Tuple[int, int]: ...

    def get_liquidity(self, pool_id: str) -> int: ...

    def balance_of(self, owner: str, token_id: int) -> int: ...


class SwapRouter(Protocol):
    address: str

    def swap(
        self,
        key: PoolKey,
        params: SwapParams,
        take_claims: bool = False,
        settle_using_burn: bool = False,
        hook_data: bytes = b"",
    ) -> str: ...


class LiquidityManager(Protocol):
    address: str

    def redeem(self, currency: str, amount: int) -> str: ...


class Chain(Protocol):
    """Everything the pipeline needs from one authorized account on one chain."""

    @property
    def address(self) -> str: ...

    def token(self, address: str) -> Erc20Token: ...

    def pool_manager(self, address: str) -> PoolManager: ...

    def swap_router(self, address: str) -> SwapRouter: ...

    def liquidity_manager(self, address: str) -> LiquidityManager: ...

    def wait_for_receipt(self, tx_hash: str) -> TxReceipt: ...


def _plain(value: Any) -> Any:
    """Convert web3 receipt values (HexBytes, AttributeDict) to JSON-friendly types."""
    if isinstance(value, bytes):
        return "0x" + bytes(value).hex()
    if isinstance(value, dict) or hasattr(value, "items"):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


class ChainClient:
    """
    web3.py implementation of :class:`Chain`.

    To use this client, you'll need:
    - An Ethereum RPC endpoint
    - Either a private key or a custom signer
    """

    DEFAULT_GAS = 500000
    RECEIPT_TIMEOUT = 120

    def __init__(
        self,
        rpc_url: str,
        priv_key: Optional[str] = None,
        signer: Optional[Signer] = None,
        retry_count: int = 3,
        timeout: int = 30,
        poll_interval: float = 0.1,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the ChainClient

        Args:
            rpc_url: Ethereum RPC endpoint URL (e.g., "https://sepolia.base.org")
            priv_key: Ethereum private key (optional if signer provided)
            signer: Custom signer object (optional if priv_key provided)
            retry_count: Number of transport retries for RPC requests
            timeout: Timeout for RPC requests in seconds
            poll_interval: How often to poll for receipts, in seconds
            logger: Optional logger instance to use for debug/info logging

        Raises:
            ValueError: If neither priv_key nor signer is provided
            ValueError: If the URL doesn't use https (unless it's localhost/127.0.0.1)
        """
        if not priv_key and not signer:
            raise ValueError("Either priv_key or signer must be provided")

        parsed = urllib.parse.urlparse(rpc_url)
        host = parsed.netloc.split(':')[0]
        is_local = host in ('localhost', '127.0.0.1')
        if parsed.scheme != 'https' and not is_local:
            raise ValueError(f"rpc_url must use https:// for security (got: {parsed.scheme}://)")

        self.rpc_url = rpc_url
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.logger = logger or logging.getLogger(__name__)

        # HTTP session with transport-level retries for the RPC provider
        self.session = requests.Session()
        retries = Retry(
            total=retry_count,
            backoff_factor=0.5,
            status_forcelist=[500, 502, 503, 504],
            allowed_methods=["POST"],
            raise_on_status=False,
            connect=retry_count,
            read=retry_count,
            other=retry_count
        )
        self.session.mount("http://", HTTPAdapter(max_retries=retries))
        self.session.mount("https://", HTTPAdapter(max_retries=retries))

        self.w3 = Web3(Web3.HTTPProvider(
            rpc_url,
            request_kwargs={"timeout": timeout},
            session=self.session,
        ))

        self.account: Optional[BaseAccount] = None
        self.signer = signer
        if priv_key:
            self.account = Account.from_key(priv_key)

    @property
    def address(self) -> str:
        """
        Get the account address

        Raises:
            ValueError: If no account or signer is available
        """
        if self.account:
            return self.account.address
        elif self.signer:
            return self.signer.address
        else:
            raise ValueError("No account or signer available")

    def contract(self, address: str, abi: list):
        return self.w3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)

    def token(self, address: str) -> "Web3Erc20Token":
        return Web3Erc20Token(self, address)

    def pool_manager(self, address: str) -> "Web3PoolManager":
        return Web3PoolManager(self, address)

    def swap_router(self, address: str) -> "Web3SwapRouter":
        return Web3SwapRouter(self, address)

    def liquidity_manager(self, address: str) -> "Web3LiquidityManager":
        return Web3LiquidityManager(self, address)

    def send_transaction(
        self,
        call: Any,
        gas: Optional[int] = None,
        value: int = 0,
        gas_price_override: Optional[int] = None,
    ) -> str:
        """
        Build, sign and submit a contract function call.

        Args:
            call: Bound contract function, e.g. ``contract.functions.approve(a, b)``
            gas: Gas limit to use (if None, estimated with a 10% buffer)
            value: Wei to attach
            gas_price_override: Gas price to use (if None, current network price)

        Returns:
            Transaction hash as 0x-prefixed hex

        Raises:
            TransactionError: If the call would revert, or signing or sending fails
            Web3Exception: If there's an error with Web3 operations
        """
        from_address = self.address
        nonce = self.w3.eth.get_transaction_count(from_address)

        if gas is None:
            try:
                gas = call.estimate_gas({'from': from_address, 'value': value})
                gas = int(gas * 1.1)
                self.logger.debug(f"Estimated gas: {gas}")
            except ContractLogicError as e:
                # The call reverts; nothing has been submitted
                self.logger.error(f"Transaction would revert: {e}")
                raise TransactionError(f"Transaction would revert: {e}", reason=str(e))
            except Exception as e:
                gas = self.DEFAULT_GAS
                self.logger.warning(f"Gas estimation failed, using default: {gas}. Error: {e}")

        tx_params = {
            'from': from_address,
            'nonce': nonce,
            'gas': gas,
            'value': value,
        }
        if gas_price_override is not None:
            tx_params['gasPrice'] = gas_price_override
        else:
            tx_params['gasPrice'] = self.w3.eth.gas_price

        tx = call.build_transaction(tx_params)

        try:
            if self.account:
                signed_tx = self.account.sign_transaction(tx)
            else:
                signed_tx = self.signer.sign_transaction(tx)
        except Exception as e:
            self.logger.error(f"Transaction signing failed: {e}")
            raise TransactionError(f"Failed to sign transaction: {str(e)}")

        try:
            tx_hash = self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)
        except Web3Exception as e:
            self.logger.error(f"Web3 error: {e}")
            raise
        except Exception as e:
            self.logger.error(f"Failed to send transaction: {e}")
            raise TransactionError(f"Failed to send transaction: {str(e)}")

        tx_hash_hex = Web3.to_hex(tx_hash)
        self.logger.info(f"Transaction sent: {tx_hash_hex}")
        return tx_hash_hex

    def wait_for_receipt(self, tx_hash: str) -> TxReceipt:
        """
        Block until the transaction is mined.

        Returns the receipt whether the transaction succeeded or reverted;
        callers check ``receipt.status``.

        Raises:
            TransactionError: If the receipt does not arrive within the timeout
        """
        try:
            receipt = self.w3.eth.wait_for_transaction_receipt(
                HexBytes(tx_hash),
                timeout=self.RECEIPT_TIMEOUT,
                poll_latency=self.poll_interval
            )
        except TimeExhausted as e:
            self.logger.error(f"Timed out waiting for {tx_hash}: {e}")
            raise TransactionError(
                f"Transaction {tx_hash} not mined within {self.RECEIPT_TIMEOUT}s",
                tx_hash=tx_hash,
            )
        converted = self._convert_receipt(receipt)
        self.logger.info(f"Transaction {tx_hash} mined in block {converted.block_number} (status {converted.status})")
        return converted

    def _convert_receipt(self, web3_receipt: Web3TxReceipt) -> TxReceipt:
        """
        Convert Web3 receipt to our TxReceipt model
        """
        return TxReceipt.model_validate(_plain(dict(web3_receipt)))


class Web3Erc20Token:
    """ERC-20 token bound to a ChainClient account."""

    def __init__(self, chain: ChainClient, address: str):
        self.chain = chain
        self.address = Web3.to_checksum_address(address)
        self.contract = chain.contract(self.address, ERC20_ABI)

    def decimals(self) -> int:
        return int(self.contract.functions.decimals().call())

    def balance_of(self, account: str) -> int:
        return int(self.contract.functions.balanceOf(Web3.to_checksum_address(account)).call())

    def allowance(self, owner: str, spender: str) -> int:
        return int(self.contract.functions.allowance(
            Web3.to_checksum_address(owner),
            Web3.to_checksum_address(spender),
        ).call())

    def approve(self, spender: str, amount: int) -> str:
        return self.chain.send_transaction(
            self.contract.functions.approve(Web3.to_checksum_address(spender), amount)
        )

    def transfer(self, to: str, amount: int) -> str:
        return self.chain.send_transaction(
            self.contract.functions.transfer(Web3.to_checksum_address(to), amount)
        )


class Web3PoolManager:
    """Read-only view of pool state and ERC-6909 claim balances."""

    def __init__(self, chain: ChainClient, address: str):
        self.chain = chain
        self.address = Web3.to_checksum_address(address)
        self.contract = chain.contract(self.address, POOL_MANAGER_ABI)

    def get_slot0(self, pool_id: str) -> Tuple[int, int]:
        sqrt_price_x96, tick, _protocol_fee, _lp_fee = self.contract.functions.getSlot0(
            HexBytes(pool_id)
        ).call()
        return int(sqrt_price_x96), int(tick)

    def get_liquidity(self, pool_id: str) -> int:
        return int(self.contract.functions.getLiquidity(HexBytes(pool_id)).call())

    def balance_of(self, owner: str, token_id: int) -> int:
        return int(self.contract.functions.balanceOf(
            Web3.to_checksum_address(owner), token_id
        ).call())


class Web3SwapRouter:
    """Swap router that executes a single-pool swap for the calling account."""

    def __init__(self, chain: ChainClient, address: str):
        self.chain = chain
        self.address = Web3.to_checksum_address(address)
        self.contract = chain.contract(self.address, SWAP_ROUTER_ABI)

    def swap(
        self,
        key: PoolKey,
        params: SwapParams,
        take_claims: bool = False,
        settle_using_burn: bool = False,
        hook_data: bytes = b"",
    ) -> str:
        return self.chain.send_transaction(
            self.contract.functions.swap(
                key.as_tuple(),
                params.as_tuple(),
                (take_claims, settle_using_burn),
                hook_data,
            )
        )


class Web3LiquidityManager:
    """Contract that burns pool-manager claims and pays out the underlying token."""

    def __init__(self, chain: ChainClient, address: str):
        self.chain = chain
        self.address = Web3.to_checksum_address(address)
        self.contract = chain.contract(self.address, LIQUIDITY_MANAGER_ABI)

    def redeem(self, currency: str, amount: int) -> str:
        return self.chain.send_transaction(
            self.contract.functions.redeem(Web3.to_checksum_address(currency), amount),
            gas=self.chain.DEFAULT_GAS,
        )
