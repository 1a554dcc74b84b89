"""
Network Provider
Connects to the target network and exposes the deployer signer and balance queries
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
from web3 import AsyncWeb3, AsyncHTTPProvider
from eth_account import Account
from eth_account.signers.local import LocalAccount
from loguru import logger

from .errors import ProviderConnectionError, QueryError


@dataclass(frozen=True)
class Signer:
    """
    Account handle able to authorize transactions

    When `account` is None the connected node holds the key
    (unlocked Hardhat / dev-node account) and signs on our behalf.
    """
    address: str
    account: Optional[LocalAccount] = None

    @property
    def is_local(self) -> bool:
        return self.account is not None


class NetworkProvider:
    """
    Async Web3 connection for a single network
    """

    def __init__(
        self,
        rpc_url: str,
        chain_id: Optional[int] = None,
        private_key: Optional[str] = None,
        w3: Optional[AsyncWeb3] = None
    ):
        """
        Initialize Network Provider

        Args:
            rpc_url: HTTP RPC endpoint
            chain_id: Expected chain id (None = accept whatever the node reports)
            private_key: Deployer key (None = use first node-managed account)
            w3: Pre-built AsyncWeb3 instance
        """
        self.rpc_url = rpc_url
        self.chain_id = chain_id
        self.w3 = w3 if w3 is not None else AsyncWeb3(AsyncHTTPProvider(rpc_url))
        self._private_key = private_key
        self._signer = None

    async def connect(self):
        """Check the endpoint is reachable and on the expected chain"""
        try:
            connected = await self.w3.is_connected()
        except Exception as e:
            raise ProviderConnectionError(f"Failed to reach RPC endpoint {self.rpc_url}: {e}")

        if not connected:
            raise ProviderConnectionError(f"Failed to connect to network at {self.rpc_url}")

        try:
            remote_chain_id = await self.w3.eth.chain_id
        except Exception as e:
            raise ProviderConnectionError(f"Could not read chain id from {self.rpc_url}: {e}")

        if self.chain_id is not None and remote_chain_id != self.chain_id:
            raise ProviderConnectionError(
                f"Chain id mismatch: expected {self.chain_id}, node reports {remote_chain_id}"
            )

        self.chain_id = remote_chain_id
        logger.info(f"Connected to {self.rpc_url} (chain id {remote_chain_id})")

    async def get_signer(self) -> Signer:
        """
        Get the deployer signer

        Returns:
            Signer for the configured private key, or the node's first account
        """
        if self._signer is not None:
            return self._signer

        await self.connect()

        if self._private_key:
            try:
                account = Account.from_key(self._private_key)
            except Exception as e:
                raise ProviderConnectionError(f"Invalid deployer private key: {e}")
            self._signer = Signer(address=account.address, account=account)
        else:
            try:
                accounts = await self.w3.eth.accounts
            except Exception as e:
                raise ProviderConnectionError(f"Could not list node accounts: {e}")

            if not accounts:
                raise ProviderConnectionError(
                    "No signer available: set DEPLOYER_PRIVATE_KEY or use a node with unlocked accounts"
                )
            self._signer = Signer(address=AsyncWeb3.to_checksum_address(accounts[0]))

        return self._signer

    async def get_balance(self, address: str) -> int:
        """
        Get native token balance

        Args:
            address: Account address

        Returns:
            Balance in wei
        """
        try:
            return await self.w3.eth.get_balance(AsyncWeb3.to_checksum_address(address))
        except Exception as e:
            raise QueryError(f"Balance query failed for {address}: {e}", step='balance')

    @staticmethod
    def format_ether(balance_wei: int) -> Decimal:
        """Convert wei to ether units"""
        return AsyncWeb3.from_wei(balance_wei, 'ether')
