"""RPC connection to an Ethereum node."""

import logging
from typing import Optional

import aiohttp
from aiohttp import ClientTimeout
from web3 import AsyncHTTPProvider, AsyncWeb3

from ..core.config import APWineConfig, get_network_chain_id
from ..core.exceptions import ConfigurationError, RemoteCallError
from .capability import ReadOnlyCapability, SignerCapability

logger = logging.getLogger(__name__)


class RPCConnection:
    """Async connection to a JSON-RPC node shared by the SDK capabilities."""

    def __init__(self, config: APWineConfig):
        """Initialize the connection.

        Args:
            config: APWine configuration containing the RPC URL and timeouts
        """
        self.config = config
        self.session: Optional[aiohttp.ClientSession] = None
        self.provider = AsyncHTTPProvider(config.rpc_url)
        self.w3 = AsyncWeb3(self.provider)
        self._closed = False

    async def __aenter__(self):
        """Async context manager entry."""
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def _ensure_session(self):
        """Ensure the aiohttp session used by the web3 provider exists."""
        if self._closed:
            raise RuntimeError("Connection has been closed")

        if self.session is None or self.session.closed:
            timeout = ClientTimeout(total=self.config.request_timeout)
            self.session = aiohttp.ClientSession(
                timeout=timeout,
                headers={
                    'Content-Type': 'application/json',
                    'User-Agent': 'APWine-Python-SDK/0.1.0'
                }
            )
            await self.provider.cache_async_session(self.session)

    async def close(self):
        """Close the HTTP session."""
        if self.session and not self.session.closed:
            await self.session.close()
        self._closed = True

    async def read_only(self) -> ReadOnlyCapability:
        """Read-only capability over this connection."""
        await self._ensure_session()
        return ReadOnlyCapability(self.w3)

    async def signer(self, private_key: str) -> SignerCapability:
        """Signing capability for a local private key over this connection."""
        await self._ensure_session()
        return SignerCapability.from_private_key(self.w3, private_key)

    async def check_network(self) -> int:
        """Verify the node serves the chain of the configured network.

        Returns:
            The node's chain id

        Raises:
            ConfigurationError: The node is on another chain
            RemoteCallError: The node could not be reached
        """
        await self._ensure_session()
        try:
            chain_id = await self.w3.eth.chain_id
        except Exception as e:
            raise RemoteCallError(f"Failed to fetch chain id from {self.config.rpc_url}: {e}", method='eth_chainId') from e

        expected = get_network_chain_id(self.config.network)
        if chain_id != expected:
            raise ConfigurationError(
                f"RPC node is on chain {chain_id}, expected {expected} for {self.config.network.value}"
            )

        logger.info(f"Connected to {self.config.network.value} (chain {chain_id})")
        return chain_id
