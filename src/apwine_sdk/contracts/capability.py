"""Read-only and signing capabilities used to invoke contract methods."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import AsyncWeb3, Web3

from ..core.exceptions import MissingSignerError, RemoteCallError, TransactionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingTransaction:
    """A transaction that has been submitted but not necessarily mined."""
    hash: str
    capability: 'Capability'

    async def wait(self, timeout: float = 120.0) -> Dict[str, Any]:
        """Wait for the transaction receipt.

        Raises:
            TransactionError: The transaction reverted or was not mined in time
        """
        return await self.capability.wait_for_receipt(self.hash, timeout)


class Capability(ABC):
    """Uniform interface for invoking contract methods.

    A capability either only reads (``can_sign`` is False) or can also sign
    and submit transactions. Contract handles, fetchers and transaction
    operations only depend on this interface.
    """

    can_sign: bool = False

    @abstractmethod
    async def call(self, address: str, abi: List[dict], method: str, args: Sequence[Any]) -> Any:
        """Read a contract method."""

    async def transact(self, address: str, abi: List[dict], method: str, args: Sequence[Any]) -> PendingTransaction:
        """Sign and submit a contract method call."""
        raise MissingSignerError(operation=method)

    async def get_address(self) -> Optional[str]:
        """Address of the signing account, if any."""
        return None

    async def wait_for_receipt(self, tx_hash: str, timeout: float) -> Dict[str, Any]:
        raise TransactionError("This capability cannot track transactions", tx_hash=tx_hash)


def ensure_signer(capability: Optional[Capability], operation: str) -> Capability:
    """Fail fast, before any remote call, when ``capability`` cannot sign."""
    if capability is None or not capability.can_sign:
        logger.error(f"{operation} is a transaction and requires a signer")
        raise MissingSignerError(operation=operation)
    return capability


class ReadOnlyCapability(Capability):
    """Reads contracts through an AsyncWeb3 connection."""

    def __init__(self, w3: AsyncWeb3):
        self.w3 = w3

    def _function(self, address: str, abi: List[dict], method: str, args: Sequence[Any]):
        contract = self.w3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)
        return getattr(contract.functions, method)(*args)

    async def call(self, address: str, abi: List[dict], method: str, args: Sequence[Any]) -> Any:
        logger.debug(f"Calling {method} on {address}")
        try:
            return await self._function(address, abi, method, args).call()
        except Exception as e:
            raise RemoteCallError(
                f"Call to {method} on {address} failed: {e}",
                method=method,
                address=address
            ) from e

    async def wait_for_receipt(self, tx_hash: str, timeout: float) -> Dict[str, Any]:
        try:
            receipt = await self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=timeout)
        except Exception as e:
            raise TransactionError(f"Transaction {tx_hash} was not confirmed: {e}", tx_hash=tx_hash) from e

        if receipt['status'] != 1:
            raise TransactionError(f"Transaction {tx_hash} reverted", tx_hash=tx_hash)
        return receipt

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class SignerCapability(ReadOnlyCapability):
    """Reads contracts and signs transactions with a local account."""

    can_sign = True

    def __init__(self, w3: AsyncWeb3, account: LocalAccount):
        super().__init__(w3)
        self.account = account

    @classmethod
    def from_private_key(cls, w3: AsyncWeb3, private_key: str) -> 'SignerCapability':
        """Build a signer from a hex encoded private key."""
        return cls(w3, Account.from_key(private_key))

    async def get_address(self) -> Optional[str]:
        return self.account.address

    async def transact(self, address: str, abi: List[dict], method: str, args: Sequence[Any]) -> PendingTransaction:
        try:
            nonce = await self.w3.eth.get_transaction_count(self.account.address, 'pending')
            tx = await self._function(address, abi, method, args).build_transaction({
                'from': self.account.address,
                'nonce': nonce,
            })
            signed = self.account.sign_transaction(tx)
            tx_hash = await self.w3.eth.send_raw_transaction(signed.raw_transaction)
        except Exception as e:
            raise RemoteCallError(
                f"Transaction {method} on {address} failed: {e}",
                method=method,
                address=address
            ) from e

        tx_hash_hex = Web3.to_hex(tx_hash)
        logger.info(f"Submitted {method} on {address}: {tx_hash_hex}")
        return PendingTransaction(hash=tx_hash_hex, capability=self)

    def __repr__(self) -> str:
        return f"SignerCapability(address='{self.account.address}')"
