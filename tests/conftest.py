"""Shared fixtures: an in-memory chain reached through recording capabilities."""

from typing import Any, Dict, List, Optional, Sequence, Tuple

import pytest

from apwine_sdk.contracts.capability import Capability, PendingTransaction
from apwine_sdk.core.exceptions import RemoteCallError
from apwine_sdk.core.types import checksum_address

from tests import TEST_ADDRESSES


class FakeChain:
    """Canned contract responses and an ordered log of every remote call.

    Responses are keyed by ``(address, method)`` or by ``method`` alone. A
    value may be a constant, an exception to raise, or a callable receiving
    the call arguments.
    """

    def __init__(self, responses: Optional[Dict[Any, Any]] = None):
        self.responses: Dict[Any, Any] = dict(responses or {})
        self.log: List[Tuple[str, str, str, str, tuple]] = []

    def respond(self, capability: 'FakeCapability', address: str, method: str, args: Sequence[Any]) -> Any:
        self.log.append((capability.name, 'call', address, method, tuple(args)))
        if (address, method) in self.responses:
            value = self.responses[(address, method)]
        elif method in self.responses:
            value = self.responses[method]
        else:
            raise RemoteCallError(f"Unexpected call {method} on {address}", method=method, address=address)

        if isinstance(value, Exception):
            raise value
        if callable(value):
            return value(*args)
        return value

    @property
    def calls(self) -> List[Tuple[str, str, tuple]]:
        return [(address, method, args) for _, kind, address, method, args in self.log if kind == 'call']

    @property
    def transactions(self) -> List[Tuple[str, str, tuple]]:
        return [(address, method, args) for _, kind, address, method, args in self.log if kind == 'transact']


class FakeCapability(Capability):
    """Capability recording every call into a FakeChain."""

    def __init__(self, chain: FakeChain, name: str, can_sign: bool = False, address: Optional[str] = None):
        self.chain = chain
        self.name = name
        self.can_sign = can_sign
        self.address = address
        self.receipts: List[str] = []

    async def call(self, address, abi, method, args):
        return self.chain.respond(self, address, method, args)

    async def transact(self, address, abi, method, args):
        if not self.can_sign:
            return await super().transact(address, abi, method, args)
        self.chain.log.append((self.name, 'transact', address, method, tuple(args)))
        return PendingTransaction(hash=f"0x{len(self.chain.log):064x}", capability=self)

    async def get_address(self):
        return self.address

    async def wait_for_receipt(self, tx_hash, timeout):
        self.receipts.append(tx_hash)
        return {'status': 1, 'transactionHash': tx_hash}

    def __repr__(self):
        return f"FakeCapability(name='{self.name}')"


def cs(name: str) -> str:
    """Checksummed test address by name."""
    return checksum_address(TEST_ADDRESSES[name])


@pytest.fixture
def chain():
    """Chain answering the reads used by initialization and aggregates."""
    return FakeChain({
        'getControllerAddress': TEST_ADDRESSES['controller'],
        'futureVaultCount': 2,
        'getFutureVaultAt': lambda index: [TEST_ADDRESSES['future'], TEST_ADDRESSES['future_2']][index],
        'getFutureAMMPool': lambda future: {
            cs('future'): TEST_ADDRESSES['amm'],
            cs('future_2'): TEST_ADDRESSES['amm_2'],
        }[future],
        'getIBTAddress': TEST_ADDRESSES['ibt'],
        'getPTAddress': TEST_ADDRESSES['pt'],
        'getFYTAddress': TEST_ADDRESSES['fyt'],
        'getUnderlyingOfIBTAddress': TEST_ADDRESSES['underlying'],
        'PERIOD_DURATION': 2592000,
        'PLATFORM_NAME': 'Aave',
        'isDepositsPaused': False,
        'isWithdrawalsPaused': True,
        'getNextPeriodIndex': 4,
        'getNextPeriodStart': lambda period: 1700000000 + period,
        'getCurrentPeriodIndex': 3,
        'getFYTofPeriod': lambda period: TEST_ADDRESSES['fyt'],
    })


@pytest.fixture
def provider(chain):
    """Read-only capability."""
    return FakeCapability(chain, 'provider')


@pytest.fixture
def signer(chain):
    """Signing capability of the test user."""
    return FakeCapability(chain, 'signer', can_sign=True, address=cs('user'))
