"""Core type definitions for the APWine SDK."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum, IntEnum
from typing import Any, Optional, Tuple, TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, field_validator
from web3 import Web3

if TYPE_CHECKING:
    from ..contracts.capability import PendingTransaction
    from ..contracts.handles import ContractHandle


def checksum_address(address: str) -> str:
    """Validate an Ethereum address and return its checksummed form."""
    if not isinstance(address, str) or not address.startswith('0x') or len(address) != 42:
        raise ValueError(f'Invalid Ethereum address: {address}')
    try:
        int(address[2:], 16)
    except ValueError as e:
        raise ValueError(f'Invalid Ethereum address: {address}') from e
    return Web3.to_checksum_address(address.lower())


class TokenKind(str, Enum):
    """Token kinds traded by an APWine AMM."""
    UNDERLYING = "Underlying"
    PT = "PT"
    FYT = "FYT"


class PairId(IntEnum):
    """AMM pair ids. The PT is token 0 of both pairs."""
    PT_UNDERLYING = 0
    PT_FYT = 1


class ReadyState(str, Enum):
    """Readiness of the asynchronously initialized SDK properties."""
    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"


class TokenAmount(BaseModel):
    """A raw token amount together with the token it is denominated in."""
    model_config = ConfigDict(frozen=True)

    token: str
    chain_id: int
    decimals: int
    raw: int

    @field_validator('token')
    @classmethod
    def validate_token(cls, v):
        return checksum_address(v)

    @property
    def amount(self) -> Decimal:
        """Human readable amount."""
        return Decimal(self.raw) / (Decimal(10) ** self.decimals)

    def __str__(self) -> str:
        return f"{self.amount} ({self.token})"


class _TransactionParams(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    amm: Any
    amount: int
    slippage_tolerance: Optional[float] = None
    user: Optional[str] = None

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v):
        if v <= 0:
            raise ValueError(f'amount must be positive: {v}')
        return v

    @field_validator('slippage_tolerance')
    @classmethod
    def validate_slippage(cls, v):
        if v is not None and not 0 <= v < 100:
            raise ValueError(f'slippage_tolerance must be a percentage in [0, 100): {v}')
        return v

    @field_validator('user')
    @classmethod
    def validate_user(cls, v):
        if v is not None:
            return checksum_address(v)
        return v


class SwapParams(_TransactionParams):
    """Parameters of a swap through the AMM router.

    For swap-in ``amount`` is the exact amount of ``source`` tokens sent; for
    swap-out it is the exact amount of ``target`` tokens received.
    """
    source: TokenKind
    target: TokenKind
    deadline: Optional[int] = None


class AddLiquidityParams(_TransactionParams):
    """Parameters for adding liquidity. ``amount`` is the LP token amount minted."""
    pair_id: PairId


class RemoveLiquidityParams(_TransactionParams):
    """Parameters for removing liquidity. ``amount`` is the LP token amount burned."""
    pair_id: PairId


@dataclass(frozen=True)
class TransactionOptions:
    """Options accepted by transaction-issuing operations.

    ``auto_approve`` submits an approval for the requested amount before the
    transaction itself. By default the approval is always submitted; with
    ``check_allowance`` it is skipped when the current allowance already
    covers the amount.
    """
    auto_approve: bool = False
    check_allowance: bool = False


@dataclass(frozen=True)
class TransactionResult:
    """A submitted transaction. Await ``transaction.wait()`` for finality."""
    transaction: 'PendingTransaction'


@dataclass(frozen=True)
class FutureAggregate:
    """Snapshot of a future vault and the values read around it."""
    amm: 'ContractHandle'
    vault: 'ContractHandle'
    address: str
    ibt_address: str
    pt_address: str
    period: int
    platform: str
    deposits_paused: bool
    withdrawals_paused: bool
    next_period_index: int
    next_period_timestamp: int


@dataclass(frozen=True)
class LPPair:
    """One AMM pair as returned by ``getPairWithID``."""
    token_address: str
    weights: Tuple[int, int]
    balances: Tuple[int, int]
    liquidity_is_initialized: bool


@dataclass(frozen=True)
class LPTokenPool:
    """Snapshot of an LP token pool of an AMM pair for one period."""
    amm: 'ContractHandle'
    token: 'ContractHandle'
    id: int
    pair_id: PairId
    period_index: int
    pair: LPPair
    total_supply: int
