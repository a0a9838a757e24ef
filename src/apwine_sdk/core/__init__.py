"""
Core module for the APWine SDK.

This module contains the fundamental types, configuration, exceptions
and amount helpers that form the foundation of the SDK.
"""

from .config import (
    APWineConfig,
    Network,
    NetworkConfig,
    get_network_config,
    get_network_chain_id,
    parse_network,
)
from .types import (
    TokenKind,
    PairId,
    ReadyState,
    TokenAmount,
    SwapParams,
    AddLiquidityParams,
    RemoveLiquidityParams,
    TransactionOptions,
    TransactionResult,
    FutureAggregate,
    LPPair,
    LPTokenPool,
    checksum_address,
)
from .exceptions import (
    APWineSDKError,
    ConfigurationError,
    ValidationError,
    MissingSignerError,
    PathfindingError,
    NoPathFoundError,
    NotYetInitializedError,
    InitializationError,
    RemoteCallError,
    TransactionError,
)
from .slippage import (
    min_amount_with_slippage,
    max_amount_with_slippage,
    pro_rata,
)

__all__ = [
    # Configuration
    "APWineConfig",
    "Network",
    "NetworkConfig",
    "get_network_config",
    "get_network_chain_id",
    "parse_network",

    # Core types
    "TokenKind",
    "PairId",
    "ReadyState",
    "TokenAmount",
    "SwapParams",
    "AddLiquidityParams",
    "RemoveLiquidityParams",
    "TransactionOptions",
    "TransactionResult",
    "FutureAggregate",
    "LPPair",
    "LPTokenPool",
    "checksum_address",

    # Exceptions
    "APWineSDKError",
    "ConfigurationError",
    "ValidationError",
    "MissingSignerError",
    "PathfindingError",
    "NoPathFoundError",
    "NotYetInitializedError",
    "InitializationError",
    "RemoteCallError",
    "TransactionError",

    # Amounts
    "min_amount_with_slippage",
    "max_amount_with_slippage",
    "pro_rata",
]
