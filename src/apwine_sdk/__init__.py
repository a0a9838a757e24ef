"""
APWine SDK for Python

A Python SDK for the APWine protocol providing future vault and liquidity
pool aggregates, swap route resolution and transaction helpers.
"""

__version__ = "0.1.0"

# Core configuration and types
from .core.config import APWineConfig, Network, NetworkConfig, get_network_config
from .core.types import (
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
)

# Capabilities, contract handles and connection
from .contracts.capability import (
    Capability,
    ReadOnlyCapability,
    SignerCapability,
    PendingTransaction,
)
from .contracts.handles import ContractHandle, ContractHandles
from .contracts.connection import RPCConnection

# Swap route resolution
from .pathfinding.resolver import (
    SwapHop,
    TokenPath,
    TokenPathResolver,
    DEFAULT_SWAP_HOPS,
    find_token_path,
    how_to_swap,
)

# Session object
from .sdk import APWineSDK

# Exceptions
from .core.exceptions import (
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

# Main exports for public API
__all__ = [
    # Version info
    "__version__",

    # Session
    "APWineSDK",

    # Configuration
    "APWineConfig",
    "Network",
    "NetworkConfig",
    "get_network_config",

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

    # Contracts
    "Capability",
    "ReadOnlyCapability",
    "SignerCapability",
    "PendingTransaction",
    "ContractHandle",
    "ContractHandles",
    "RPCConnection",

    # Pathfinding
    "SwapHop",
    "TokenPath",
    "TokenPathResolver",
    "DEFAULT_SWAP_HOPS",
    "find_token_path",
    "how_to_swap",

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
]
