"""
Contracts module for the APWine SDK.

Capabilities invoke contract methods; handles bind a contract address to
the capability used to reach it.
"""

from .capability import (
    Capability,
    ReadOnlyCapability,
    SignerCapability,
    PendingTransaction,
    ensure_signer,
)
from .handles import (
    ContractHandle,
    ContractHandles,
    get_abi,
    get_registry_contract,
    get_amm_registry_contract,
    get_amm_router_contract,
    get_controller_contract,
    get_future_vault_contract,
    get_amm_contract,
    get_token_contract,
    get_lp_token_contract,
)
from .connection import RPCConnection

__all__ = [
    "Capability",
    "ReadOnlyCapability",
    "SignerCapability",
    "PendingTransaction",
    "ensure_signer",
    "ContractHandle",
    "ContractHandles",
    "get_abi",
    "get_registry_contract",
    "get_amm_registry_contract",
    "get_amm_router_contract",
    "get_controller_contract",
    "get_future_vault_contract",
    "get_amm_contract",
    "get_token_contract",
    "get_lp_token_contract",
    "RPCConnection",
]
