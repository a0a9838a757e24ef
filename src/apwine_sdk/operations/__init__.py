"""
Operations module for the APWine SDK.

Free functions composing contract calls into aggregates and transactions.
Each takes the capability it should use explicitly.
"""

from .futures import (
    fetch_future_aggregate_from_index,
    fetch_future_aggregate_from_address,
    fetch_all_future_aggregates,
    fetch_all_future_vaults,
    fetch_amm,
    fetch_all_amms,
    fetch_fyt_tokens,
    deposit,
    withdraw,
)
from .tokens import (
    approve,
    update_allowance,
    fetch_allowance,
    is_approval_necessary,
    approve_if_requested,
    fetch_token_address,
    fetch_pt,
)
from .lp import (
    fetch_lp_token,
    fetch_lp_token_pool,
    fetch_all_lp_token_pools,
    is_lp_approved_for_all,
    approve_lp_for_all,
    add_liquidity,
    remove_liquidity,
)
from .swaps import SwapDirection, fetch_spot_price, swap

__all__ = [
    # Futures
    "fetch_future_aggregate_from_index",
    "fetch_future_aggregate_from_address",
    "fetch_all_future_aggregates",
    "fetch_all_future_vaults",
    "fetch_amm",
    "fetch_all_amms",
    "fetch_fyt_tokens",
    "deposit",
    "withdraw",

    # Tokens
    "approve",
    "update_allowance",
    "fetch_allowance",
    "is_approval_necessary",
    "approve_if_requested",
    "fetch_token_address",
    "fetch_pt",

    # Liquidity
    "fetch_lp_token",
    "fetch_lp_token_pool",
    "fetch_all_lp_token_pools",
    "is_lp_approved_for_all",
    "approve_lp_for_all",
    "add_liquidity",
    "remove_liquidity",

    # Swaps
    "SwapDirection",
    "fetch_spot_price",
    "swap",
]
