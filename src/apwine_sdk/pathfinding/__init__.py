"""
Pathfinding module for the APWine SDK.

This module resolves swap routes between the token kinds an AMM trades
and turns them into router arguments.
"""

from .resolver import (
    SwapHop,
    TokenPath,
    TokenPathResolver,
    DEFAULT_SWAP_HOPS,
    find_token_path,
    how_to_swap,
)

__all__ = [
    "SwapHop",
    "TokenPath",
    "TokenPathResolver",
    "DEFAULT_SWAP_HOPS",
    "find_token_path",
    "how_to_swap",
]
