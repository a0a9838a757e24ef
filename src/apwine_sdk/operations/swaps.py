"""Swaps through the AMM router and spot price quotes along a swap route."""

import asyncio
import logging
import time
from enum import Enum
from typing import Optional, Union

from ..contracts.capability import Capability, ensure_signer
from ..contracts.handles import ContractHandle, get_amm_router_contract
from ..core.config import Network
from ..core.exceptions import ValidationError
from ..core.slippage import max_amount_with_slippage, min_amount_with_slippage
from ..core.types import SwapParams, TokenKind, TransactionOptions, TransactionResult
from ..pathfinding.resolver import find_token_path
from .futures import fetch_amm
from .tokens import approve_if_requested, fetch_token_address

logger = logging.getLogger(__name__)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
PRICE_PRECISION = 10 ** 18


class SwapDirection(str, Enum):
    """IN fixes the amount sent, OUT fixes the amount received."""
    IN = "IN"
    OUT = "OUT"


async def fetch_spot_price(
    capability: Capability,
    network: Union[Network, str],
    future: ContractHandle,
    source: TokenKind,
    target: TokenKind
) -> int:
    """Spot price of ``source`` in ``target`` on the AMM of ``future``.

    Prices are 18-decimal fixed point. Multi-hop routes multiply the spot
    price of each hop.
    """
    path = find_token_path(source, target)
    amm = await fetch_amm(capability, network, future)

    prices = await asyncio.gather(*(
        amm.call('getSpotPrice', int(hop.pair_id), hop.token_in, hop.token_out)
        for hop in path.hops
    ))

    price = PRICE_PRECISION
    for hop_price in prices:
        price = price * hop_price // PRICE_PRECISION
    return price


async def swap(
    direction: SwapDirection,
    signer: Optional[Capability],
    network: Union[Network, str],
    params: SwapParams,
    default_slippage: float = 0.5,
    options: Optional[TransactionOptions] = None,
    deadline_seconds: int = 1200
) -> TransactionResult:
    """Swap ``params.source`` tokens into ``params.target`` tokens through the router.

    Args:
        direction: SwapDirection.IN to fix the amount sent, OUT to fix the amount received
        signer: Signing capability
        network: Network of the router
        params: Swap parameters
        default_slippage: Slippage used when ``params.slippage_tolerance`` is None
        options: Auto-approval options; the router is approved for the
            maximum amount of source tokens that can be sent
        deadline_seconds: Deadline from now when ``params.deadline`` is None

    Returns:
        TransactionResult of the swap

    Raises:
        MissingSignerError: No signer
        ValidationError: Source and target are the same token kind
        NoPathFoundError: No route between source and target
    """
    direction = SwapDirection(direction)
    signer = ensure_signer(signer, f'swap_{direction.value.lower()}')
    options = options or TransactionOptions()

    if params.source == params.target:
        raise ValidationError(
            "Source and target tokens must be different",
            field='target',
            value=params.target
        )

    path = find_token_path(params.source, params.target)
    pair_path, token_path = path.pair_path, path.token_path
    router = get_amm_router_contract(signer, network)
    amm = params.amm.rebind(signer)
    slippage = default_slippage if params.slippage_tolerance is None else params.slippage_tolerance
    user = params.user or await signer.get_address()
    deadline = params.deadline or int(time.time()) + deadline_seconds

    logger.info(
        f"Swap {direction.value} {params.amount}: "
        f"{' -> '.join(kind.value for kind in path.display_path)} on {amm.address}"
    )

    if direction == SwapDirection.IN:
        expected_out = await router.call('getAmountOut', amm.address, pair_path, token_path, params.amount)
        min_amount_out = min_amount_with_slippage(expected_out, slippage)

        if options.auto_approve:
            token_address = await fetch_token_address(amm, params.source)
            await approve_if_requested(signer, router.address, token_address, params.amount, options)

        transaction = await router.transact(
            'swapExactAmountIn',
            amm.address, pair_path, token_path,
            params.amount, min_amount_out,
            user, deadline, ZERO_ADDRESS
        )
    else:
        expected_in = await router.call('getAmountIn', amm.address, pair_path, token_path, params.amount)
        max_amount_in = max_amount_with_slippage(expected_in, slippage)

        if options.auto_approve:
            token_address = await fetch_token_address(amm, params.source)
            await approve_if_requested(signer, router.address, token_address, max_amount_in, options)

        transaction = await router.transact(
            'swapExactAmountOut',
            amm.address, pair_path, token_path,
            max_amount_in, params.amount,
            user, deadline, ZERO_ADDRESS
        )

    return TransactionResult(transaction=transaction)
