"""AMM liquidity pools: LP token aggregates and liquidity transactions."""

import asyncio
import logging
from typing import List, Optional

from ..contracts.capability import Capability, ensure_signer
from ..contracts.handles import ContractHandle, get_lp_token_contract
from ..core.exceptions import ValidationError
from ..core.slippage import max_amount_with_slippage, min_amount_with_slippage, pro_rata
from ..core.types import (
    AddLiquidityParams,
    LPPair,
    LPTokenPool,
    PairId,
    RemoveLiquidityParams,
    TransactionOptions,
    TransactionResult,
)
from .tokens import approve_if_requested

logger = logging.getLogger(__name__)


async def fetch_lp_token(capability: Capability, amm: ContractHandle) -> ContractHandle:
    """ERC1155 LP token contract of an AMM."""
    return get_lp_token_contract(capability, await amm.call('getLPTokenAddress'))


async def fetch_lp_token_pool(
    capability: Capability,
    amm: ContractHandle,
    pair_id: PairId,
    period_index: Optional[int] = None
) -> LPTokenPool:
    """Aggregate of one LP token pool.

    Args:
        capability: Capability used for every read
        amm: AMM holding the pool
        pair_id: PairId.PT_UNDERLYING or PairId.PT_FYT
        period_index: Any period up to the current one; defaults to the current period

    Returns:
        LPTokenPool snapshot
    """
    pair_id = PairId(pair_id)
    amm = amm.rebind(capability)

    if period_index is None:
        amm_id, period_index, lp_token = await asyncio.gather(
            amm.call('ammId'),
            amm.call('currentPeriodIndex'),
            fetch_lp_token(capability, amm)
        )
    else:
        amm_id, lp_token = await asyncio.gather(
            amm.call('ammId'),
            fetch_lp_token(capability, amm)
        )

    token_id, raw_pair = await asyncio.gather(
        amm.call('getLPTokenId', amm_id, period_index, int(pair_id)),
        amm.call('getPairWithID', int(pair_id))
    )
    total_supply = await lp_token.call('totalSupply', token_id)

    token_address, weights, balances, liquidity_is_initialized = raw_pair
    pair = LPPair(
        token_address=token_address,
        weights=tuple(weights),
        balances=tuple(balances),
        liquidity_is_initialized=liquidity_is_initialized
    )

    return LPTokenPool(
        amm=amm,
        token=lp_token,
        id=token_id,
        pair_id=pair_id,
        period_index=period_index,
        pair=pair,
        total_supply=total_supply
    )


async def fetch_all_lp_token_pools(capability: Capability, amm: ContractHandle) -> List[LPTokenPool]:
    """Pools of both pairs for every period up to the current one."""
    current_period_index = await amm.rebind(capability).call('currentPeriodIndex')

    return list(await asyncio.gather(*(
        fetch_lp_token_pool(capability, amm, pair_id, period_index)
        for period_index in range(current_period_index + 1)
        for pair_id in PairId
    )))


async def is_lp_approved_for_all(capability: Capability, amm: ContractHandle, account: str) -> bool:
    """Whether ``amm`` may move every LP token of ``account``."""
    lp_token = await fetch_lp_token(capability, amm.rebind(capability))
    return await lp_token.call('isApprovedForAll', account, amm.address)


async def approve_lp_for_all(
    signer: Optional[Capability],
    amm: ContractHandle,
    approval: bool = True
) -> TransactionResult:
    """Set the LP token approval of ``amm`` for the signer's account."""
    signer = ensure_signer(signer, 'approve_lp_for_all')
    lp_token = await fetch_lp_token(signer, amm.rebind(signer))

    logger.info(f"Setting LP approval of {amm.address} to {approval}")
    transaction = await lp_token.transact('setApprovalForAll', amm.address, approval)
    return TransactionResult(transaction=transaction)


def _pair_amounts(pool: LPTokenPool, lp_amount: int, round_up: bool) -> List[int]:
    if not pool.pair.liquidity_is_initialized or pool.total_supply == 0:
        raise ValidationError(
            f"Liquidity of pair {int(pool.pair_id)} is not initialized",
            field='pair_id',
            value=int(pool.pair_id)
        )
    return [pro_rata(balance, lp_amount, pool.total_supply, round_up) for balance in pool.pair.balances]


async def add_liquidity(
    signer: Optional[Capability],
    params: AddLiquidityParams,
    default_slippage: float = 0.5,
    options: Optional[TransactionOptions] = None
) -> TransactionResult:
    """Mint ``params.amount`` LP tokens of a pair in the current period.

    The maximum amounts of both pair tokens are the pro-rata share of the
    pool balances plus the slippage tolerance. With ``options.auto_approve``
    the AMM is approved for both maxima first.
    """
    signer = ensure_signer(signer, 'add_liquidity')
    options = options or TransactionOptions()
    slippage = default_slippage if params.slippage_tolerance is None else params.slippage_tolerance

    pool = await fetch_lp_token_pool(signer, params.amm, params.pair_id)
    amm = pool.amm
    max_amounts_in = [
        max_amount_with_slippage(amount, slippage)
        for amount in _pair_amounts(pool, params.amount, round_up=True)
    ]

    if options.auto_approve:
        pt_address = await amm.call('getPTAddress')
        await approve_if_requested(signer, amm.address, pt_address, max_amounts_in[0], options)
        await approve_if_requested(signer, amm.address, pool.pair.token_address, max_amounts_in[1], options)

    logger.info(f"Adding {params.amount} liquidity to pair {int(params.pair_id)} of {amm.address}")
    transaction = await amm.transact('addLiquidity', int(params.pair_id), params.amount, max_amounts_in)
    return TransactionResult(transaction=transaction)


async def remove_liquidity(
    signer: Optional[Capability],
    params: RemoveLiquidityParams,
    default_slippage: float = 0.5,
    options: Optional[TransactionOptions] = None
) -> TransactionResult:
    """Burn ``params.amount`` LP tokens of a pair in the current period.

    With ``options.auto_approve`` the AMM is approved for all LP tokens first.
    """
    signer = ensure_signer(signer, 'remove_liquidity')
    options = options or TransactionOptions()
    slippage = default_slippage if params.slippage_tolerance is None else params.slippage_tolerance

    pool = await fetch_lp_token_pool(signer, params.amm, params.pair_id)
    amm = pool.amm
    min_amounts_out = [
        min_amount_with_slippage(amount, slippage)
        for amount in _pair_amounts(pool, params.amount, round_up=False)
    ]

    if options.auto_approve:
        approved = False
        if options.check_allowance:
            approved = await pool.token.call('isApprovedForAll', await signer.get_address(), amm.address)
        if not approved:
            result = await approve_lp_for_all(signer, amm)
            await result.transaction.wait()

    logger.info(f"Removing {params.amount} liquidity from pair {int(params.pair_id)} of {amm.address}")
    transaction = await amm.transact('removeLiquidity', int(params.pair_id), params.amount, min_amounts_out)
    return TransactionResult(transaction=transaction)
