"""Future vault aggregates, AMM lookups and vault deposits/withdrawals."""

import asyncio
import logging
from typing import List, Optional, Union

from ..contracts.capability import Capability, ensure_signer
from ..contracts.handles import (
    ContractHandle,
    get_amm_contract,
    get_amm_registry_contract,
    get_controller_contract,
    get_future_vault_contract,
    get_registry_contract,
    get_token_contract,
)
from ..core.config import Network
from ..core.types import FutureAggregate, TransactionOptions, TransactionResult
from .tokens import approve_if_requested

logger = logging.getLogger(__name__)


async def fetch_future_aggregate_from_index(
    capability: Capability,
    network: Union[Network, str],
    index: int,
    controller: Optional[ContractHandle] = None
) -> FutureAggregate:
    """Aggregate of the future vault registered at ``index``."""
    registry = get_registry_contract(capability, network)
    future_address = await registry.call('getFutureVaultAt', index)

    return await fetch_future_aggregate_from_address(capability, network, future_address, controller)


async def fetch_future_aggregate_from_address(
    capability: Capability,
    network: Union[Network, str],
    address: str,
    controller: Optional[ContractHandle] = None
) -> FutureAggregate:
    """Aggregate of the future vault at ``address``.

    Args:
        capability: Capability used for every read
        network: Network of the vault
        address: Future vault address
        controller: Resolved controller; looked up through the registry when omitted

    Returns:
        FutureAggregate snapshot
    """
    if controller is None:
        controller = await get_controller_contract(capability, network)
    future = get_future_vault_contract(capability, address)

    (
        amm,
        ibt_address,
        pt_address,
        period,
        platform,
        deposits_paused,
        withdrawals_paused,
        next_period_index,
    ) = await asyncio.gather(
        fetch_amm(capability, network, future),
        future.call('getIBTAddress'),
        future.call('getPTAddress'),
        future.call('PERIOD_DURATION'),
        future.call('PLATFORM_NAME'),
        controller.call('isDepositsPaused', future.address),
        controller.call('isWithdrawalsPaused', future.address),
        future.call('getNextPeriodIndex'),
    )

    next_period_timestamp = await controller.call('getNextPeriodStart', period)

    return FutureAggregate(
        amm=amm,
        vault=future,
        address=future.address,
        ibt_address=ibt_address,
        pt_address=pt_address,
        period=period,
        platform=platform,
        deposits_paused=deposits_paused,
        withdrawals_paused=withdrawals_paused,
        next_period_index=next_period_index,
        next_period_timestamp=next_period_timestamp
    )


async def fetch_all_future_aggregates(
    capability: Capability,
    network: Union[Network, str],
    controller: Optional[ContractHandle] = None
) -> List[FutureAggregate]:
    """Aggregates of every registered future vault, in registry order."""
    if controller is None:
        controller = await get_controller_contract(capability, network)
    vaults = await fetch_all_future_vaults(capability, network)

    return list(await asyncio.gather(*(
        fetch_future_aggregate_from_address(capability, network, vault.address, controller)
        for vault in vaults
    )))


async def fetch_all_future_vaults(
    capability: Capability,
    network: Union[Network, str]
) -> List[ContractHandle]:
    """Every future vault registered in the registry."""
    registry = get_registry_contract(capability, network)
    count = await registry.call('futureVaultCount')

    addresses = await asyncio.gather(*(
        registry.call('getFutureVaultAt', index) for index in range(count)
    ))
    return [get_future_vault_contract(capability, address) for address in addresses]


async def fetch_amm(
    capability: Capability,
    network: Union[Network, str],
    future: ContractHandle
) -> ContractHandle:
    """AMM trading the tokens of ``future``."""
    amm_registry = get_amm_registry_contract(capability, network)
    amm_address = await amm_registry.call('getFutureAMMPool', future.address)
    return get_amm_contract(capability, amm_address)


async def fetch_all_amms(
    capability: Capability,
    network: Union[Network, str]
) -> List[ContractHandle]:
    """AMMs of every registered future vault."""
    vaults = await fetch_all_future_vaults(capability, network)
    return list(await asyncio.gather(*(
        fetch_amm(capability, network, vault) for vault in vaults
    )))


async def fetch_fyt_tokens(
    capability: Capability,
    network: Union[Network, str]
) -> List[ContractHandle]:
    """FYT token of the current period of every registered future vault."""
    vaults = await fetch_all_future_vaults(capability, network)

    async def current_fyt(vault: ContractHandle) -> ContractHandle:
        period_index = await vault.call('getCurrentPeriodIndex')
        fyt_address = await vault.call('getFYTofPeriod', period_index)
        return get_token_contract(capability, fyt_address)

    return list(await asyncio.gather(*(current_fyt(vault) for vault in vaults)))


async def deposit(
    signer: Optional[Capability],
    network: Union[Network, str],
    future: ContractHandle,
    amount: int,
    controller: Optional[ContractHandle] = None,
    options: Optional[TransactionOptions] = None
) -> TransactionResult:
    """Deposit ``amount`` of the vault's IBT through the controller.

    With ``options.auto_approve`` the controller is first approved for
    ``amount`` of the IBT.
    """
    signer = ensure_signer(signer, 'deposit')
    options = options or TransactionOptions()

    if controller is None:
        controller = await get_controller_contract(signer, network)
    controller = controller.rebind(signer)

    if options.auto_approve:
        ibt_address = await future.call('getIBTAddress')
        await approve_if_requested(signer, controller.address, ibt_address, amount, options)

    logger.info(f"Depositing {amount} into {future.address}")
    transaction = await controller.transact('deposit', future.address, amount)
    return TransactionResult(transaction=transaction)


async def withdraw(
    signer: Optional[Capability],
    network: Union[Network, str],
    future: ContractHandle,
    amount: int,
    controller: Optional[ContractHandle] = None
) -> TransactionResult:
    """Withdraw ``amount`` from a future vault through the controller."""
    signer = ensure_signer(signer, 'withdraw')

    if controller is None:
        controller = await get_controller_contract(signer, network)
    controller = controller.rebind(signer)

    logger.info(f"Withdrawing {amount} from {future.address}")
    transaction = await controller.transact('withdraw', future.address, amount)
    return TransactionResult(transaction=transaction)
