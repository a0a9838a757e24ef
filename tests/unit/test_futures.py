"""Unit tests for future vault aggregates and vault transactions."""

import pytest

from apwine_sdk.contracts.handles import get_controller_contract, get_future_vault_contract
from apwine_sdk.core.config import Network, get_network_config
from apwine_sdk.core.exceptions import MissingSignerError, RemoteCallError
from apwine_sdk.core.types import TransactionOptions
from apwine_sdk.operations.futures import (
    deposit,
    fetch_all_amms,
    fetch_all_future_aggregates,
    fetch_all_future_vaults,
    fetch_future_aggregate_from_address,
    fetch_future_aggregate_from_index,
    fetch_fyt_tokens,
    withdraw,
)

from tests import TEST_ADDRESSES
from tests.conftest import cs


REGISTRY = get_network_config(Network.MAINNET).registry


@pytest.fixture
def future(provider):
    return get_future_vault_contract(provider, TEST_ADDRESSES['future'])


class TestAggregates:
    """Test future vault aggregates."""

    @pytest.mark.asyncio
    async def test_from_address(self, chain, provider):
        """Test the aggregate combines vault, controller and AMM registry reads."""
        aggregate = await fetch_future_aggregate_from_address(provider, Network.MAINNET, TEST_ADDRESSES['future'])

        assert aggregate.address == cs('future')
        assert aggregate.vault.address == cs('future')
        assert aggregate.amm.address == cs('amm')
        assert aggregate.ibt_address == TEST_ADDRESSES['ibt']
        assert aggregate.pt_address == TEST_ADDRESSES['pt']
        assert aggregate.period == 2592000
        assert aggregate.platform == 'Aave'
        assert aggregate.deposits_paused is False
        assert aggregate.withdrawals_paused is True
        assert aggregate.next_period_index == 4
        assert aggregate.next_period_timestamp == 1700000000 + 2592000

    @pytest.mark.asyncio
    async def test_controller_reads(self, chain, provider):
        """Test the pause flags and next period start are read from the controller."""
        await fetch_future_aggregate_from_address(provider, Network.MAINNET, TEST_ADDRESSES['future'])

        controller = cs('controller')
        assert (REGISTRY, 'getControllerAddress', ()) in chain.calls
        assert (controller, 'isDepositsPaused', (cs('future'),)) in chain.calls
        assert (controller, 'isWithdrawalsPaused', (cs('future'),)) in chain.calls
        assert (controller, 'getNextPeriodStart', (2592000,)) in chain.calls

    @pytest.mark.asyncio
    async def test_given_controller_not_resolved_again(self, chain, provider):
        controller = await get_controller_contract(provider, Network.MAINNET)
        chain.log.clear()

        await fetch_future_aggregate_from_address(provider, Network.MAINNET, TEST_ADDRESSES['future'], controller)

        assert 'getControllerAddress' not in [method for _, method, _ in chain.calls]

    @pytest.mark.asyncio
    async def test_from_index(self, chain, provider):
        aggregate = await fetch_future_aggregate_from_index(provider, Network.MAINNET, 1)

        assert aggregate.address == cs('future_2')
        assert aggregate.amm.address == cs('amm_2')
        assert (REGISTRY, 'getFutureVaultAt', (1,)) in chain.calls

    @pytest.mark.asyncio
    async def test_all_aggregates(self, chain, provider):
        """Test one aggregate per registered vault, in registry order."""
        aggregates = await fetch_all_future_aggregates(provider, Network.MAINNET)

        assert [aggregate.address for aggregate in aggregates] == [cs('future'), cs('future_2')]
        controller_lookups = [method for _, method, _ in chain.calls if method == 'getControllerAddress']
        assert len(controller_lookups) == 1

    @pytest.mark.asyncio
    async def test_empty_registry(self, chain, provider):
        chain.responses['futureVaultCount'] = 0

        assert await fetch_all_future_aggregates(provider, Network.MAINNET) == []

    @pytest.mark.asyncio
    async def test_failing_read_propagates(self, chain, provider):
        chain.responses['PLATFORM_NAME'] = RemoteCallError("execution reverted", method='PLATFORM_NAME')

        with pytest.raises(RemoteCallError):
            await fetch_future_aggregate_from_address(provider, Network.MAINNET, TEST_ADDRESSES['future'])


class TestVaultLookups:
    """Test registry enumeration."""

    @pytest.mark.asyncio
    async def test_all_future_vaults(self, provider):
        vaults = await fetch_all_future_vaults(provider, Network.MAINNET)

        assert [vault.address for vault in vaults] == [cs('future'), cs('future_2')]
        assert all(vault.name == 'future_vault' for vault in vaults)

    @pytest.mark.asyncio
    async def test_all_amms(self, provider):
        amms = await fetch_all_amms(provider, Network.MAINNET)

        assert [amm.address for amm in amms] == [cs('amm'), cs('amm_2')]
        assert all(amm.capability is provider for amm in amms)

    @pytest.mark.asyncio
    async def test_fyt_tokens(self, chain, provider):
        """Test the FYT of the current period of each vault."""
        fyts = await fetch_fyt_tokens(provider, Network.MAINNET)

        assert [fyt.address for fyt in fyts] == [cs('fyt'), cs('fyt')]
        assert (cs('future'), 'getFYTofPeriod', (3,)) in chain.calls


class TestDeposit:
    """Test vault deposits."""

    @pytest.mark.asyncio
    async def test_deposit_without_approval(self, chain, signer, future):
        await deposit(signer, Network.MAINNET, future, 100)

        assert chain.transactions == [(cs('controller'), 'deposit', (cs('future'), 100))]
        assert 'getIBTAddress' not in [method for _, method, _ in chain.calls]

    @pytest.mark.asyncio
    async def test_deposit_with_auto_approve(self, chain, signer, future):
        """Test the controller is approved for the IBT then the deposit is submitted."""
        await deposit(signer, Network.MAINNET, future, 100, options=TransactionOptions(auto_approve=True))

        assert chain.transactions == [
            (cs('ibt'), 'approve', (cs('controller'), 100)),
            (cs('controller'), 'deposit', (cs('future'), 100)),
        ]

    @pytest.mark.asyncio
    async def test_covered_allowance_not_approved(self, chain, signer, future):
        chain.responses['allowance'] = 100

        await deposit(
            signer, Network.MAINNET, future, 100,
            options=TransactionOptions(auto_approve=True, check_allowance=True)
        )

        assert [method for _, method, _ in chain.transactions] == ['deposit']

    @pytest.mark.asyncio
    async def test_given_controller_rebound_to_signer(self, chain, provider, signer, future):
        controller = await get_controller_contract(provider, Network.MAINNET)

        result = await deposit(signer, Network.MAINNET, future, 100, controller)

        assert result.transaction.capability is signer

    @pytest.mark.asyncio
    async def test_missing_signer(self, chain, provider, future):
        with pytest.raises(MissingSignerError):
            await deposit(provider, Network.MAINNET, future, 100, options=TransactionOptions(auto_approve=True))
        assert chain.log == []


class TestWithdraw:

    @pytest.mark.asyncio
    async def test_withdraw(self, chain, signer, future):
        await withdraw(signer, Network.MAINNET, future, 40)

        assert chain.transactions == [(cs('controller'), 'withdraw', (cs('future'), 40))]

    @pytest.mark.asyncio
    async def test_missing_signer(self, chain, future):
        with pytest.raises(MissingSignerError):
            await withdraw(None, Network.MAINNET, future, 40)
        assert chain.log == []
