"""Unit tests for contract handles."""

import pytest

from apwine_sdk.contracts.handles import (
    ContractHandle,
    ContractHandles,
    get_abi,
    get_controller_contract,
    get_lp_token_contract,
)
from apwine_sdk.core.config import Network, get_network_config
from apwine_sdk.core.exceptions import ConfigurationError, MissingSignerError, ValidationError

from tests import TEST_ADDRESSES
from tests.conftest import cs


def abi_methods(name):
    return {entry['name'] for entry in get_abi(name) if entry.get('type') == 'function'}


class TestAbis:
    """Test the packaged contract ABIs."""

    @pytest.mark.parametrize("name,methods", [
        ('registry', {'getControllerAddress', 'futureVaultCount', 'getFutureVaultAt'}),
        ('amm_registry', {'getFutureAMMPool'}),
        ('controller', {'deposit', 'withdraw', 'isDepositsPaused', 'isWithdrawalsPaused', 'getNextPeriodStart'}),
        ('amm_router', {'getAmountIn', 'getAmountOut', 'swapExactAmountIn', 'swapExactAmountOut'}),
        ('amm', {'getPairWithID', 'getLPTokenId', 'addLiquidity', 'removeLiquidity', 'getSpotPrice'}),
        ('erc20', {'approve', 'allowance', 'increaseAllowance', 'decreaseAllowance', 'decimals'}),
        ('lp_token', {'setApprovalForAll', 'isApprovedForAll', 'totalSupply'}),
        ('future_vault', {'getIBTAddress', 'getPTAddress', 'PERIOD_DURATION', 'getFYTofPeriod'}),
    ])
    def test_methods_present(self, name, methods):
        assert methods <= abi_methods(name)

    def test_unknown_abi(self):
        with pytest.raises(ConfigurationError):
            get_abi('uniswap_pool')


class TestContractHandle:
    """Test single contract handles."""

    def test_address_checksummed(self, provider):
        handle = ContractHandle('erc20', TEST_ADDRESSES['pt'], provider)
        assert handle.address == cs('pt')
        assert handle.abi == get_abi('erc20')

    def test_invalid_address(self, provider):
        with pytest.raises(ValidationError) as exc_info:
            ContractHandle('erc20', TEST_ADDRESSES['invalid'], provider)
        assert exc_info.value.field == 'address'

    def test_rebind(self, provider, signer):
        handle = get_lp_token_contract(provider, TEST_ADDRESSES['lp_token'])
        rebound = handle.rebind(signer)

        assert rebound is not handle
        assert rebound.address == handle.address
        assert rebound.name == 'lp_token'
        assert rebound.capability is signer
        assert handle.capability is provider

    @pytest.mark.asyncio
    async def test_call_through_capability(self, chain, provider):
        chain.responses['decimals'] = 18
        handle = ContractHandle('erc20', TEST_ADDRESSES['pt'], provider)

        assert await handle.call('decimals') == 18
        assert chain.calls == [(cs('pt'), 'decimals', ())]

    @pytest.mark.asyncio
    async def test_transact_without_signer(self, chain, provider):
        """Test a read-only capability refuses to submit transactions."""
        handle = ContractHandle('erc20', TEST_ADDRESSES['pt'], provider)

        with pytest.raises(MissingSignerError):
            await handle.transact('approve', TEST_ADDRESSES['spender'], 1)
        assert chain.transactions == []

    @pytest.mark.asyncio
    async def test_controller_from_registry(self, chain, provider):
        controller = await get_controller_contract(provider, Network.POLYGON)

        assert controller.address == cs('controller')
        assert chain.calls == [(get_network_config(Network.POLYGON).registry, 'getControllerAddress', ())]


class TestContractHandles:
    """Test the handle set held by a session."""

    def test_bind(self, provider):
        handles = ContractHandles.bind(provider, "polygon")
        config = get_network_config(Network.POLYGON)

        assert handles.network == Network.POLYGON
        assert handles.registry.address == config.registry
        assert handles.amm_registry.address == config.amm_registry
        assert handles.router.address == config.router
        assert handles.controller is None

    @pytest.mark.asyncio
    async def test_rebind_includes_controller(self, provider, signer):
        controller = await get_controller_contract(provider, Network.MAINNET)
        handles = ContractHandles.bind(provider, Network.MAINNET).with_controller(controller)

        rebound = handles.rebind(signer)

        assert rebound.capability is signer
        for handle in (rebound.registry, rebound.amm_registry, rebound.router, rebound.controller):
            assert handle.capability is signer
        assert handles.controller.capability is provider

    @pytest.mark.asyncio
    async def test_with_controller_uses_handles_capability(self, provider, signer):
        controller = await get_controller_contract(provider, Network.MAINNET)

        handles = ContractHandles.bind(signer, Network.MAINNET).with_controller(controller)

        assert handles.controller.capability is signer
        assert handles.controller.address == controller.address
