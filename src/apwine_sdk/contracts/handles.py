"""Contract handle factory."""

import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..core.config import Network, get_network_config
from ..core.exceptions import ConfigurationError, ValidationError
from ..core.types import checksum_address
from .capability import Capability, PendingTransaction


PACKAGE_ABIS = Path(__file__).parent / "abis.json"


@lru_cache(maxsize=None)
def _load_abis() -> Dict[str, List[dict]]:
    if not PACKAGE_ABIS.exists():
        raise ConfigurationError(f"Contract ABIs not found: {PACKAGE_ABIS}")
    with open(PACKAGE_ABIS) as f:
        return json.load(f)


def get_abi(name: str) -> List[dict]:
    """Get a packaged contract ABI by name."""
    abis = _load_abis()
    if name not in abis:
        raise ConfigurationError(f"ABI not found: {name}")
    return abis[name]


class ContractHandle:
    """A contract address bound to the capability used to reach it.

    Handles are immutable; switching capability means building a new handle
    with ``rebind``.
    """

    def __init__(self, name: str, address: str, capability: Capability):
        try:
            self.address = checksum_address(address)
        except ValueError as e:
            raise ValidationError(f"Invalid {name} address: {address}", field='address', value=address) from e
        self.name = name
        self.abi = get_abi(name)
        self.capability = capability

    async def call(self, method: str, *args: Any) -> Any:
        """Read ``method`` through the bound capability."""
        return await self.capability.call(self.address, self.abi, method, args)

    async def transact(self, method: str, *args: Any) -> PendingTransaction:
        """Submit ``method`` as a transaction through the bound capability."""
        return await self.capability.transact(self.address, self.abi, method, args)

    def rebind(self, capability: Capability) -> 'ContractHandle':
        """Same contract, reached through another capability."""
        return ContractHandle(self.name, self.address, capability)

    def __repr__(self) -> str:
        return f"ContractHandle(name='{self.name}', address='{self.address}', capability={self.capability!r})"


def get_registry_contract(capability: Capability, network: Union[Network, str]) -> ContractHandle:
    return ContractHandle('registry', get_network_config(network).registry, capability)


def get_amm_registry_contract(capability: Capability, network: Union[Network, str]) -> ContractHandle:
    return ContractHandle('amm_registry', get_network_config(network).amm_registry, capability)


def get_amm_router_contract(capability: Capability, network: Union[Network, str]) -> ContractHandle:
    return ContractHandle('amm_router', get_network_config(network).router, capability)


async def get_controller_contract(
    capability: Capability,
    network: Union[Network, str],
    registry: Optional[ContractHandle] = None
) -> ContractHandle:
    """Resolve the controller address through the registry and bind it."""
    registry = registry or get_registry_contract(capability, network)
    controller_address = await registry.call('getControllerAddress')
    return ContractHandle('controller', controller_address, capability)


def get_future_vault_contract(capability: Capability, address: str) -> ContractHandle:
    return ContractHandle('future_vault', address, capability)


def get_amm_contract(capability: Capability, address: str) -> ContractHandle:
    return ContractHandle('amm', address, capability)


def get_token_contract(capability: Capability, address: str) -> ContractHandle:
    return ContractHandle('erc20', address, capability)


def get_lp_token_contract(capability: Capability, address: str) -> ContractHandle:
    return ContractHandle('lp_token', address, capability)


@dataclass(frozen=True)
class ContractHandles:
    """The named contract handles held by an SDK session.

    All handles share one capability. The controller is None until its
    address has been resolved through the registry.
    """
    capability: Capability
    network: Network
    registry: ContractHandle
    amm_registry: ContractHandle
    router: ContractHandle
    controller: Optional[ContractHandle] = None

    @classmethod
    def bind(cls, capability: Capability, network: Union[Network, str]) -> 'ContractHandles':
        """Bind the fixed-address contracts of a network."""
        config = get_network_config(network)
        return cls(
            capability=capability,
            network=config.network,
            registry=get_registry_contract(capability, config.network),
            amm_registry=get_amm_registry_contract(capability, config.network),
            router=get_amm_router_contract(capability, config.network)
        )

    def rebind(self, capability: Capability) -> 'ContractHandles':
        """Every handle rebound to ``capability``, addresses unchanged."""
        return ContractHandles(
            capability=capability,
            network=self.network,
            registry=self.registry.rebind(capability),
            amm_registry=self.amm_registry.rebind(capability),
            router=self.router.rebind(capability),
            controller=self.controller.rebind(capability) if self.controller else None
        )

    def with_controller(self, controller: ContractHandle) -> 'ContractHandles':
        return ContractHandles(
            capability=self.capability,
            network=self.network,
            registry=self.registry,
            amm_registry=self.amm_registry,
            router=self.router,
            controller=controller.rebind(self.capability)
        )
