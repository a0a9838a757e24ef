"""Configuration management for the APWine SDK."""

import json
import os
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Dict, Union

from pydantic import BaseModel, ConfigDict, ValidationError as PydanticValidationError, field_validator

from .exceptions import ConfigurationError
from .types import checksum_address

PACKAGE_NETWORKS = Path(__file__).parent / "networks.json"


class Network(str, Enum):
    """Networks with a deployed APWine contract set."""
    MAINNET = "mainnet"
    POLYGON = "polygon"


class NetworkConfig(BaseModel):
    """Fixed contract addresses and chain id of one network."""
    model_config = ConfigDict(frozen=True)

    network: Network
    chain_id: int
    registry: str
    amm_registry: str
    router: str

    @field_validator('registry', 'amm_registry', 'router')
    @classmethod
    def validate_address(cls, v):
        return checksum_address(v)


@dataclass(frozen=True)
class APWineConfig:
    """Configuration for the APWine SDK."""
    rpc_url: str
    network: Network = Network.MAINNET
    default_slippage: float = 0.5
    request_timeout: float = 30.0
    deadline_seconds: int = 1200

    @classmethod
    def from_env(cls) -> 'APWineConfig':
        """Load configuration from environment variables."""
        rpc_url = os.environ.get('APWINE_RPC_URL')
        if not rpc_url:
            raise ConfigurationError("APWINE_RPC_URL not found in environment")

        return cls(
            rpc_url=rpc_url,
            network=parse_network(os.environ.get('APWINE_NETWORK', 'mainnet')),
            default_slippage=float(os.environ.get('APWINE_DEFAULT_SLIPPAGE', '0.5')),
            request_timeout=float(os.environ.get('APWINE_REQUEST_TIMEOUT', '30.0')),
            deadline_seconds=int(os.environ.get('APWINE_DEADLINE_SECONDS', '1200'))
        )

    @classmethod
    def mainnet(cls, rpc_url: str) -> 'APWineConfig':
        """Ethereum mainnet configuration."""
        return cls(rpc_url=rpc_url, network=Network.MAINNET)

    @classmethod
    def polygon(cls, rpc_url: str) -> 'APWineConfig':
        """Polygon configuration."""
        return cls(rpc_url=rpc_url, network=Network.POLYGON)


def parse_network(network: Union[Network, str]) -> Network:
    """Coerce a network name into a Network, rejecting unknown names."""
    try:
        return Network(network)
    except ValueError as e:
        raise ConfigurationError(
            f"Unknown network: {network}",
            details={'known_networks': [n.value for n in Network]}
        ) from e


def _networks_file() -> Path:
    override = os.environ.get('APWINE_NETWORKS_FILE')
    if override:
        return Path(override)
    return PACKAGE_NETWORKS


@lru_cache(maxsize=None)
def _load_networks(path: Path) -> Dict[str, dict]:
    if not path.exists():
        raise ConfigurationError(f"Network configuration not found: {path}")
    with open(path) as f:
        return json.load(f)


def get_network_config(network: Union[Network, str]) -> NetworkConfig:
    """Resolve a network to its fixed contract addresses and chain id.

    Args:
        network: Network enum member or its name

    Returns:
        NetworkConfig for the network

    Raises:
        ConfigurationError: Unknown network or malformed configuration
    """
    network = parse_network(network)
    networks = _load_networks(_networks_file())

    entry = networks.get(network.value)
    if entry is None:
        raise ConfigurationError(f"No contract addresses configured for network: {network.value}")

    try:
        return NetworkConfig(network=network, **entry)
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid configuration for network {network.value}: {e}") from e


def get_network_chain_id(network: Union[Network, str]) -> int:
    """Chain id of a network."""
    return get_network_config(network).chain_id
