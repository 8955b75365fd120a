"""Ledger network target resolved once from the contracts configuration file."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

from pydantic import BaseModel, Field
from pydantic import ValidationError as SchemaError

from services.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_NETWORK_KEY = "hardhat"
DEFAULT_CONTRACT_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
DEFAULT_CHAIN_ID = 31337
DEFAULT_NETWORK_NAME = "Hardhat Local"


class NetworkConfig(BaseModel):
    environmental_oracle: str
    chain_id: int = Field(..., ge=0)
    name: str


class ContractsConfig(BaseModel):
    """Shape of ``config/contracts.json``."""

    networks: Dict[str, NetworkConfig]
    current_network: str


@dataclass(frozen=True)
class NetworkTarget:
    key: str
    name: str
    contract_address: str
    chain_id: int


def default_contracts_config() -> ContractsConfig:
    return ContractsConfig(
        networks={
            DEFAULT_NETWORK_KEY: NetworkConfig(
                environmental_oracle=DEFAULT_CONTRACT_ADDRESS,
                chain_id=DEFAULT_CHAIN_ID,
                name=DEFAULT_NETWORK_NAME,
            )
        },
        current_network=DEFAULT_NETWORK_KEY,
    )


def read_contracts_config(path: Path) -> ContractsConfig:
    if not path.exists():
        logger.info(
            "No contract config at %s, using default Hardhat network", path,
            extra={"network": DEFAULT_NETWORK_KEY},
        )
        return default_contracts_config()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Unable to read contract config {path}: {exc}") from exc

    try:
        return ContractsConfig.model_validate(raw)
    except SchemaError as exc:
        raise ConfigurationError(f"Invalid contract config {path}: {exc}") from exc


def resolve_network_target(config: ContractsConfig) -> NetworkTarget:
    key = config.current_network
    network = config.networks.get(key)
    if network is None:
        raise ConfigurationError(f"Network {key!r} not found in config")
    return NetworkTarget(
        key=key,
        name=network.name,
        contract_address=network.environmental_oracle,
        chain_id=network.chain_id,
    )


def load_network_target(path: str | Path) -> NetworkTarget:
    target = resolve_network_target(read_contracts_config(Path(path)))
    logger.info(
        "Using network %s (%s)", target.name, target.key,
        extra={"contract": target.contract_address},
    )
    return target
