"""Config loader for the gas deposit runner."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, MutableMapping, Optional

from web3 import Web3


class ConfigError(ValueError):
    """Raised when configuration data is invalid or missing."""


def _require_keys(data: Mapping[str, Any], keys: Iterable[str], context: str) -> None:
    missing = [key for key in keys if key not in data]
    if missing:
        raise ConfigError(f"{context} missing required keys: {', '.join(missing)}")


def _to_checksum(value: str, *, field_name: str) -> str:
    try:
        return Web3.to_checksum_address(value)
    except Exception as exc:  # web3 raises ValueError for malformed inputs
        raise ConfigError(f"Invalid address for {field_name}: {value}") from exc


@dataclass(frozen=True)
class ChainConfig:
    """Configuration for the source blockchain network."""

    chain_id: int
    rpc_url: Optional[str] = None
    explorer_tx_url: Optional[str] = None

    def ensure_rpc_url(self) -> str:
        """Return the RPC URL or raise if it is missing."""
        if not self.rpc_url:
            raise ConfigError("RPC URL required but not configured")
        return self.rpc_url

    def explorer_link(self, tx_hash: str) -> Optional[str]:
        """Return the block explorer URL for ``tx_hash`` when one is configured."""
        if not self.explorer_tx_url:
            return None
        return f"{self.explorer_tx_url.rstrip('/')}/{tx_hash}"


@dataclass(frozen=True)
class AddressesConfig:
    """Addresses used when requesting and submitting the deposit."""

    deposit_contract: str
    refund_from: str
    to: Optional[str] = None


@dataclass(frozen=True)
class DepositConfig:
    """What to deposit and where to spread it."""

    amount_wei: int
    destination_chain_ids: List[int]


@dataclass(frozen=True)
class DefaultsConfig:
    """Default operational parameters."""

    api_timeout: int
    price_asset: str
    fiat_currency: str


@dataclass(frozen=True)
class ApiUrlsConfig:
    """Endpoints for the price feed and the quote service."""

    price_feed: str
    gas_zip_quotes: str


@dataclass(frozen=True)
class RunnerConfig:
    """Typed wrapper around the runner configuration."""

    source_chain: ChainConfig
    addresses: AddressesConfig
    deposit: DepositConfig
    defaults: DefaultsConfig
    api_urls: ApiUrlsConfig
    raw: Mapping[str, Any] = field(repr=False)

    def to_dict(self) -> Dict[str, Any]:
        """Return the original configuration mapping."""
        return dict(self.raw)


def _normalize_chain_ids(chain_ids: Any) -> List[int]:
    if isinstance(chain_ids, (str, bytes)) or not isinstance(chain_ids, Iterable):
        raise ConfigError("deposit.destination_chain_ids must be a list of chain ids")

    result: List[int] = []
    for value in chain_ids:
        try:
            chain_id = int(value)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid destination chain id: {value!r}") from exc
        if chain_id <= 0:
            raise ConfigError(f"Destination chain id must be positive: {chain_id}")
        result.append(chain_id)
    if not result:
        raise ConfigError("deposit.destination_chain_ids cannot be empty")
    return result


def _load_json(path: Path) -> MutableMapping[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as fh:
            return json.load(fh)
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Config file contains invalid JSON: {path}") from exc


def parse_config(data: Mapping[str, Any]) -> RunnerConfig:
    """Validate an already decoded configuration mapping."""
    _require_keys(data, ["chains", "addresses", "deposit", "defaults", "api_urls"], "config")

    chains = data["chains"]
    addresses = data["addresses"]
    deposit = data["deposit"]
    defaults = data["defaults"]
    api_urls = data["api_urls"]

    _require_keys(chains, ["source"], "chains")
    source_data = chains["source"]
    _require_keys(source_data, ["chain_id", "rpc_url"], "source chain")
    source_chain = ChainConfig(
        chain_id=int(source_data["chain_id"]),
        rpc_url=str(source_data["rpc_url"]),
        explorer_tx_url=source_data.get("explorer_tx_url"),
    )
    if source_chain.chain_id <= 0:
        raise ConfigError("chains.source.chain_id must be positive")

    _require_keys(addresses, ["deposit_contract", "refund_from"], "addresses")
    to_address = addresses.get("to")
    addresses_config = AddressesConfig(
        deposit_contract=_to_checksum(addresses["deposit_contract"], field_name="deposit_contract"),
        refund_from=_to_checksum(addresses["refund_from"], field_name="refund_from"),
        to=_to_checksum(to_address, field_name="to") if to_address else None,
    )

    _require_keys(deposit, ["amount_wei", "destination_chain_ids"], "deposit")
    deposit_config = DepositConfig(
        amount_wei=int(deposit["amount_wei"]),
        destination_chain_ids=_normalize_chain_ids(deposit["destination_chain_ids"]),
    )
    if deposit_config.amount_wei <= 0:
        raise ConfigError("deposit.amount_wei must be positive")

    _require_keys(defaults, ["api_timeout"], "defaults")
    defaults_config = DefaultsConfig(
        api_timeout=int(defaults["api_timeout"]),
        price_asset=str(defaults.get("price_asset", "ethereum")),
        fiat_currency=str(defaults.get("fiat_currency", "usd")),
    )
    if defaults_config.api_timeout <= 0:
        raise ConfigError("defaults.api_timeout must be positive")

    _require_keys(api_urls, ["price_feed", "gas_zip_quotes"], "api_urls")
    api_config = ApiUrlsConfig(
        price_feed=str(api_urls["price_feed"]),
        gas_zip_quotes=str(api_urls["gas_zip_quotes"]),
    )

    return RunnerConfig(
        source_chain=source_chain,
        addresses=addresses_config,
        deposit=deposit_config,
        defaults=defaults_config,
        api_urls=api_config,
        raw=data,
    )


def load_config(config_path: Optional[Path] = None) -> RunnerConfig:
    """Load and validate runner configuration data."""
    config_path = config_path or Path("config.json")
    return parse_config(_load_json(config_path))


__all__ = [
    "AddressesConfig",
    "ApiUrlsConfig",
    "ChainConfig",
    "ConfigError",
    "DefaultsConfig",
    "DepositConfig",
    "RunnerConfig",
    "load_config",
    "parse_config",
]
