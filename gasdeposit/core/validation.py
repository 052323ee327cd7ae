"""Preflight checks for the deposit request and signer funding."""

from __future__ import annotations

from dataclasses import dataclass

from web3 import Web3

from gasdeposit.core.models import DepositRequest
from gasdeposit.core.utils import get_logger

LOGGER = get_logger("gasdeposit.validation")

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
# 1M gas at 1 gwei, enough for the deposit call on L2s.
GAS_BUFFER_WEI = 1_000_000 * 10**9


def validate_deposit_request(request: DepositRequest) -> None:
    """Ensure the addresses in ``request`` are usable."""
    for field_name in ("to_address", "refund_from_address", "deposit_contract_address"):
        value = getattr(request, field_name)
        if not Web3.is_address(value):
            raise ValueError(f"{field_name} is not a valid address: {value}")

    if Web3.to_checksum_address(request.deposit_contract_address) == ZERO_ADDRESS:
        raise ValueError("deposit_contract_address is zero address")

    if len(set(request.destination_chain_ids)) != len(request.destination_chain_ids):
        LOGGER.warning("Duplicate destination chain ids: %s", list(request.destination_chain_ids))


@dataclass(frozen=True)
class FundingCheckResult:
    """Outcome of the native balance preflight."""

    native_balance: int
    required_native: int

    @property
    def has_sufficient_native(self) -> bool:
        return self.native_balance >= self.required_native


def check_native_funding(*, native_balance: int, value: int) -> FundingCheckResult:
    """Warn when the signer cannot cover ``value`` plus a gas buffer."""
    result = FundingCheckResult(native_balance=native_balance, required_native=value + GAS_BUFFER_WEI)
    if not result.has_sufficient_native:
        LOGGER.warning(
            "Low native balance %.6f ETH, requires at least %.6f ETH",
            native_balance / 10**18,
            result.required_native / 10**18,
        )
    return result


__all__ = [
    "FundingCheckResult",
    "GAS_BUFFER_WEI",
    "check_native_funding",
    "validate_deposit_request",
]
