"""Value objects passed between the deposit stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence, Tuple

# The on-chain call is always sent half of the quoted amount so the deposit
# contract takes its refund path.
REFUND_TEST_DIVISOR = 2


def underfunded_value(amount: int) -> int:
    """Return the native value actually sent for a quoted ``amount``."""
    return amount // REFUND_TEST_DIVISOR


@dataclass(frozen=True)
class DepositRequest:
    """Immutable inputs for a single deposit run."""

    source_chain_id: int
    destination_chain_ids: Tuple[int, ...]
    amount: int
    to_address: str
    refund_from_address: str
    deposit_contract_address: str

    def __post_init__(self) -> None:
        # Lists are accepted for convenience but stored as a tuple.
        object.__setattr__(self, "destination_chain_ids", tuple(self.destination_chain_ids))
        if not self.destination_chain_ids:
            raise ValueError("destination_chain_ids cannot be empty")
        for chain_id in self.destination_chain_ids:
            if isinstance(chain_id, bool) or not isinstance(chain_id, int) or chain_id <= 0:
                raise ValueError(f"Destination chain id must be a positive integer: {chain_id!r}")
        if self.source_chain_id <= 0:
            raise ValueError(f"source_chain_id must be positive: {self.source_chain_id}")
        if self.amount <= 0:
            raise ValueError(f"amount must be positive: {self.amount}")

    @property
    def value_to_send(self) -> int:
        return underfunded_value(self.amount)


@dataclass(frozen=True)
class PriceQuote:
    """Asset price in a fiat currency; ``unit_price`` is zero when unknown."""

    asset: str
    fiat_currency: str
    unit_price: Decimal = Decimal("0")

    @property
    def available(self) -> bool:
        return self.unit_price > 0

    @classmethod
    def unavailable(cls, asset: str, fiat_currency: str) -> "PriceQuote":
        return cls(asset=asset, fiat_currency=fiat_currency, unit_price=Decimal("0"))


@dataclass(frozen=True)
class CalldataQuote:
    """Calldata returned by the quote service, kept exactly as received."""

    calldata: str
    raw: Mapping[str, Any] = field(default_factory=dict, repr=False)

    @property
    def data_length(self) -> int:
        return len(self.calldata)


@dataclass(frozen=True)
class SubmittedTransaction:
    """Summary of the broadcast deposit transaction."""

    hash: str
    destination: str
    value_sent: int
    data_length: int
    explorer_url: Optional[str] = None


@dataclass(frozen=True)
class DepositPlan:
    """Everything known before the transaction is signed."""

    request: DepositRequest
    price: PriceQuote
    amount_ether: Decimal
    fiat_value: Decimal
    quote: CalldataQuote

    @property
    def value_to_send(self) -> int:
        return self.request.value_to_send

    @property
    def destination_chain_ids(self) -> Sequence[int]:
        return self.request.destination_chain_ids


__all__ = [
    "CalldataQuote",
    "DepositPlan",
    "DepositRequest",
    "PriceQuote",
    "REFUND_TEST_DIVISOR",
    "SubmittedTransaction",
    "underfunded_value",
]
