"""Core domain logic for the gas deposit runner."""

from .deposit import DepositOrchestrator, fiat_value
from .models import (
    CalldataQuote,
    DepositPlan,
    DepositRequest,
    PriceQuote,
    REFUND_TEST_DIVISOR,
    SubmittedTransaction,
    underfunded_value,
)
from .prices import PriceOracleClient
from .quotes import ChainDiagnostic, ChainLimitMatcher, QuoteClient, QuoteNegotiationError
from .signer import Signer, Web3Signer

__all__ = [
    "CalldataQuote",
    "ChainDiagnostic",
    "ChainLimitMatcher",
    "DepositOrchestrator",
    "DepositPlan",
    "DepositRequest",
    "PriceOracleClient",
    "PriceQuote",
    "QuoteClient",
    "QuoteNegotiationError",
    "REFUND_TEST_DIVISOR",
    "Signer",
    "SubmittedTransaction",
    "Web3Signer",
    "fiat_value",
    "underfunded_value",
]
