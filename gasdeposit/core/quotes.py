"""Calldata quoting against the gas.zip multi-chain quote API."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

import requests

from gasdeposit.config import RunnerConfig
from gasdeposit.core.models import CalldataQuote, DepositRequest
from gasdeposit.core.utils import get_logger, wei_to_ether

LOGGER = get_logger("gasdeposit.quotes")

DEFAULT_QUOTE_URL = "https://backend.gas.zip/v2/quotes"
TRY_AGAIN_MARKER = "Quote: Please Try Again"
CHAIN_LIMIT_MARKER = "Chain Limit Exceeded"
SUGGESTED_MINIMUM_WEI = 10**14


@dataclass(frozen=True)
class ChainDiagnostic:
    """A per-destination explanation derived from a rejected quote."""

    chain_id: int
    message: str


@dataclass(frozen=True)
class QuoteDiagnosis:
    """Diagnostics produced by a matcher plus a human suggestion."""

    diagnostics: List[ChainDiagnostic]
    suggestion: Optional[str] = None

    @property
    def chain_ids(self) -> List[int]:
        return [diagnostic.chain_id for diagnostic in self.diagnostics]


class QuoteNegotiationError(RuntimeError):
    """Raised whenever the quote service does not yield usable calldata."""

    def __init__(
        self,
        reason: str,
        *,
        status_code: Optional[int] = None,
        raw_body: Optional[str] = None,
        diagnostics: Optional[Sequence[ChainDiagnostic]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        super().__init__(reason)
        self.reason = reason
        self.status_code = status_code
        self.raw_body = raw_body
        self.diagnostics: List[ChainDiagnostic] = list(diagnostics or [])
        self.suggestion = suggestion

    @property
    def affected_chain_ids(self) -> List[int]:
        return [diagnostic.chain_id for diagnostic in self.diagnostics]


class DiagnosticMatcher(Protocol):
    """Turns the per-chain entries of a rejected quote into a diagnosis."""

    def __call__(
        self, quotes: Sequence[Mapping[str, Any]], request: DepositRequest
    ) -> Optional[QuoteDiagnosis]:
        ...


@dataclass(frozen=True)
class ChainLimitMatcher:
    """Recognises destinations that rejected the amount as below their limit."""

    marker: str = CHAIN_LIMIT_MARKER
    suggested_minimum_wei: int = SUGGESTED_MINIMUM_WEI

    def __call__(
        self, quotes: Sequence[Mapping[str, Any]], request: DepositRequest
    ) -> Optional[QuoteDiagnosis]:
        diagnostics = []
        for entry in quotes:
            error = entry.get("error")
            chain_id = entry.get("chain")
            if not isinstance(error, str) or self.marker not in error:
                continue
            if isinstance(chain_id, bool) or not isinstance(chain_id, int):
                LOGGER.warning("Ignoring chain limit entry without a numeric chain: %s", entry)
                continue
            diagnostics.append(ChainDiagnostic(chain_id=chain_id, message="amount too small for this chain"))
        if not diagnostics:
            return None

        suggestion = (
            f"The amount is too small for the selected chains. Current amount: "
            f"{wei_to_ether(request.amount).normalize():f} ETH, suggested amount: "
            f"{wei_to_ether(self.suggested_minimum_wei).normalize():f} ETH or higher"
        )
        return QuoteDiagnosis(diagnostics=diagnostics, suggestion=suggestion)


def _parse_error_body(body: str) -> Optional[Dict[str, Any]]:
    try:
        data = json.loads(body)
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


@dataclass
class QuoteClient:
    """Requests deposit calldata for a transfer spread over several chains."""

    base_url: str = DEFAULT_QUOTE_URL
    timeout: int = 10
    matchers: Sequence[DiagnosticMatcher] = field(default_factory=lambda: (ChainLimitMatcher(),))

    @classmethod
    def from_config(cls, config: RunnerConfig, **kwargs: Any) -> "QuoteClient":
        return cls(base_url=config.api_urls.gas_zip_quotes, timeout=config.defaults.api_timeout, **kwargs)

    def build_request(self, request: DepositRequest) -> Tuple[str, Dict[str, str]]:
        """Return the URL and query parameters for ``request``."""
        chain_ids = ",".join(str(chain_id) for chain_id in request.destination_chain_ids)
        url = f"{self.base_url.rstrip('/')}/{request.source_chain_id}/{request.amount}/{chain_ids}"
        # "from" is overridden so refunds go to a configured address rather than the signer.
        params = {"from": request.refund_from_address, "to": request.to_address}
        return url, params

    def fetch_calldata(self, request: DepositRequest) -> CalldataQuote:
        """Fetch calldata for ``request`` or raise :class:`QuoteNegotiationError`."""
        url, params = self.build_request(request)
        LOGGER.info("Fetching calldata from %s from=%s to=%s", url, params["from"], params["to"])

        try:
            response = requests.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise QuoteNegotiationError(f"Failed to fetch calldata from {url}: {exc}") from exc

        if not response.ok:
            raise self._negotiation_error(response, request)

        try:
            data = response.json()
        except ValueError as exc:
            raise QuoteNegotiationError(
                f"Quote service returned invalid JSON: {exc}",
                status_code=response.status_code,
                raw_body=response.text,
            ) from exc

        calldata = data.get("calldata") if isinstance(data, dict) else None
        if not isinstance(calldata, str) or not calldata:
            raise QuoteNegotiationError(
                "Quote service response is missing calldata",
                status_code=response.status_code,
                raw_body=response.text,
            )

        quote = CalldataQuote(calldata=calldata, raw=data)
        LOGGER.info("Calldata received (%s characters)", quote.data_length)
        LOGGER.debug("Quote response: %s", json.dumps(data, indent=2))
        return quote

    def diagnose(self, body: str, request: DepositRequest) -> Optional[QuoteDiagnosis]:
        """Run the matchers over a rejected quote body."""
        data = _parse_error_body(body)
        if data is None or data.get("error") != TRY_AGAIN_MARKER:
            return None
        quotes = data.get("quotes")
        if not isinstance(quotes, list):
            return None

        entries = [entry for entry in quotes if isinstance(entry, dict)]
        for matcher in self.matchers:
            diagnosis = matcher(entries, request)
            if diagnosis is not None:
                return diagnosis
        return None

    def _negotiation_error(self, response: requests.Response, request: DepositRequest) -> QuoteNegotiationError:
        body = response.text
        LOGGER.error("Failed to fetch calldata. Status: %s %s", response.status_code, response.reason)
        LOGGER.error("Error body: %s", body)

        diagnosis = self.diagnose(body, request)
        if diagnosis is not None:
            LOGGER.error("Resolution suggestions: %s", diagnosis.suggestion)
            LOGGER.error("Affected chains: %s", ", ".join(str(chain_id) for chain_id in diagnosis.chain_ids))

        return QuoteNegotiationError(
            f"Failed to fetch calldata: {response.status_code} {response.reason}",
            status_code=response.status_code,
            raw_body=body,
            diagnostics=diagnosis.diagnostics if diagnosis else None,
            suggestion=diagnosis.suggestion if diagnosis else None,
        )


__all__ = [
    "CHAIN_LIMIT_MARKER",
    "ChainDiagnostic",
    "ChainLimitMatcher",
    "DEFAULT_QUOTE_URL",
    "DiagnosticMatcher",
    "QuoteClient",
    "QuoteDiagnosis",
    "QuoteNegotiationError",
    "SUGGESTED_MINIMUM_WEI",
    "TRY_AGAIN_MARKER",
]
