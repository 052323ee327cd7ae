"""Price lookup, quote negotiation and submission of a gas deposit."""

from __future__ import annotations

from decimal import Decimal
from typing import Callable, Optional

from gasdeposit.config import RunnerConfig
from gasdeposit.core.models import (
    DepositPlan,
    DepositRequest,
    PriceQuote,
    SubmittedTransaction,
)
from gasdeposit.core.prices import PriceOracleClient
from gasdeposit.core.quotes import QuoteClient, QuoteNegotiationError
from gasdeposit.core.signer import Signer
from gasdeposit.core.utils import get_logger, wei_to_ether
from gasdeposit.core.validation import validate_deposit_request

LOGGER = get_logger("gasdeposit.deposit")


def fiat_value(amount_ether: Decimal, price: PriceQuote) -> Decimal:
    """Return the fiat equivalent, or zero when the price is unknown."""
    if not price.available:
        return Decimal("0")
    return amount_ether * price.unit_price


class DepositOrchestrator:
    """Runs the three deposit stages strictly in sequence."""

    def __init__(
        self,
        *,
        price_client: PriceOracleClient,
        quote_client: QuoteClient,
        asset: str = "ethereum",
        fiat_currency: str = "usd",
        explorer_link: Optional[Callable[[str], Optional[str]]] = None,
    ) -> None:
        self.price_client = price_client
        self.quote_client = quote_client
        self.asset = asset
        self.fiat_currency = fiat_currency
        self.explorer_link = explorer_link

    @classmethod
    def from_config(cls, config: RunnerConfig) -> "DepositOrchestrator":
        return cls(
            price_client=PriceOracleClient.from_config(config),
            quote_client=QuoteClient.from_config(config),
            asset=config.defaults.price_asset,
            fiat_currency=config.defaults.fiat_currency,
            explorer_link=config.source_chain.explorer_link,
        )

    def plan(self, request: DepositRequest) -> DepositPlan:
        """Look up the price and negotiate calldata without submitting anything."""
        validate_deposit_request(request)

        price = self.price_client.fetch_price(self.asset, self.fiat_currency)
        amount_ether = wei_to_ether(request.amount)
        value_in_fiat = fiat_value(amount_ether, price)
        self._log_configuration(request, amount_ether, value_in_fiat)

        quote = self.quote_client.fetch_calldata(request)
        if not quote.calldata:
            raise QuoteNegotiationError("Quote service returned empty calldata")

        return DepositPlan(
            request=request,
            price=price,
            amount_ether=amount_ether,
            fiat_value=value_in_fiat,
            quote=quote,
        )

    def submit(self, plan: DepositPlan, signer: Signer) -> SubmittedTransaction:
        """Send the planned deposit, deliberately underfunded, through ``signer``."""
        request = plan.request
        value = plan.value_to_send
        LOGGER.info(
            "Preparing transaction to=%s value=%s wei (half of quoted amount) data_length=%s",
            request.deposit_contract_address,
            value,
            plan.quote.data_length,
        )

        tx_hash = signer.send_transaction(
            to=request.deposit_contract_address,
            value=value,
            data=plan.quote.calldata,
        )
        explorer_url = self.explorer_link(tx_hash) if self.explorer_link else None

        LOGGER.info("Transaction sent: %s", tx_hash)
        if explorer_url:
            LOGGER.info("Explorer: %s", explorer_url)

        return SubmittedTransaction(
            hash=tx_hash,
            destination=request.deposit_contract_address,
            value_sent=value,
            data_length=plan.quote.data_length,
            explorer_url=explorer_url,
        )

    def run(self, request: DepositRequest, signer: Signer) -> SubmittedTransaction:
        """Execute the full deposit flow and return the broadcast transaction."""
        LOGGER.info("Starting gas.zip deposit from %s", signer.address)
        plan = self.plan(request)
        return self.submit(plan, signer)

    def _log_configuration(self, request: DepositRequest, amount_ether: Decimal, value_in_fiat: Decimal) -> None:
        LOGGER.info("Amount: %s wei (%.8f ETH)", request.amount, amount_ether)
        if value_in_fiat > 0:
            LOGGER.info("Amount: %.4f %s", value_in_fiat, self.fiat_currency.upper())
        LOGGER.info("Refund from address: %s", request.refund_from_address)
        LOGGER.info("To address: %s", request.to_address)
        LOGGER.info("Destination chains: %s", list(request.destination_chain_ids))
        LOGGER.info("Deposit contract: %s", request.deposit_contract_address)


__all__ = ["DepositOrchestrator", "fiat_value"]
