"""CLI entrypoint for the gas.zip direct deposit."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from web3 import Web3

from gasdeposit.config import RunnerConfig, load_config
from gasdeposit.core.deposit import DepositOrchestrator
from gasdeposit.core.models import DepositRequest
from gasdeposit.core.quotes import QuoteNegotiationError
from gasdeposit.core.signer import Web3Signer
from gasdeposit.core.utils import get_logger
from gasdeposit.core.validation import check_native_funding

LOGGER = get_logger("gasdeposit.cli")

load_dotenv()


def _parse_chain_ids(value: str) -> List[int]:
    try:
        chain_ids = [int(part) for part in value.split(",") if part.strip()]
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid chain id list: {value}") from exc
    if not chain_ids:
        raise argparse.ArgumentTypeError("at least one chain id is required")
    return chain_ids


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Send a gas.zip direct deposit spread over several chains")
    parser.add_argument("--config", type=Path, default=Path("config.json"), help="Path to config.json")
    parser.add_argument("--amount-wei", type=int, help="Override the quoted amount in wei")
    parser.add_argument("--chains", type=_parse_chain_ids, help="Comma separated destination chain ids")
    parser.add_argument("--to", help="Recipient on each destination chain (defaults to the signer)")
    parser.add_argument("--dry-run", action="store_true", help="Fetch the quote and estimate gas without sending")
    return parser.parse_args(argv)


def build_request(config: RunnerConfig, args: argparse.Namespace, signer_address: str) -> DepositRequest:
    """Merge config file values with CLI overrides into a ``DepositRequest``."""
    to_address = args.to or config.addresses.to or signer_address
    return DepositRequest(
        source_chain_id=config.source_chain.chain_id,
        destination_chain_ids=tuple(args.chains or config.deposit.destination_chain_ids),
        amount=args.amount_wei if args.amount_wei is not None else config.deposit.amount_wei,
        to_address=Web3.to_checksum_address(to_address),
        refund_from_address=config.addresses.refund_from,
        deposit_contract_address=config.addresses.deposit_contract,
    )


def _dry_run(orchestrator: DepositOrchestrator, request: DepositRequest, signer: Web3Signer) -> None:
    plan = orchestrator.plan(request)
    check_native_funding(native_balance=signer.native_balance(), value=plan.value_to_send)
    gas = signer.estimate_gas(
        to=request.deposit_contract_address,
        value=plan.value_to_send,
        data=plan.quote.calldata,
    )
    LOGGER.info(
        "Dry run: value=%s wei gas=%s estimatedCost=%.6f ETH",
        plan.value_to_send,
        gas.gas,
        gas.estimated_cost / 10**18,
    )


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)

    rpc_url_env = os.getenv("RPC_URL") or ""
    rpc_url = rpc_url_env.strip() or None

    private_key_env = os.getenv("TEST_PRIVATE_KEY") or ""
    private_key = private_key_env.strip()

    if not private_key:
        print("❌ Error: TEST_PRIVATE_KEY environment variable not set")
        sys.exit(1)

    try:
        config = load_config(args.config)
        signer = Web3Signer(
            private_key=private_key,
            rpc_url=rpc_url or config.source_chain.ensure_rpc_url(),
            chain_id=config.source_chain.chain_id,
        )
        request = build_request(config, args, signer.address)
        orchestrator = DepositOrchestrator.from_config(config)

        if args.dry_run:
            _dry_run(orchestrator, request, signer)
        else:
            check_native_funding(native_balance=signer.native_balance(), value=request.value_to_send)
            orchestrator.run(request, signer)
    except QuoteNegotiationError as exc:
        LOGGER.exception("Quote negotiation failed")
        if exc.suggestion:
            print(f"💡 {exc.suggestion}")
        print(f"\n❌ Error: {exc}")
        sys.exit(1)
    except Exception as exc:
        LOGGER.exception("Deposit failed")
        print(f"\n❌ Error: {exc}")
        sys.exit(1)


if __name__ == "__main__":  # pragma: no cover - CLI entry
    main()
