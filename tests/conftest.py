"""Pytest configuration and fixtures."""

import json
from typing import List, Optional

import pytest
import requests

from gasdeposit.core.models import DepositRequest

SOURCE_CHAIN_ID = 42161
DEPOSIT_CONTRACT = "0x391e7c679d29bd940d63be94ad22a25d25b5a604"
REFUND_FROM = "0x8456195dd0793c621c7f9245edf0fef85b1b879c"
RECIPIENT = "0x1111111111111111111111111111111111111111"


def make_response(status_code: int = 200, body=None, *, text: Optional[str] = None, reason: str = "OK") -> requests.Response:
    """Build a real ``requests.Response`` with the given payload."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response.encoding = "utf-8"
    content = text if text is not None else json.dumps(body)
    response._content = content.encode("utf-8")
    return response


class FakeSigner:
    """In-memory signer that records submissions."""

    def __init__(self, address: str = RECIPIENT, tx_hash: str = "0x" + "ab" * 32, error: Exception = None):
        self._address = address
        self.tx_hash = tx_hash
        self.error = error
        self.calls: List[dict] = []

    @property
    def address(self) -> str:
        return self._address

    def send_transaction(self, *, to: str, value: int, data: str) -> str:
        self.calls.append({"to": to, "value": value, "data": data})
        if self.error is not None:
            raise self.error
        return self.tx_hash


@pytest.fixture
def deposit_request() -> DepositRequest:
    return DepositRequest(
        source_chain_id=SOURCE_CHAIN_ID,
        destination_chain_ids=(42161, 10),
        amount=100_000_000_000_000,
        to_address=RECIPIENT,
        refund_from_address=REFUND_FROM,
        deposit_contract_address=DEPOSIT_CONTRACT,
    )


@pytest.fixture
def fake_signer() -> FakeSigner:
    return FakeSigner()


@pytest.fixture
def config_data() -> dict:
    return {
        "chains": {
            "source": {
                "chain_id": SOURCE_CHAIN_ID,
                "rpc_url": "http://localhost:8545",
                "explorer_tx_url": "https://arbiscan.io/tx/",
            }
        },
        "addresses": {
            "deposit_contract": DEPOSIT_CONTRACT,
            "refund_from": REFUND_FROM,
        },
        "deposit": {
            "amount_wei": 100_000_000_000_000,
            "destination_chain_ids": [42161, 10],
        },
        "api_urls": {
            "price_feed": "https://prices.test/simple/price",
            "gas_zip_quotes": "https://quotes.test/v2/quotes",
        },
        "defaults": {"api_timeout": 5},
    }
