"""Tests for the web3 backed signer."""

from unittest.mock import MagicMock

import pytest
from eth_account import Account
from web3 import Web3

from gasdeposit.core.signer import Web3Signer

from conftest import DEPOSIT_CONTRACT

PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"


def _mock_web3(chain_id=42161, connected=True):
    web3 = MagicMock()
    web3.is_connected.return_value = connected
    web3.eth.chain_id = chain_id
    web3.eth.estimate_gas.return_value = 100_000
    web3.eth.gas_price = 10**8
    web3.eth.max_priority_fee = 10**6
    web3.eth.get_transaction_count.return_value = 3
    web3.eth.send_raw_transaction.return_value = b"\x12" * 32
    return web3


class TestWeb3Signer:
    """Tests for Web3Signer."""

    def test_rejects_wrong_chain(self):
        with pytest.raises(ValueError, match="chain ID mismatch"):
            Web3Signer(private_key=PRIVATE_KEY, rpc_url="http://rpc", chain_id=10, web3_factory=lambda _: _mock_web3())

    def test_rejects_disconnected_rpc(self):
        with pytest.raises(ConnectionError):
            Web3Signer(
                private_key=PRIVATE_KEY,
                rpc_url="http://rpc",
                chain_id=42161,
                web3_factory=lambda _: _mock_web3(connected=False),
            )

    def test_send_transaction(self):
        """Builds a 1559 transaction, signs it and returns the hash."""
        web3 = _mock_web3()
        signer = Web3Signer(private_key=PRIVATE_KEY, rpc_url="http://rpc", chain_id=42161, web3_factory=lambda _: web3)

        tx_hash = signer.send_transaction(to=DEPOSIT_CONTRACT, value=50_000_000_000_000, data="0xabc123")

        assert signer.address == Account.from_key(PRIVATE_KEY).address
        assert tx_hash == "0x" + "12" * 32
        web3.eth.estimate_gas.assert_called_once_with(
            {
                "from": signer.address,
                "to": Web3.to_checksum_address(DEPOSIT_CONTRACT),
                "value": 50_000_000_000_000,
                "data": bytes.fromhex("abc123"),
            }
        )
        web3.eth.send_raw_transaction.assert_called_once()

    def test_build_transaction(self):
        web3 = _mock_web3()
        signer = Web3Signer(private_key=PRIVATE_KEY, rpc_url="http://rpc", chain_id=42161, web3_factory=lambda _: web3)
        gas = signer.estimate_gas(to=DEPOSIT_CONTRACT, value=1, data="0x00")

        tx = signer.build_transaction(to=DEPOSIT_CONTRACT, value=1, data="0x00", gas=gas)

        assert gas.gas == 110_000
        assert tx["gas"] == 110_000
        assert tx["maxFeePerGas"] == 10**8 + 10**6
        assert tx["maxPriorityFeePerGas"] == 10**6
        assert tx["nonce"] == 3
        assert tx["chainId"] == 42161
        assert tx["value"] == 1
