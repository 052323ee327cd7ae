"""Signing and broadcasting of the deposit transaction."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Protocol

from eth_account import Account
from web3 import Web3

from gasdeposit.core.utils import ensure_web3_connected, get_logger, hex_to_bytes

LOGGER = get_logger("gasdeposit.signer")

GAS_BUFFER_NUMERATOR = 11
GAS_BUFFER_DENOMINATOR = 10


class Signer(Protocol):
    """Holds a key and can broadcast a transaction on the source chain."""

    @property
    def address(self) -> str:
        ...

    def send_transaction(self, *, to: str, value: int, data: str) -> str:
        ...


@dataclass(frozen=True)
class GasParameters:
    """EIP-1559 gas parameters."""

    gas: int
    max_priority_fee: int
    max_fee: int

    @property
    def estimated_cost(self) -> int:
        return self.gas * self.max_fee


class Web3Signer:
    """Local private key signer broadcasting through a web3 HTTP provider."""

    def __init__(
        self,
        *,
        private_key: str,
        rpc_url: str,
        chain_id: int,
        web3_factory: Callable[[str], Web3] = lambda url: Web3(Web3.HTTPProvider(url)),
    ) -> None:
        self.chain_id = chain_id
        self.web3 = web3_factory(rpc_url)
        ensure_web3_connected(self.web3, expected_chain_id=chain_id)

        self.account = Account.from_key(private_key)
        LOGGER.info("Connected to chain %s as %s", chain_id, self.account.address)

    @property
    def address(self) -> str:
        return self.account.address

    def native_balance(self) -> int:
        return self.web3.eth.get_balance(self.address)

    def estimate_gas(self, *, to: str, value: int, data: str) -> GasParameters:
        """Estimate gas for the call, padding the limit by 10%."""
        gas_estimate = self.web3.eth.estimate_gas(
            {
                "from": self.address,
                "to": Web3.to_checksum_address(to),
                "value": value,
                "data": hex_to_bytes(data),
            }
        )
        gas_price = self.web3.eth.gas_price
        max_priority_fee = getattr(self.web3.eth, "max_priority_fee", gas_price)
        return GasParameters(
            gas=gas_estimate * GAS_BUFFER_NUMERATOR // GAS_BUFFER_DENOMINATOR,
            max_priority_fee=max_priority_fee,
            max_fee=gas_price + max_priority_fee,
        )

    def build_transaction(self, *, to: str, value: int, data: str, gas: GasParameters) -> Dict[str, Any]:
        """Build the 1559 transaction payload."""
        return {
            "from": self.address,
            "to": Web3.to_checksum_address(to),
            "value": value,
            "data": hex_to_bytes(data),
            "gas": gas.gas,
            "maxFeePerGas": gas.max_fee,
            "maxPriorityFeePerGas": gas.max_priority_fee,
            "nonce": self.web3.eth.get_transaction_count(self.address),
            "chainId": self.chain_id,
        }

    def send_transaction(self, *, to: str, value: int, data: str) -> str:
        """Sign and broadcast; returns the transaction hash without waiting for inclusion."""
        gas = self.estimate_gas(to=to, value=value, data=data)
        LOGGER.info(
            "Gas limit=%s maxFee=%.2f gwei priority=%.2f gwei",
            gas.gas,
            gas.max_fee / 10**9,
            gas.max_priority_fee / 10**9,
        )

        tx = self.build_transaction(to=to, value=value, data=data, gas=gas)
        LOGGER.info("Signing transaction")
        signed = self.account.sign_transaction(tx)

        LOGGER.info("Broadcasting transaction")
        tx_hash = self.web3.eth.send_raw_transaction(signed.raw_transaction)
        return Web3.to_hex(tx_hash)


__all__ = ["GasParameters", "Signer", "Web3Signer"]
