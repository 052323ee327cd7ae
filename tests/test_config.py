"""Tests for configuration loading."""

import json

import pytest
from web3 import Web3

from gasdeposit.config import ConfigError, load_config, parse_config

from conftest import DEPOSIT_CONTRACT, REFUND_FROM


class TestLoadConfig:
    """Tests for load_config and parse_config."""

    def test_load_from_file(self, tmp_path, config_data):
        path = tmp_path / "config.json"
        path.write_text(json.dumps(config_data), encoding="utf-8")

        config = load_config(path)

        assert config.source_chain.chain_id == 42161
        assert config.addresses.deposit_contract == Web3.to_checksum_address(DEPOSIT_CONTRACT)
        assert config.addresses.refund_from == Web3.to_checksum_address(REFUND_FROM)
        assert config.addresses.to is None
        assert config.deposit.destination_chain_ids == [42161, 10]
        assert config.defaults.price_asset == "ethereum"
        assert config.defaults.fiat_currency == "usd"
        assert config.to_dict() == config_data

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{", encoding="utf-8")

        with pytest.raises(ConfigError, match="invalid JSON"):
            load_config(path)

    def test_missing_section(self, config_data):
        del config_data["api_urls"]

        with pytest.raises(ConfigError, match="api_urls"):
            parse_config(config_data)

    def test_invalid_address(self, config_data):
        config_data["addresses"]["refund_from"] = "0x1234"

        with pytest.raises(ConfigError, match="refund_from"):
            parse_config(config_data)

    @pytest.mark.parametrize("chain_ids", [[], [0], ["abc"], "42161,10"])
    def test_invalid_destination_chain_ids(self, config_data, chain_ids):
        config_data["deposit"]["destination_chain_ids"] = chain_ids

        with pytest.raises(ConfigError):
            parse_config(config_data)

    def test_non_positive_amount(self, config_data):
        config_data["deposit"]["amount_wei"] = 0

        with pytest.raises(ConfigError, match="amount_wei"):
            parse_config(config_data)

    def test_explorer_link(self, config_data):
        config = parse_config(config_data)

        assert config.source_chain.explorer_link("0xabc") == "https://arbiscan.io/tx/0xabc"

    def test_explorer_link_absent(self, config_data):
        del config_data["chains"]["source"]["explorer_tx_url"]
        config = parse_config(config_data)

        assert config.source_chain.explorer_link("0xabc") is None
