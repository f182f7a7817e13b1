"""
Tests for wallet payload validation and normalization
"""
from chainvault.domain.validation import Invalid, Ok
from chainvault.domain.wallet import (
    normalize_address,
    unsupported_chain_message,
    validate_new_wallet,
    validate_wallet_patch,
)

ETH_ADDRESS = "0x" + "1" * 40
SUI_ADDRESS = "0x" + "a" * 64


def test_new_wallet_is_normalized():
    """Адрес и сеть приводятся к нижнему регистру, label только обрезается"""
    result = validate_new_wallet({
        "label": "  Main Wallet ",
        "address": " 0xABCDEF" + "0" * 34 + " ",
        "chain": "Ethereum",
    })

    assert isinstance(result, Ok)
    assert result.value == {
        "label": "Main Wallet",
        "address": "0xabcdef" + "0" * 34,
        "chain": "ethereum",
    }


def test_new_wallet_collects_all_required_errors():
    result = validate_new_wallet({})

    assert isinstance(result, Invalid)
    assert result.message == (
        "Wallet label is required, Wallet address is required, Blockchain chain is required"
    )
    assert result.fields() == ["label", "address", "chain"]


def test_new_wallet_unsupported_chain():
    result = validate_new_wallet({"label": "x", "address": ETH_ADDRESS, "chain": "dogecoin"})

    assert isinstance(result, Invalid)
    assert unsupported_chain_message() in result.message
    assert "Supported chains: ethereum, bitcoin, solana, sui, aptos, polygon, arbitrum, optimism, base" in result.message


def test_new_wallet_alias_chain_rejected():
    """Алиасы (eth, matic) для кошельков не принимаются"""
    result = validate_new_wallet({"label": "x", "address": ETH_ADDRESS, "chain": "eth"})

    assert isinstance(result, Invalid)
    assert result.fields() == ["chain"]


def test_new_wallet_bad_address_for_chain():
    result = validate_new_wallet({"label": "x", "address": ETH_ADDRESS, "chain": "sui"})

    assert isinstance(result, Invalid)
    assert result.message == "Invalid SUI address format (should be 0x followed by 64 hex characters)"


def test_new_wallet_label_and_address_errors_together():
    result = validate_new_wallet({"label": "   ", "address": "0x123", "chain": "polygon"})

    assert isinstance(result, Invalid)
    assert result.fields() == ["label", "address"]


def test_new_wallet_non_string_fields():
    result = validate_new_wallet({"label": 5, "address": ETH_ADDRESS, "chain": "ethereum"})

    assert isinstance(result, Invalid)
    assert result.message == "Wallet label must be a string"


def test_normalize_address():
    assert normalize_address("  0xAbC ") == "0xabc"


class TestWalletPatch:
    def test_label_only(self):
        result = validate_wallet_patch(ETH_ADDRESS, "ethereum", {"label": " Savings "})

        assert isinstance(result, Ok)
        assert result.value == {"label": "Savings"}

    def test_empty_label(self):
        result = validate_wallet_patch(ETH_ADDRESS, "ethereum", {"label": "  "})

        assert isinstance(result, Invalid)
        assert result.message == "Wallet label cannot be empty"

    def test_empty_address_and_chain(self):
        result = validate_wallet_patch(ETH_ADDRESS, "ethereum", {"address": "", "chain": None})

        assert isinstance(result, Invalid)
        assert result.message == "Wallet address cannot be empty, Blockchain chain cannot be empty"

    def test_chain_only_checked_against_current_address(self):
        """Смена сети на EVM-совместимую с EVM-адресом проходит"""
        result = validate_wallet_patch(ETH_ADDRESS, "ethereum", {"chain": "Polygon"})

        assert isinstance(result, Ok)
        assert result.value == {"chain": "polygon"}

    def test_chain_only_incompatible_with_current_address(self):
        result = validate_wallet_patch(ETH_ADDRESS, "ethereum", {"chain": "sui"})

        assert isinstance(result, Invalid)
        assert result.fields() == ["chain"]
        assert "Invalid SUI address format" in result.message

    def test_address_only_checked_against_current_chain(self):
        result = validate_wallet_patch(ETH_ADDRESS, "ethereum", {"address": "0x123"})

        assert isinstance(result, Invalid)
        assert result.fields() == ["address"]
        assert "Invalid Ethereum address format" in result.message

    def test_address_only_normalized(self):
        result = validate_wallet_patch(ETH_ADDRESS, "ethereum", {"address": "0x" + "AB" * 20})

        assert isinstance(result, Ok)
        assert result.value == {"address": "0x" + "ab" * 20}

    def test_address_and_chain_together(self):
        result = validate_wallet_patch(ETH_ADDRESS, "ethereum", {"address": SUI_ADDRESS, "chain": "sui"})

        assert isinstance(result, Ok)
        assert result.value == {"address": SUI_ADDRESS, "chain": "sui"}

    def test_unsupported_chain(self):
        result = validate_wallet_patch(ETH_ADDRESS, "ethereum", {"chain": "tron"})

        assert isinstance(result, Invalid)
        assert result.message == unsupported_chain_message()

    def test_empty_patch_is_ok(self):
        result = validate_wallet_patch(ETH_ADDRESS, "ethereum", {})

        assert isinstance(result, Ok)
        assert result.value == {}
