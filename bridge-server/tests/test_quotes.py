"""Tests for the strategy catalog, payment preparation and address derivation."""

from decimal import Decimal

import pytest

from xrpfi.core.config import QuoteSettings
from xrpfi.modules.addresses import InvalidXrplAddressError, derive_destination_address, is_valid_xrpl_address
from xrpfi.modules.instructions import decode
from xrpfi.modules.quotes import (
    InvalidQuoteRequestError,
    OperatorNotConfiguredError,
    QuoteService,
    StrategyCatalog,
    StrategyNotFoundError,
)

from .conftest import FIRELIGHT_VAULT, OPERATOR_XRPL, USER_EVM, USER_XRPL, asset_settings


@pytest.fixture
def catalog() -> StrategyCatalog:
    return StrategyCatalog(asset_settings().vaults)


@pytest.fixture
def quotes(catalog) -> QuoteService:
    return QuoteService(QuoteSettings(), catalog, OPERATOR_XRPL)


# ---------------------------------------------------------------------------
# Addresses
# ---------------------------------------------------------------------------


class TestAddresses:
    def test_destination_is_the_account_id(self) -> None:
        assert derive_destination_address(USER_XRPL) == USER_EVM

    def test_derivation_is_deterministic(self) -> None:
        assert derive_destination_address(OPERATOR_XRPL) == derive_destination_address(OPERATOR_XRPL)
        assert derive_destination_address(OPERATOR_XRPL) != USER_EVM

    @pytest.mark.parametrize("address", ["", "rNotAnAddress", "0x" + "11" * 20])
    def test_invalid_addresses(self, address: str) -> None:
        assert is_valid_xrpl_address(address) is False
        with pytest.raises(InvalidXrplAddressError):
            derive_destination_address(address)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class TestStrategyCatalog:
    def test_lists_vaults_with_instruction_codes(self, catalog) -> None:
        strategies = {s.id: s for s in catalog.list_strategies()}

        assert set(strategies) == {"firelight", "upshift"}
        assert strategies["firelight"].instruction_code == 0x10
        assert strategies["upshift"].risk == "medium"
        assert strategies["upshift"].apy_value == Decimal("12.3")

    def test_unknown_strategy(self, catalog) -> None:
        with pytest.raises(StrategyNotFoundError):
            catalog.get_strategy("moonshot")


# ---------------------------------------------------------------------------
# Prepare
# ---------------------------------------------------------------------------


class TestPrepare:
    def test_even_split_by_default(self, quotes) -> None:
        quote = quotes.prepare(USER_XRPL, Decimal("10"))

        assert quote.destination_address == OPERATOR_XRPL
        assert quote.amount_drops == "10000000"
        assert quote.lots == 100
        assert quote.memo == "3032" + "00" * 24 + "000000000064"
        assert quote.allocation == {"firelight": 50, "upshift": 50}
        assert quote.strategy.id == "split"
        assert quote.strategy.name == "50% Firelight Staking / 50% Upshift Vault"
        assert quote.strategy.apy == "10.4%"

    def test_fees(self, quotes) -> None:
        fees = quotes.prepare(USER_XRPL, Decimal("10")).fees

        assert fees.xrpl_fee == Decimal("0.000012")
        assert fees.minting_fee == Decimal("0.020000")
        assert fees.total == Decimal("10.020012")

    def test_single_vault_uses_standard_layout(self, quotes) -> None:
        quote = quotes.prepare(USER_XRPL, Decimal("2.5"), {"firelight": 100, "upshift": 0})

        instruction = decode(quote.memo)
        assert instruction.code == 0x10
        assert instruction.vault_address == FIRELIGHT_VAULT
        assert instruction.lots == 25
        assert quote.strategy.id == "firelight"
        assert quote.strategy.apy == "8.5%"

    def test_missing_key_counts_as_zero(self, quotes) -> None:
        quote = quotes.prepare(USER_XRPL, Decimal("1"), {"upshift": 100})

        assert quote.allocation == {"firelight": 0, "upshift": 100}
        assert decode(quote.memo).code == 0x20

    def test_uneven_split(self, quotes) -> None:
        quote = quotes.prepare(USER_XRPL, Decimal("1"), {"firelight": 70, "upshift": 30})

        assert decode(quote.memo).split_percent_a == 70
        assert quote.strategy.apy == "9.6%"

    @pytest.mark.parametrize(
        ("address", "amount", "allocation", "message"),
        [
            ("rNotAnAddress", Decimal("10"), None, "Invalid XRPL address"),
            (USER_XRPL, Decimal("0.05"), None, "Minimum amount is 0.1 XRP"),
            (USER_XRPL, Decimal("10"), {"firelight": 60, "upshift": 60}, "Allocation must total 100%"),
            (USER_XRPL, Decimal("10"), {"firelight": 120, "upshift": -20}, "between 0 and 100"),
            (USER_XRPL, Decimal("10"), {"moonshot": 100}, "Unknown allocation keys"),
        ],
    )
    def test_rejected_requests(self, quotes, address, amount, allocation, message) -> None:
        with pytest.raises(InvalidQuoteRequestError, match=message):
            quotes.prepare(address, amount, allocation)

    def test_requires_operator_account(self, catalog) -> None:
        with pytest.raises(OperatorNotConfiguredError):
            QuoteService(QuoteSettings(), catalog, None).prepare(USER_XRPL, Decimal("10"))
