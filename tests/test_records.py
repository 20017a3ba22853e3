"""
Unit tests for boundary validation of store rows and form values.
"""

from datetime import date, datetime

import pytest
from pydantic import ValidationError

import config
from models import AssetType, Country, TransactionType
from services.errors import RecordValidationError, StoreFetchError
from services.records import TransactionForm, validate_investments, validate_transactions


def form_values(**overrides):
    values = {
        "name": "Reliance Industries",
        "asset_type": "Equity",
        "country": "India",
        "transaction_type": "buy",
        "transaction_date": "2024-04-01",
        "price": "2500.5",
        "quantity": "4",
    }
    values.update(overrides)
    return values


class TestTransactionForm:

    def test_parses_string_values(self):
        form = TransactionForm.model_validate(form_values())

        assert form.investment_id is None
        assert form.asset_type == AssetType.EQUITY
        assert form.country == Country.INDIA
        assert form.transaction_type == TransactionType.BUY
        assert form.transaction_date == date(2024, 4, 1)
        assert form.price == 2500.5
        assert form.quantity == 4

    def test_defaults(self):
        form = TransactionForm.model_validate(form_values())

        assert form.misc_costs == 0
        assert form.broker_fee_percent == 5
        assert form.tax_percent == 0
        assert form.notes is None

    def test_blank_optional_numbers_fall_back_to_defaults(self):
        form = TransactionForm.model_validate(
            form_values(misc_costs="", broker_fee_percent="  ", tax_percent=None, notes="")
        )

        assert form.misc_costs == 0
        assert form.broker_fee_percent == 5
        assert form.tax_percent == 0
        assert form.notes is None

    def test_fee_and_tax_defaults_come_from_settings(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("DEFAULT_BROKER_FEE_PERCENT", "1.0")
        monkeypatch.setenv("DEFAULT_TAX_PERCENT", "15")
        config.reload_settings()
        try:
            blank = TransactionForm.model_validate(form_values(broker_fee_percent="", tax_percent=" "))
            missing = TransactionForm.model_validate(form_values())
        finally:
            config._settings = None

        assert blank.broker_fee_percent == 1.0
        assert blank.tax_percent == 15
        assert missing.broker_fee_percent == 1.0
        assert missing.tax_percent == 15

    def test_new_investment_requires_name(self):
        with pytest.raises(ValidationError, match="Name is required"):
            TransactionForm.model_validate(form_values(name="   "))

    def test_new_investment_requires_asset_type(self):
        with pytest.raises(ValidationError, match="Asset type is required"):
            TransactionForm.model_validate(form_values(asset_type=""))

    def test_existing_investment_needs_no_name(self):
        form = TransactionForm.model_validate(
            form_values(investment_id="7", name="", asset_type=None, country=None)
        )

        assert form.investment_id == 7

    @pytest.mark.parametrize("field,value", [
        ("price", "-1"),
        ("quantity", "-0.5"),
        ("misc_costs", "-3"),
        ("broker_fee_percent", "101"),
        ("tax_percent", "-1"),
    ])
    def test_rejects_out_of_range(self, field, value):
        with pytest.raises(ValidationError):
            TransactionForm.model_validate(form_values(**{field: value}))

    def test_requires_date(self):
        values = form_values()
        del values["transaction_date"]

        with pytest.raises(ValidationError):
            TransactionForm.model_validate(values)

    def test_rejects_unknown_asset_type(self):
        with pytest.raises(ValidationError):
            TransactionForm.model_validate(form_values(asset_type="Crypto"))

    def test_builds_create_payloads(self):
        form = TransactionForm.model_validate(form_values(name="  Gold ETF ", notes="sip"))

        investment = form.to_investment_create()
        transaction = form.to_transaction_create(investment_id=3)

        assert investment.name == "Gold ETF"
        assert transaction.investment_id == 3
        assert transaction.price == 2500.5
        assert transaction.notes == "sip"


class TestRowValidation:

    def test_valid_rows(self):
        investments = validate_investments([{
            "id": 1,
            "user_id": "u",
            "name": "Apple",
            "asset_type": "Equity",
            "country": "US",
            "created_at": datetime(2024, 1, 1),
        }])
        transactions = validate_transactions([{
            "id": 1,
            "user_id": "u",
            "investment_id": 1,
            "transaction_type": "sell",
            "transaction_date": "2024-01-02",
            "price": 10,
            "quantity": 1,
        }])

        assert investments[0].asset_type == AssetType.EQUITY
        assert transactions[0].transaction_type == TransactionType.SELL
        assert transactions[0].misc_costs == 0

    def test_invalid_transaction_row(self):
        with pytest.raises(RecordValidationError) as exc_info:
            validate_transactions([{
                "id": 1,
                "user_id": "u",
                "investment_id": 1,
                "transaction_type": "transfer",
                "transaction_date": "2024-01-02",
                "price": 10,
                "quantity": 1,
            }])

        assert isinstance(exc_info.value, StoreFetchError)

    def test_invalid_investment_row(self):
        with pytest.raises(RecordValidationError):
            validate_investments([{"id": 1, "user_id": "u", "name": "x", "asset_type": "Equity"}])
