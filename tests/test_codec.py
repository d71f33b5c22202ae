"""
Tests for the record codec: money conversion, schemas, row encode/decode.
"""

import pytest

from ledger.codec import (
    ACCOUNT_SCHEMA,
    CATEGORY_SCHEMA,
    MOVEMENT_SCHEMA,
    FieldType,
    decode,
    encode,
    field_names,
    from_minor_units,
    precision_for,
    schema_defaults,
    to_minor_units,
)
from ledger.codec.rows import decode_value
from ledger.models import Account, Category, Movement


class TestMoney:
    """Tests for decimal text <-> integer minor units."""

    @pytest.mark.parametrize("text,precision,expected", [
        ("10.50", 2, 1050),
        ("-3.07", 2, -307),
        ("1234", 0, 1234),
        ("0.00000001", 8, 1),
        ("12", 2, 1200),
        ("  7.5 ", 2, 750),
    ])
    def test_to_minor_units(self, text, precision, expected):
        assert to_minor_units(text, precision) == expected

    def test_rounds_half_away_from_zero(self):
        """Extra digits round half away from zero, with no float error."""
        assert to_minor_units("1.005", 2) == 101
        assert to_minor_units("-1.005", 2) == -101
        assert to_minor_units("1.004", 2) == 100
        assert to_minor_units("2.5", 0) == 3

    @pytest.mark.parametrize("text", ["", "abc", "NaN", "Infinity", "1,000.00"])
    def test_unparseable_gives_zero(self, text):
        assert to_minor_units(text, 2) == 0

    @pytest.mark.parametrize("value,precision,expected", [
        (1050, 2, "10.50"),
        (-5, 2, "-0.05"),
        (0, 2, "0.00"),
        (1234, 0, "1234"),
        (-1234, 0, "-1234"),
        (1, 8, "0.00000001"),
        (123456789, 8, "1.23456789"),
    ])
    def test_from_minor_units(self, value, precision, expected):
        assert from_minor_units(value, precision) == expected

    def test_no_drift(self):
        """0.10 + 0.20 is exactly 0.30."""
        total = to_minor_units("0.10", 2) + to_minor_units("0.20", 2)
        assert total == 30
        assert from_minor_units(total, 2) == "0.30"


class TestPrecision:
    """Tests for the currency precision table."""

    def test_known_currencies(self):
        assert precision_for("USD") == 2
        assert precision_for("JPY") == 0
        assert precision_for("KRW") == 0
        assert precision_for("BTC") == 8

    def test_lookup_is_case_insensitive(self):
        assert precision_for("jpy") == 0

    def test_unknown_currency_defaults_to_two(self):
        assert precision_for("XYZ") == 2
        assert precision_for("") == 2


class TestSchemas:
    """Tests for schema metadata."""

    def test_column_order(self):
        assert field_names(CATEGORY_SCHEMA) == ["id", "type", "name", "group", "assigned", "hidden"]
        assert field_names(MOVEMENT_SCHEMA)[:4] == ["id", "type", "accountId", "date"]

    def test_defaults(self):
        defaults = schema_defaults(ACCOUNT_SCHEMA)
        assert defaults["balance"] == 0
        assert defaults["hidden"] is False
        assert defaults["reconciled"] == ""


class TestDecode:
    """Tests for raw row -> record."""

    def test_missing_columns_get_defaults(self):
        """Rows from a file written before a column existed still load."""
        account = decode({"id": "1", "name": "Cash", "type": "cash"}, ACCOUNT_SCHEMA, Account)

        assert account.name == "Cash"
        assert account.kind == "cash"
        assert account.balance == 0
        assert account.hidden is False
        assert account.reconciled == ""

    def test_extra_columns_are_dropped(self):
        category = decode(
            {"id": "3", "name": "Rent", "legacyColumn": "x"},
            CATEGORY_SCHEMA,
            Category,
        )
        assert category.name == "Rent"
        assert not hasattr(category, "legacyColumn")

    def test_booleans(self):
        assert decode_value(FieldType.BOOLEAN, "true", 2) is True
        assert decode_value(FieldType.BOOLEAN, "TRUE", 2) is True
        assert decode_value(FieldType.BOOLEAN, "yes", 2) is False
        assert decode_value(FieldType.BOOLEAN, "", 2) is False

    def test_numbers(self):
        assert decode_value(FieldType.NUMBER, "7", 2) == 7
        assert decode_value(FieldType.NUMBER, "3.5", 2) == 3.5
        assert decode_value(FieldType.NUMBER, "abc", 2) == 0

    def test_bad_money_becomes_zero(self):
        movement = decode({"id": "1", "amount": "twelve"}, MOVEMENT_SCHEMA, Movement)
        assert movement.amount == 0

    def test_money_uses_given_precision(self):
        raw = {"id": "1", "amount": "1234"}
        assert decode(raw, MOVEMENT_SCHEMA, Movement, 0).amount == 1234
        assert decode(raw, MOVEMENT_SCHEMA, Movement, 2).amount == 123400


class TestEncode:
    """Tests for record -> raw row."""

    def test_every_column_in_order(self):
        row = encode(Movement(id="1", amount=-250), MOVEMENT_SCHEMA, 2)
        assert list(row.keys()) == field_names(MOVEMENT_SCHEMA)
        assert row["amount"] == "-2.50"
        assert row["transferPairId"] == ""

    def test_booleans_are_literal_tokens(self):
        row = encode(Category(id="1", hidden=True), CATEGORY_SCHEMA, 2)
        assert row["hidden"] == "true"

    @pytest.mark.parametrize("currency,balance", [
        ("USD", 123456),
        ("JPY", 98765),
        ("BTC", 150000001),
        ("EUR", -42),
    ])
    def test_account_round_trip(self, currency, balance):
        account = Account(
            id="9",
            name="Wallet",
            kind="cash",
            currency=currency,
            institution="Bank, Ltd",
            balance=balance,
            hidden=True,
            reconciled="2024-03-31",
            created_at="2024-01-01T00:00:00Z",
        )
        precision = precision_for(currency)
        assert decode(encode(account, ACCOUNT_SCHEMA, precision), ACCOUNT_SCHEMA, Account, precision) == account

    @pytest.mark.parametrize("precision,amount", [
        (0, -4599),
        (2, -4599),
        (8, -150000001),
    ])
    def test_movement_round_trip(self, precision, amount):
        movement = Movement(
            id="4",
            kind="transfer",
            account_id="1",
            date="2024-02-29",
            category_id="",
            description='Dinner, "fancy"',
            payee="Bistro",
            transfer_pair_id="5",
            amount=amount,
            notes="line one\nline two",
            source="manual",
            created_at="2024-02-29T20:00:00Z",
        )
        row = encode(movement, MOVEMENT_SCHEMA, precision)
        assert decode(row, MOVEMENT_SCHEMA, Movement, precision) == movement
