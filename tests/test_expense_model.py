"""Tests for the Expense model and PaymentMethod parsing."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from models.expense import AMOUNT_LIMIT, DESCRIPTION_MAX_LENGTH, Expense, PaymentMethod
from utils.exceptions import ValidationError


class TestPaymentMethod:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("CASH", PaymentMethod.CASH),
            ("cash", PaymentMethod.CASH),
            (" credit card ", PaymentMethod.CREDIT_CARD),
            ("Debit-Card", PaymentMethod.DEBIT_CARD),
            ("mobile_payment", PaymentMethod.MOBILE_PAYMENT),
            ("PayPal", PaymentMethod.PAYPAL),
        ],
    )
    def test_parse_accepts_names_in_any_case(self, text, expected):
        assert PaymentMethod.parse(text) is expected

    def test_parse_returns_members_unchanged(self):
        assert PaymentMethod.parse(PaymentMethod.BANK_TRANSFER) is PaymentMethod.BANK_TRANSFER

    def test_parse_rejects_unknown_method(self):
        with pytest.raises(ValidationError) as exc:
            PaymentMethod.parse("bitcoin")
        assert exc.value.field == "payment_method"

    def test_str_is_the_stored_name(self):
        assert str(PaymentMethod.BANK_TRANSFER) == "BANK_TRANSFER"


class TestCoercion:
    def test_amount_from_string(self, make_expense):
        assert make_expense(amount="12.50").amount == Decimal("12.50")

    def test_amount_from_float_uses_its_decimal_text(self, make_expense):
        assert make_expense(amount=0.1).amount == Decimal("0.1")

    def test_amount_from_int(self, make_expense):
        assert make_expense(amount=7).amount == Decimal("7")

    def test_payment_method_from_string(self, make_expense):
        assert make_expense(payment_method="paypal").payment_method is PaymentMethod.PAYPAL


class TestValidate:
    def test_valid_expense_passes(self, make_expense):
        make_expense().validate()

    @pytest.mark.parametrize("amount", ["0", "0.00", "-5", -1])
    def test_non_positive_amount_is_rejected(self, make_expense, amount):
        with pytest.raises(ValidationError) as exc:
            make_expense(amount=amount).validate()
        assert exc.value.field == "amount"

    @pytest.mark.parametrize("amount", [None, "abc", "NaN", float("inf")])
    def test_missing_or_non_numeric_amount_is_rejected(self, make_expense, amount):
        with pytest.raises(ValidationError) as exc:
            make_expense(amount=amount).validate()
        assert exc.value.field == "amount"

    @pytest.mark.parametrize("amount", ["0.01", "12.5", "12.500", "9999999999.99"])
    def test_amount_within_column_precision_is_accepted(self, make_expense, amount):
        make_expense(amount=amount).validate()

    @pytest.mark.parametrize("amount", ["0.004", "0.005", "12.345", 0.125])
    def test_fractional_cents_are_rejected(self, make_expense, amount):
        # NUMERIC(12,2) would silently round these
        with pytest.raises(ValidationError) as exc:
            make_expense(amount=amount).validate()
        assert exc.value.field == "amount"
        assert "decimal places" in exc.value.message

    @pytest.mark.parametrize("amount", [AMOUNT_LIMIT, "10000000000", "1E+15"])
    def test_amount_beyond_twelve_digits_is_rejected(self, make_expense, amount):
        with pytest.raises(ValidationError) as exc:
            make_expense(amount=amount).validate()
        assert exc.value.field == "amount"

    @pytest.mark.parametrize("field", ["category", "location"])
    def test_long_category_and_location_are_accepted(self, make_expense, field):
        make_expense(**{field: "x" * 1000}).validate()

    @pytest.mark.parametrize("description", ["", "   ", "\n\t", None])
    def test_blank_description_is_rejected(self, make_expense, description):
        with pytest.raises(ValidationError) as exc:
            make_expense(description=description).validate()
        assert exc.value.field == "description"

    def test_description_at_limit_is_accepted(self, make_expense):
        make_expense(description="x" * DESCRIPTION_MAX_LENGTH).validate()

    def test_description_over_limit_is_rejected(self, make_expense):
        with pytest.raises(ValidationError) as exc:
            make_expense(description="x" * (DESCRIPTION_MAX_LENGTH + 1)).validate()
        assert exc.value.field == "description"

    def test_datetime_is_not_a_calendar_date(self, make_expense):
        with pytest.raises(ValidationError) as exc:
            make_expense(expense_date=datetime(2024, 3, 1, 12, 0)).validate()
        assert exc.value.field == "expense_date"

    def test_missing_date_is_rejected(self, make_expense):
        with pytest.raises(ValidationError):
            make_expense(expense_date=None).validate()

    @pytest.mark.parametrize("field", ["category", "location"])
    def test_required_text_fields(self, make_expense, field):
        with pytest.raises(ValidationError) as exc:
            make_expense(**{field: " "}).validate()
        assert exc.value.field == field

    def test_missing_payment_method_is_rejected(self, make_expense):
        with pytest.raises(ValidationError) as exc:
            make_expense(payment_method=None).validate()
        assert exc.value.field == "payment_method"


def test_str_shows_the_essentials():
    expense = Expense(
        id=3,
        amount=Decimal("4.5"),
        payment_method=PaymentMethod.CASH,
        expense_date=date(2024, 3, 1),
        category="Food",
        location="Market",
        description="Apples",
    )
    assert str(expense) == "#3 | 2024-03-01 | 4.50 | CASH | Food | Market | Apples"
