import pytest

from app.trips.financials import (
    BONUS_COLUMNS, DISCOUNT_COLUMNS, OP_EXPENSE_COLUMNS,
    calculate_net_earned, calculate_operation_expense,
    calculate_turo_fee, derive_trip_financials,
)


def test_turo_fee_is_a_ninth_of_discounted_price_plus_delivery():
    record = {"trip_price": "100", "delivery": "10"}

    assert calculate_turo_fee(record) == pytest.approx(110 / 9)


def test_net_earned_subtracts_discounts_and_service_charge():
    record = {"trip_price": "200", "three_day_discount": "-20"}

    assert calculate_net_earned(record) == pytest.approx(170)


def test_net_earned_adds_bonus_columns():
    record = {
        "trip_price": "$100.00",
        "excess_distance": "$12.50",
        "additional_usage": "",
        "late_fee": "$20.00",
        "early_bird_discount": "-$5.00",
        "host_promotional_credit": "-$5.00",
    }

    assert calculate_net_earned(record) == pytest.approx(100 + 32.5 - 10 - 10)


def test_operation_expense_adds_flat_charge_to_itemized_expenses():
    record = {"delivery": "$20.00", "cleaning": "-$15.00", "smoking": "", "improper_return_fee": "$5"}

    assert calculate_operation_expense(record) == pytest.approx(50)


def test_empty_record_only_carries_flat_charges():
    financials = derive_trip_financials({})

    assert financials.net_earned == pytest.approx(-10)
    assert financials.operation_expense == pytest.approx(10)
    assert financials.turo_fee == 0
    assert financials.gross_earned == pytest.approx(0)
    assert financials.total_discount == 0


@pytest.mark.parametrize("record", [
    {"trip_price": "$300.00", "delivery": "$20.00", "three_day_discount": "-$15.00"},
    {"trip_price": "1,250.75", "seven_day_discount": "-$100", "late_fee": "$45", "cleaning": "$30"},
    {"trip_price": "", "delivery": "junk", "excess_distance": "$8.10"},
    {"trip_price": "89.99", "ninety_day_discount": "-12.5", "smoking": "-150", "additional_usage": "3.3"},
])
def test_gross_earned_is_sum_of_net_fee_and_expense(record):
    financials = derive_trip_financials(record)

    assert financials.gross_earned == pytest.approx(
        financials.net_earned + financials.turo_fee + financials.operation_expense
    )


def test_derived_values_are_not_rounded():
    financials = derive_trip_financials({"trip_price": "100", "delivery": "10"})

    assert financials.turo_fee == 110 / 9
    assert financials.gross_earned == 90 + 110 / 9 + 20


def test_column_groups_can_be_injected():
    record = {"trip_price": "100", "custom_discount": "-30", "custom_bonus": "5", "three_day_discount": "-50"}

    net_earned = calculate_net_earned(
        record, discount_columns=("custom_discount",), bonus_columns=("custom_bonus",)
    )

    assert net_earned == pytest.approx(100 + 5 - 30 - 10)


def test_column_groups():
    assert len(DISCOUNT_COLUMNS) == 9
    assert "host_promotional_credit" in DISCOUNT_COLUMNS
    assert BONUS_COLUMNS == ("excess_distance", "additional_usage", "late_fee")
    assert OP_EXPENSE_COLUMNS == ("delivery", "smoking", "cleaning", "improper_return_fee")
