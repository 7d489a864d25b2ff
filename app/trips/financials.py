# app/trips/financials.py

"""
Money fields derived for each imported trip.

All amounts are plain floats. Nothing is rounded here; rounding to cents
happens when trips are presented.
"""

from typing import Any, Mapping, Sequence

from app.trips.schemas import TripFinancials
from app.trips.utils import calculate_column_sum, to_number

DISCOUNT_COLUMNS: Sequence[str] = (
    "three_day_discount",
    "seven_day_discount",
    "fourteen_day_discount",
    "twentyone_day_discount",
    "thirty_day_discount",
    "sixty_day_discount",
    "ninety_day_discount",
    "early_bird_discount",
    "host_promotional_credit",
)

BONUS_COLUMNS: Sequence[str] = (
    "excess_distance",
    "additional_usage",
    "late_fee",
)

OP_EXPENSE_COLUMNS: Sequence[str] = (
    "delivery",
    "smoking",
    "cleaning",
    "improper_return_fee",
)

# Flat per-trip charge, applied regardless of trip length
SERVICE_CHARGE = 10.0
# Platform fee is approximated as one ninth of the discounted trip value
TURO_FEE_DIVISOR = 9


def calculate_net_earned(
    record: Mapping[str, Any],
    discount_columns: Sequence[str] = DISCOUNT_COLUMNS,
    bonus_columns: Sequence[str] = BONUS_COLUMNS,
) -> float:
    """trip price + excess distance + additional usage + late fee - discounts - service charge"""
    total_discount = calculate_column_sum(record, discount_columns)
    total_bonus = calculate_column_sum(record, bonus_columns)
    return to_number(record.get("trip_price")) + total_bonus - total_discount - SERVICE_CHARGE


def calculate_operation_expense(
    record: Mapping[str, Any],
    op_expense_columns: Sequence[str] = OP_EXPENSE_COLUMNS,
) -> float:
    """delivery + smoking + cleaning + improper return fee + service charge"""
    return calculate_column_sum(record, op_expense_columns) + SERVICE_CHARGE


def calculate_turo_fee(
    record: Mapping[str, Any],
    discount_columns: Sequence[str] = DISCOUNT_COLUMNS,
) -> float:
    """(trip price + delivery fee - discounts) / 9"""
    total_discount = calculate_column_sum(record, discount_columns)
    total = to_number(record.get("trip_price")) + to_number(record.get("delivery")) - total_discount
    return total / TURO_FEE_DIVISOR


def derive_trip_financials(
    record: Mapping[str, Any],
    discount_columns: Sequence[str] = DISCOUNT_COLUMNS,
    bonus_columns: Sequence[str] = BONUS_COLUMNS,
    op_expense_columns: Sequence[str] = OP_EXPENSE_COLUMNS,
) -> TripFinancials:
    """
    Derive every money field of a trip from a raw export record.

    Gross earned is not taken from the export: it is the sum of what the
    owner keeps, what the platform takes and what operating the trip cost.
    """
    turo_fee = calculate_turo_fee(record, discount_columns)
    operation_expense = calculate_operation_expense(record, op_expense_columns)
    net_earned = calculate_net_earned(record, discount_columns, bonus_columns)

    return TripFinancials(
        total_discount=calculate_column_sum(record, discount_columns),
        net_earned=net_earned,
        turo_fee=turo_fee,
        operation_expense=operation_expense,
        gross_earned=net_earned + turo_fee + operation_expense,
    )
