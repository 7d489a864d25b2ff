# app/trips/utils.py

"""
Utility functions for the trips module

This module provides CSV parsing and value normalization for the
car-sharing platform's trip export.
"""

import io
import math
import re
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple, Union

import pandas as pd
from dateutil import parser as date_parser

from app.trips.exceptions import TripCSVParseException
from app.utils.logger import get_logger

logger = get_logger(__name__)

Number = Union[int, float]

RESERVATION_ID_COLUMN = "reservation_id"
TRIP_STATUS_COLUMN = "trip_status"
COMPLETED_STATUS = "Completed"

# Everything that cannot be part of a number: "$1,234.50" -> "1234.50"
NON_NUMERIC_PATTERN = re.compile(r"[^0-9e.-]+")


def to_number(value: Union[str, Number, None]) -> Number:
    """
    Convert a currency-like value from the export to a number.

    Args:
        value: Text such as "$12.34" or "-$5.00", a number, or None

    Returns:
        The number itself for numeric input, the parsed value of the
        digits, "e", "." and "-" left in the text, or 0 when nothing
        numeric remains.
    """
    if value is None:
        return 0
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value

    cleaned = NON_NUMERIC_PATTERN.sub("", str(value))
    try:
        return float(cleaned)
    except ValueError:
        return 0


def calculate_column_sum(record: Mapping[str, Any], columns: Iterable[str]) -> float:
    """
    Sum of the magnitudes of the given columns of a record.

    Discounts and fees are exported as negative amounts, so the absolute
    value of every column is added. Missing, blank and NaN values count as 0.
    """
    total = 0.0
    for column in columns:
        value = to_number(record.get(column))
        if math.isnan(value):
            continue
        total += abs(value)
    return total


def to_int(value: Union[str, Number, None]) -> int:
    """Whole-number column such as trip_days; unparseable values give 0"""
    number = to_number(value)
    if math.isnan(number) or math.isinf(number):
        return 0
    return int(number)


def parse_trip_datetime(value: Optional[str]) -> datetime:
    """
    Parse a trip start/end timestamp from the export.

    Raises:
        ValueError: If the value is blank or not a recognizable date
    """
    if value is None or not str(value).strip():
        raise ValueError("Missing trip timestamp")
    return date_parser.parse(str(value))


def select_new_records(
    records: Iterable[Mapping[str, Any]], stored_trip_ids: Set[str]
) -> Tuple[List[Mapping[str, Any]], int, int]:
    """
    Keep completed trips that are not stored yet.

    A reservation id repeated inside the same export is kept once, first
    row wins.

    Returns:
        Tuple of (new records, duplicates dropped, non-completed rows dropped)
    """
    new_records = []
    seen_trip_ids: Set[str] = set()
    duplicate_count = 0
    skipped_count = 0

    for record in records:
        if record.get(TRIP_STATUS_COLUMN) != COMPLETED_STATUS:
            skipped_count += 1
            continue

        trip_id = record.get(RESERVATION_ID_COLUMN)
        if trip_id in stored_trip_ids:
            duplicate_count += 1
            continue
        if trip_id in seen_trip_ids:
            duplicate_count += 1
            logger.warning("Reservation repeated within upload, keeping first row", trip_id=trip_id)
            continue

        seen_trip_ids.add(trip_id)
        new_records.append(record)

    return new_records, duplicate_count, skipped_count


def parse_trips_csv(csv_content: str) -> List[Dict[str, Any]]:
    """
    Parse the platform's CSV export into one dict per row.

    The header row names the columns and every row must have exactly as
    many fields as the header. Every value is kept as text. Blank lines
    are skipped.

    Args:
        csv_content: Raw CSV text

    Returns:
        List of row dictionaries; empty for an empty payload

    Raises:
        TripCSVParseException: If the CSV is malformed or a row's field
            count differs from the header's
    """
    if not csv_content or not csv_content.strip():
        logger.warning("Empty CSV content provided to parse_trips_csv")
        return []

    try:
        # Header is read as a plain row so its width bounds every other row;
        # longer rows fail in the tokenizer instead of shifting columns
        df = pd.read_csv(
            io.StringIO(csv_content.lstrip("\ufeff")),
            header=None,
            index_col=False,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, ValueError) as e:
        logger.error("Failed to parse trips CSV", error=str(e))
        raise TripCSVParseException(str(e)) from e

    # Shorter rows are padded with NaN; empty cells stay ""
    short_rows = df.index[df.isna().any(axis=1)]
    if len(short_rows):
        message = f"record {short_rows[0]} has fewer fields than the header"
        logger.error("Failed to parse trips CSV", error=message)
        raise TripCSVParseException(message)

    columns = list(df.iloc[0])
    records = [
        dict(zip(columns, row))
        for row in df.iloc[1:].itertuples(index=False, name=None)
    ]
    logger.info("Parsed trips CSV", rows=len(records), columns=len(columns))
    return records
