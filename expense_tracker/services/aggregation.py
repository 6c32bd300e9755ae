"""
Expense aggregation engine.

Pure functions that turn a user's expense records into daily buckets,
monthly totals and per-category totals. Nothing here touches the database;
callers fetch records from the record store and pass them in.

All sums are carried in ``Decimal`` so totals match the stored amounts
to the cent.
"""
import re
from collections import OrderedDict
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple, Union

from expense_tracker.models.expense import ExpenseRecord
from expense_tracker.models.report import ZERO, DailyBucket, MonthlyTotals, CategorySummaryRow


DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
MIN_YEAR = 1
MAX_YEAR = 9999


class InvalidInput(ValueError):
    """Raised when a value from the request boundary cannot be parsed."""


class InvalidDateRange(InvalidInput):
    """Raised for unparsable dates or a range whose start is after its end."""


# ===== INPUT PARSING =====

def parse_calendar_date(value: Union[str, date], field: str = "date") -> date:
    """
    Parse a strict YYYY-MM-DD string (or pass through a date).

    Raises:
        InvalidDateRange: if the value is not a real calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidDateRange(f"Invalid {field}: expected YYYY-MM-DD")
    text = value.strip()
    # fromisoformat alone also accepts 20240105 on newer Pythons
    if not DATE_PATTERN.match(text):
        raise InvalidDateRange(f"Invalid {field} '{value}': expected YYYY-MM-DD")
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise InvalidDateRange(f"Invalid {field} '{value}': expected YYYY-MM-DD")


def validate_date_range(start_date: date, end_date: date) -> None:
    if start_date > end_date:
        raise InvalidDateRange(
            f"start_date {start_date.isoformat()} is after end_date {end_date.isoformat()}"
        )


def resolve_date_range(start: Optional[Union[str, date]], end: Optional[Union[str, date]],
                       today: Optional[date] = None, default_days: int = 30) -> Tuple[date, date]:
    """
    Parse an optional start/end pair from a request.

    A missing end defaults to today, a missing start to ``default_days``
    before the end.
    """
    today = today or date.today()
    end_date = parse_calendar_date(end, "end_date") if end else today
    if start:
        start_date = parse_calendar_date(start, "start_date")
    elif (end_date - date.min).days < default_days:
        start_date = date.min
    else:
        start_date = end_date - timedelta(days=default_days)
    validate_date_range(start_date, end_date)
    return start_date, end_date


def resolve_optional_date_range(start: Optional[Union[str, date]],
                                end: Optional[Union[str, date]]) -> Tuple[Optional[date], Optional[date]]:
    """Parse a range where either bound may be left open."""
    start_date = parse_calendar_date(start, "start_date") if start else None
    end_date = parse_calendar_date(end, "end_date") if end else None
    if start_date and end_date:
        validate_date_range(start_date, end_date)
    return start_date, end_date


def parse_year(value: Optional[Union[str, int]], today: Optional[date] = None) -> int:
    if value is None or value == "":
        return (today or date.today()).year
    try:
        year = int(str(value).strip())
    except ValueError:
        raise InvalidInput(f"Invalid year '{value}'")
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise InvalidInput(f"Year {year} is out of range")
    return year


def year_bounds(year: int) -> Tuple[date, date]:
    return date(year, 1, 1), date(year, 12, 31)


# ===== BUCKETS =====

def date_range_buckets(start_date: date, end_date: date) -> "OrderedDict[date, DailyBucket]":
    """
    One empty bucket per calendar day in [start_date, end_date], in order.

    Raises:
        InvalidDateRange: if start_date is after end_date
    """
    validate_date_range(start_date, end_date)
    buckets: "OrderedDict[date, DailyBucket]" = OrderedDict()
    # stepping one day past date.max overflows
    for offset in range((end_date - start_date).days + 1):
        day = start_date + timedelta(days=offset)
        buckets[day] = DailyBucket(date=day)
    return buckets


def merge_records(buckets: Dict[date, DailyBucket], records: Iterable[ExpenseRecord]) -> Dict[date, DailyBucket]:
    """
    Add each record to the bucket for its date.

    Records dated outside the buckets are skipped. The mapping is updated
    in place and returned.
    """
    for record in records:
        bucket = buckets.get(record.expense_date)
        if bucket is None:
            continue
        bucket.add(record.amount, record.category_name)
    return buckets


def daily_buckets(start_date: date, end_date: date, records: Iterable[ExpenseRecord]) -> List[DailyBucket]:
    return list(merge_records(date_range_buckets(start_date, end_date), records).values())


# ===== ROLLUPS =====

def monthly_rollup(year: int, records: Iterable[ExpenseRecord]) -> MonthlyTotals:
    """Twelve totals, index 0 = January; records from other years are ignored."""
    totals = [ZERO] * 12
    for record in records:
        if record.expense_date.year != year:
            continue
        totals[record.expense_date.month - 1] += record.amount
    return MonthlyTotals(year=year, totals=totals)


def category_rollup(records: Iterable[ExpenseRecord]) -> List[CategorySummaryRow]:
    """
    Sum amounts per category name, largest total first.

    Records without a category are grouped under ``None``. Equal totals keep
    the order in which their category was first seen.
    """
    totals: "OrderedDict[Optional[str], Decimal]" = OrderedDict()
    for record in records:
        totals[record.category_name] = totals.get(record.category_name, ZERO) + record.amount

    ordered = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [CategorySummaryRow(category_name=name, total=total) for name, total in ordered]


def sum_amounts(records: Iterable[ExpenseRecord]) -> Decimal:
    return sum((record.amount for record in records), ZERO)
