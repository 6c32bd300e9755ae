from datetime import date
from decimal import Decimal

import pytest

from expense_tracker.models.expense import ExpenseRecord
from expense_tracker.services import aggregation
from expense_tracker.services.aggregation import InvalidDateRange, InvalidInput


def make_record(record_id, day, amount, category=None):
    return ExpenseRecord(
        id=record_id,
        user_id=1,
        description=f"expense {record_id}",
        amount=Decimal(amount),
        category_name=category,
        expense_date=day,
    )


# ===== BUCKETS =====

def test_one_bucket_per_day_in_order():
    buckets = aggregation.date_range_buckets(date(2024, 1, 1), date(2024, 1, 31))
    assert len(buckets) == 31
    assert list(buckets) == sorted(buckets)
    assert all(bucket.total == Decimal("0") for bucket in buckets.values())


def test_single_day_range():
    buckets = aggregation.date_range_buckets(date(2024, 2, 29), date(2024, 2, 29))
    assert list(buckets) == [date(2024, 2, 29)]


def test_range_crosses_year_boundary():
    buckets = aggregation.date_range_buckets(date(2023, 12, 30), date(2024, 1, 2))
    assert list(buckets) == [date(2023, 12, 30), date(2023, 12, 31), date(2024, 1, 1), date(2024, 1, 2)]


def test_start_after_end_is_rejected():
    with pytest.raises(InvalidDateRange):
        aggregation.date_range_buckets(date(2024, 1, 5), date(2024, 1, 1))


def test_daily_buckets_example():
    records = [
        make_record(1, date(2024, 1, 1), "10.00", "Food"),
        make_record(2, date(2024, 1, 1), "5.00", "Food"),
        make_record(3, date(2024, 1, 3), "20.00", "Transport"),
    ]
    buckets = aggregation.daily_buckets(date(2024, 1, 1), date(2024, 1, 3), records)

    assert [(b.date, b.total, b.categories) for b in buckets] == [
        (date(2024, 1, 1), Decimal("15.00"), ["Food"]),
        (date(2024, 1, 2), Decimal("0.00"), []),
        (date(2024, 1, 3), Decimal("20.00"), ["Transport"]),
    ]


def test_merge_skips_out_of_range_records_and_keeps_bucket_count():
    buckets = aggregation.date_range_buckets(date(2024, 3, 1), date(2024, 3, 3))
    records = [
        make_record(1, date(2024, 2, 29), "99.99", "Food"),
        make_record(2, date(2024, 3, 2), "1.25", "Food"),
        make_record(3, date(2024, 3, 4), "50.00", "Food"),
    ]
    aggregation.merge_records(buckets, records)

    assert len(buckets) == 3
    assert sum(b.total for b in buckets.values()) == Decimal("1.25")


def test_bucket_totals_are_exact():
    records = [make_record(i, date(2024, 5, 1 + i % 3), "0.10", "Food") for i in range(30)]
    buckets = aggregation.daily_buckets(date(2024, 5, 1), date(2024, 5, 3), records)

    assert sum(b.total for b in buckets) == Decimal("3.00")
    assert [b.total for b in buckets] == [Decimal("1.00")] * 3


def test_bucket_categories_are_unique_and_skip_uncategorized():
    records = [
        make_record(1, date(2024, 1, 1), "1.00", "Food"),
        make_record(2, date(2024, 1, 1), "1.00", None),
        make_record(3, date(2024, 1, 1), "1.00", "Shopping"),
        make_record(4, date(2024, 1, 1), "1.00", "Food"),
    ]
    [bucket] = aggregation.daily_buckets(date(2024, 1, 1), date(2024, 1, 1), records)

    assert bucket.categories == ["Food", "Shopping"]
    assert bucket.total == Decimal("4.00")


# ===== ROLLUPS =====

def test_monthly_rollup_empty_year():
    monthly = aggregation.monthly_rollup(2024, [])
    assert monthly.totals == [Decimal("0")] * 12


def test_monthly_rollup_sums_and_ignores_other_years():
    records = [
        make_record(1, date(2024, 1, 15), "10.10"),
        make_record(2, date(2024, 1, 31), "0.20"),
        make_record(3, date(2024, 12, 1), "7.00"),
        make_record(4, date(2023, 12, 31), "500.00"),
    ]
    monthly = aggregation.monthly_rollup(2024, records)

    assert monthly.totals[0] == Decimal("10.30")
    assert monthly.totals[11] == Decimal("7.00")
    assert sum(monthly.totals) == Decimal("17.30")


def test_category_rollup_orders_by_total():
    records = [
        make_record(1, date(2024, 1, 1), "5.00", "Food"),
        make_record(2, date(2024, 1, 2), "30.00", "Housing"),
        make_record(3, date(2024, 1, 3), "6.00", "Food"),
        make_record(4, date(2024, 1, 4), "2.50", None),
        make_record(5, date(2024, 1, 5), "1.50", None),
    ]
    rows = aggregation.category_rollup(records)

    assert [(row.category_name, row.total) for row in rows] == [
        ("Housing", Decimal("30.00")),
        ("Food", Decimal("11.00")),
        (None, Decimal("4.00")),
    ]
    assert sum(row.total for row in rows) == aggregation.sum_amounts(records)


def test_category_rollup_ties_keep_first_seen_order():
    records = [
        make_record(1, date(2024, 1, 1), "5.00", "Shopping"),
        make_record(2, date(2024, 1, 1), "5.00", "Education"),
    ]
    rows = aggregation.category_rollup(records)
    assert [row.category_name for row in rows] == ["Shopping", "Education"]


def test_category_rollup_empty():
    assert aggregation.category_rollup([]) == []


# ===== INPUT PARSING =====

@pytest.mark.parametrize("value", ["2024-13-01", "2024-02-30", "yesterday", "2024-1-5", "", "01/05/2024"])
def test_parse_calendar_date_rejects_malformed(value):
    with pytest.raises(InvalidDateRange):
        aggregation.parse_calendar_date(value)


def test_parse_calendar_date_accepts_leap_day():
    assert aggregation.parse_calendar_date("2024-02-29") == date(2024, 2, 29)


def test_resolve_date_range_defaults():
    today = date(2024, 3, 31)
    assert aggregation.resolve_date_range(None, None, today=today) == (date(2024, 3, 1), today)
    assert aggregation.resolve_date_range(None, "2024-01-31", today=today, default_days=7) == (
        date(2024, 1, 24),
        date(2024, 1, 31),
    )


def test_resolve_date_range_rejects_reversed_range():
    with pytest.raises(InvalidDateRange):
        aggregation.resolve_date_range("2024-02-01", "2024-01-01")


def test_resolve_optional_date_range_leaves_bounds_open():
    assert aggregation.resolve_optional_date_range(None, None) == (None, None)
    assert aggregation.resolve_optional_date_range("2024-01-01", None) == (date(2024, 1, 1), None)


def test_parse_year():
    assert aggregation.parse_year(None, today=date(2025, 6, 1)) == 2025
    assert aggregation.parse_year("2024") == 2024
    with pytest.raises(InvalidInput):
        aggregation.parse_year("twenty")
    with pytest.raises(InvalidInput):
        aggregation.parse_year("0")


def test_buckets_end_on_last_representable_day():
    buckets = aggregation.date_range_buckets(date(9999, 12, 30), date(9999, 12, 31))
    assert list(buckets) == [date(9999, 12, 30), date(9999, 12, 31)]

    single = aggregation.date_range_buckets(date.max, date.max)
    assert list(single) == [date.max]


def test_parse_calendar_date_accepts_years_before_1000():
    assert aggregation.parse_calendar_date("0999-12-31") == date(999, 12, 31)
    assert aggregation.parse_calendar_date("0001-01-01") == date.min


@pytest.mark.parametrize("value", ["20240105", "0000-01-01", "2024-01-05T00:00", "2024-01-05\n1"])
def test_parse_calendar_date_rejects_non_dashed_forms(value):
    with pytest.raises(InvalidDateRange):
        aggregation.parse_calendar_date(value)


def test_resolve_date_range_default_start_clamps_to_first_day():
    assert aggregation.resolve_date_range(None, "0001-01-05") == (date.min, date(1, 1, 5))
