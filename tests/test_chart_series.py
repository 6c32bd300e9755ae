from datetime import date
from decimal import Decimal

from expense_tracker.models.report import CategorySummaryRow, DailyBucket, MonthlyTotals
from expense_tracker.services import chart_series


def test_daily_series_labels_and_annotations():
    buckets = [
        DailyBucket(date=date(2024, 1, 1), total=Decimal("15.00"), categories=["Food", "Shopping"]),
        DailyBucket(date=date(2024, 1, 2)),
    ]
    series = chart_series.daily_series(buckets)

    assert series.labels == ["Jan 01", "Jan 02"]
    assert series.values == [Decimal("15.00"), Decimal("0.00")]
    assert series.annotations == ["Food, Shopping", ""]


def test_monthly_series_has_twelve_named_months():
    totals = [Decimal("0.00")] * 12
    totals[2] = Decimal("42.50")
    series = chart_series.monthly_series(MonthlyTotals(year=2024, totals=totals))

    assert len(series.labels) == 12
    assert series.labels[0] == "January"
    assert series.labels[11] == "December"
    assert series.values[2] == Decimal("42.50")
    assert series.annotations is None


def test_category_series_labels_uncategorized():
    rows = [
        CategorySummaryRow(category_name="Food", total=Decimal("12.00")),
        CategorySummaryRow(category_name=None, total=Decimal("3.00")),
    ]
    series = chart_series.category_series(rows)

    assert series.labels == ["Food", "Uncategorized"]
    assert series.values == [Decimal("12.00"), Decimal("3.00")]


def test_values_serialize_as_json_numbers():
    series = chart_series.daily_series([DailyBucket(date=date(2024, 1, 1), total=Decimal("10.25"))])
    assert series.model_dump(mode="json")["values"] == [10.25]


def test_line_chart_data():
    series = chart_series.daily_series([DailyBucket(date=date(2024, 1, 1), total=Decimal("1.00"), categories=["Food"])])
    data = chart_series.line_chart_data(series, label="Daily Expenses", tension=0.4)

    assert data.labels == ["Jan 01"]
    assert data.categories == ["Food"]
    [dataset] = data.datasets
    assert dataset.label == "Daily Expenses"
    assert dataset.tension == 0.4
    assert dataset.backgroundColor == chart_series.LINE_BACKGROUND


def test_pie_chart_colors_cycle_through_palette():
    rows = [CategorySummaryRow(category_name=f"Category {i}", total=Decimal(10 - i)) for i in range(8)]
    data = chart_series.pie_chart_data(chart_series.category_series(rows))

    colors = data.datasets[0].backgroundColor
    assert len(colors) == 8
    assert colors[6] == colors[0]
    assert data.categories is None
