"""
Chart-series formatting for the dashboard.

Turns aggregation results into ``{labels, values, annotations}`` series, and
series into the Chart.js payloads the browser dashboard renders.
"""
from typing import Iterable, List, Optional

from expense_tracker.models.report import (
    DailyBucket,
    MonthlyTotals,
    CategorySummaryRow,
    ChartSeries,
    ChartDataset,
    ChartData,
)


DAILY_LABEL_FORMAT = "%b %d"
UNCATEGORIZED_LABEL = "Uncategorized"
MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

LINE_BACKGROUND = "rgba(54, 162, 235, 0.2)"
LINE_BORDER = "rgba(54, 162, 235, 1)"
PIE_PALETTE = (
    "rgba(255, 99, 132, 0.6)",
    "rgba(54, 162, 235, 0.6)",
    "rgba(255, 206, 86, 0.6)",
    "rgba(75, 192, 192, 0.6)",
    "rgba(153, 102, 255, 0.6)",
    "rgba(255, 159, 64, 0.6)",
)


# ===== SERIES =====

def daily_series(buckets: Iterable[DailyBucket]) -> ChartSeries:
    labels: List[str] = []
    values = []
    annotations: List[str] = []
    for bucket in buckets:
        labels.append(bucket.date.strftime(DAILY_LABEL_FORMAT))
        values.append(bucket.total)
        annotations.append(", ".join(bucket.categories))
    return ChartSeries(labels=labels, values=values, annotations=annotations)


def monthly_series(monthly: MonthlyTotals) -> ChartSeries:
    return ChartSeries(labels=list(MONTH_NAMES), values=list(monthly.totals))


def category_series(rows: Iterable[CategorySummaryRow]) -> ChartSeries:
    rows = list(rows)
    return ChartSeries(
        labels=[row.category_name or UNCATEGORIZED_LABEL for row in rows],
        values=[row.total for row in rows],
    )


# ===== CHART.JS PAYLOADS =====

def line_chart_data(series: ChartSeries, label: str, tension: Optional[float] = None) -> ChartData:
    dataset = ChartDataset(
        label=label,
        data=series.values,
        backgroundColor=LINE_BACKGROUND,
        borderColor=LINE_BORDER,
        borderWidth=1,
        tension=tension,
    )
    return ChartData(labels=series.labels, datasets=[dataset], categories=series.annotations)


def pie_chart_data(series: ChartSeries) -> ChartData:
    colors = [PIE_PALETTE[i % len(PIE_PALETTE)] for i in range(len(series.labels))]
    dataset = ChartDataset(data=series.values, backgroundColor=colors, borderWidth=1)
    return ChartData(labels=series.labels, datasets=[dataset])
