"""
Reporting Service

Fetches a user's records from the record store and runs them through the
aggregation engine and chart formatter. Every call receives the request
context explicitly; results are computed fresh on each request.
"""
from sqlalchemy.orm import Session
from datetime import date, timedelta
from typing import List, Optional

from expense_tracker.auth import RequestContext
from expense_tracker.crud import crud_expense
from expense_tracker.models.report import ChartSeries, CategorySummaryRow, DailyBucket, DashboardStatistics
from expense_tracker.services import aggregation, chart_series


def build_daily_buckets(db: Session, ctx: RequestContext, start_date: date, end_date: date) -> List[DailyBucket]:
    aggregation.validate_date_range(start_date, end_date)
    records = crud_expense.get_records_by_date_range(db, ctx.user_id, start_date, end_date)
    return aggregation.daily_buckets(start_date, end_date, records)


def build_daily_series(db: Session, ctx: RequestContext, start_date: date, end_date: date) -> ChartSeries:
    """Totals for every day in the range, zero days included, with category tooltips"""
    return chart_series.daily_series(build_daily_buckets(db, ctx, start_date, end_date))


def build_monthly_series(db: Session, ctx: RequestContext, year: int) -> ChartSeries:
    records = crud_expense.get_records_by_year(db, ctx.user_id, year)
    return chart_series.monthly_series(aggregation.monthly_rollup(year, records))


def build_category_summary(db: Session, ctx: RequestContext, start_date: Optional[date] = None,
                           end_date: Optional[date] = None) -> List[CategorySummaryRow]:
    """Per-category totals, largest first; unbounded unless a range is given"""
    if start_date is None and end_date is None:
        records = crud_expense.get_all_records(db, ctx.user_id)
    else:
        start_date = start_date or date.min
        end_date = end_date or date.max
        aggregation.validate_date_range(start_date, end_date)
        records = crud_expense.get_records_by_date_range(db, ctx.user_id, start_date, end_date)
    return aggregation.category_rollup(records)


def build_daily_summary(db: Session, ctx: RequestContext, start_date: date, end_date: date) -> List[DailyBucket]:
    """Only the days that have expenses, newest first"""
    buckets = build_daily_buckets(db, ctx, start_date, end_date)
    return [bucket for bucket in reversed(buckets) if bucket.total]


def build_statistics(db: Session, ctx: RequestContext, today: Optional[date] = None) -> DashboardStatistics:
    today = today or date.today()
    month_start = today.replace(day=1)
    week_start = today - timedelta(days=today.weekday())
    week_end = week_start + timedelta(days=6)

    return DashboardStatistics(
        total_expenses=crud_expense.get_total_by_user(db, ctx.user_id),
        month_expenses=crud_expense.get_total_by_user(db, ctx.user_id, date_from=month_start, date_to=today),
        week_expenses=crud_expense.get_total_by_user(db, ctx.user_id, date_from=week_start, date_to=week_end),
        today_expenses=crud_expense.get_total_by_user(db, ctx.user_id, date_from=today, date_to=today),
        expense_count=crud_expense.count_db_expenses(db, ctx.user_id),
    )
