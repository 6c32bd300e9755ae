from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from expense_tracker.auth import RequestContext, get_request_context
from expense_tracker.config import DEFAULT_CHART_DAYS
from expense_tracker.db.core import get_db
from expense_tracker.models.report import ChartResponse, ChartSeries, CategorySummaryRow, DashboardStatistics
from expense_tracker.services import aggregation, chart_series, dashboard
from expense_tracker.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(
    prefix="/dashboard",
    tags=["dashboard"],
)


def _bad_request(e: aggregation.InvalidInput) -> HTTPException:
    logger.info(f"Rejected report input: {e}")
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


# ===== CHART.JS ENDPOINTS =====

@router.get("/daily-chart-data", response_model=ChartResponse, response_model_exclude_none=True)
def get_daily_chart_data(
    start_date: Optional[str] = Query(None, description="Start date (YYYY-MM-DD), default 30 days before end"),
    end_date: Optional[str] = Query(None, description="End date (YYYY-MM-DD), default today"),
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    try:
        start, end = aggregation.resolve_date_range(start_date, end_date, default_days=DEFAULT_CHART_DAYS)
        series = dashboard.build_daily_series(db, ctx, start, end)
    except aggregation.InvalidInput as e:
        raise _bad_request(e) from e
    return ChartResponse(
        message="Daily chart data retrieved successfully",
        chart_data=chart_series.line_chart_data(series, label="Daily Expenses", tension=0.4),
    )


@router.get("/monthly-chart-data", response_model=ChartResponse, response_model_exclude_none=True)
def get_monthly_chart_data(
    year: Optional[str] = Query(None, description="Calendar year, default current year"),
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    try:
        series = dashboard.build_monthly_series(db, ctx, aggregation.parse_year(year))
    except aggregation.InvalidInput as e:
        raise _bad_request(e) from e
    chart_data = chart_series.line_chart_data(series, label="Monthly Expenses")
    return ChartResponse(message="Monthly chart data retrieved successfully", chart_data=chart_data)


@router.get("/category-chart-data", response_model=ChartResponse, response_model_exclude_none=True)
def get_category_chart_data(ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db)):
    rows = dashboard.build_category_summary(db, ctx)
    return ChartResponse(
        message="Category chart data retrieved successfully",
        chart_data=chart_series.pie_chart_data(chart_series.category_series(rows)),
    )


@router.get("/statistics", response_model=DashboardStatistics)
def get_statistics(ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db)):
    return dashboard.build_statistics(db, ctx)


# ===== PLAIN SERIES =====

@router.get("/series/daily", response_model=ChartSeries)
def get_daily_series(
    start_date: Optional[str] = Query(None, description="Start date (YYYY-MM-DD)"),
    end_date: Optional[str] = Query(None, description="End date (YYYY-MM-DD)"),
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    try:
        start, end = aggregation.resolve_date_range(start_date, end_date, default_days=DEFAULT_CHART_DAYS)
        return dashboard.build_daily_series(db, ctx, start, end)
    except aggregation.InvalidInput as e:
        raise _bad_request(e) from e


@router.get("/series/monthly", response_model=ChartSeries, response_model_exclude_none=True)
def get_monthly_series(
    year: Optional[str] = Query(None, description="Calendar year, default current year"),
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    try:
        return dashboard.build_monthly_series(db, ctx, aggregation.parse_year(year))
    except aggregation.InvalidInput as e:
        raise _bad_request(e) from e


@router.get("/series/categories", response_model=List[CategorySummaryRow])
def get_category_series(ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db)):
    return dashboard.build_category_summary(db, ctx)
