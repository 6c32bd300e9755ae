from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from expense_tracker.auth import RequestContext, get_request_context
from expense_tracker.config import DEFAULT_CHART_DAYS
from expense_tracker.crud import crud_expense
from expense_tracker.db.core import ExpenseDB, NotFoundError, get_db
from expense_tracker.models.expense import (
    ExpenseCreate,
    ExpenseUpdate,
    ExpenseFilter,
    ExpenseOrderField,
    ExpenseResponse,
    ExpenseListResponse,
    ExpenseTotalResponse,
)
from expense_tracker.models.report import CategorySummaryRow, DailyBucket
from expense_tracker.services import aggregation, dashboard

router = APIRouter(
    prefix="/expenses",
    tags=["expenses"],
)


def get_owned_expense(db: Session, expense_id: int, ctx: RequestContext) -> ExpenseDB:
    """404 when the expense is missing, 403 when someone else owns it"""
    db_expense = crud_expense.read_db_expense(db, expense_id)
    if db_expense is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Expense not found")
    if db_expense.user_id != ctx.user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Unauthorized access")
    return db_expense


@router.post("/", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
def create_expense(
    expense: ExpenseCreate,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    try:
        db_expense = crud_expense.create_db_expense(db, ctx.user_id, expense)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return db_expense


@router.get("/", response_model=ExpenseListResponse)
def read_expenses(
    category_id: Optional[int] = None,
    start_date: Optional[str] = Query(None, description="Earliest expense date (YYYY-MM-DD)"),
    end_date: Optional[str] = Query(None, description="Latest expense date (YYYY-MM-DD)"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    order_by: ExpenseOrderField = ExpenseOrderField.EXPENSE_DATE,
    order_desc: bool = True,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    """
    List the user's expenses, newest first by default.
    """
    try:
        date_from, date_to = aggregation.resolve_optional_date_range(start_date, end_date)
    except aggregation.InvalidInput as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    filters = ExpenseFilter(category_id=category_id, date_from=date_from, date_to=date_to)
    expenses = crud_expense.read_db_expenses(
        db, ctx.user_id, filters=filters, skip=skip, limit=limit, order_by=order_by, order_desc=order_desc
    )
    return ExpenseListResponse(
        count=len(expenses),
        total_count=crud_expense.count_db_expenses(db, ctx.user_id, filters=filters),
        expenses=[ExpenseResponse.model_validate(e) for e in expenses],
    )


@router.get("/recent", response_model=List[ExpenseResponse])
def read_recent_expenses(
    limit: int = Query(5, ge=1, le=50),
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    return crud_expense.read_recent_expenses(db, ctx.user_id, limit=limit)


@router.get("/total", response_model=ExpenseTotalResponse)
def read_expense_total(ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db)):
    return ExpenseTotalResponse(total=crud_expense.get_total_by_user(db, ctx.user_id))


@router.get("/summary/category", response_model=List[CategorySummaryRow])
def read_category_summary(
    start_date: Optional[str] = Query(None, description="Start date (YYYY-MM-DD)"),
    end_date: Optional[str] = Query(None, description="End date (YYYY-MM-DD)"),
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    """
    Totals per category, largest first. Without dates, covers every expense.
    """
    try:
        date_from, date_to = aggregation.resolve_optional_date_range(start_date, end_date)
        return dashboard.build_category_summary(db, ctx, date_from, date_to)
    except aggregation.InvalidInput as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


@router.get("/summary/daily", response_model=List[DailyBucket])
def read_daily_summary(
    start_date: Optional[str] = Query(None, description="Start date (YYYY-MM-DD)"),
    end_date: Optional[str] = Query(None, description="End date (YYYY-MM-DD)"),
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    """
    Days with spending in the range, newest first.
    """
    try:
        date_from, date_to = aggregation.resolve_date_range(start_date, end_date, default_days=DEFAULT_CHART_DAYS)
        return dashboard.build_daily_summary(db, ctx, date_from, date_to)
    except aggregation.InvalidInput as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


@router.get("/{expense_id}", response_model=ExpenseResponse)
def read_expense(expense_id: int, ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db)):
    return get_owned_expense(db, expense_id, ctx)


@router.put("/{expense_id}", response_model=ExpenseResponse)
def update_expense(
    expense_id: int,
    expense: ExpenseUpdate,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    get_owned_expense(db, expense_id, ctx)
    try:
        db_expense = crud_expense.update_db_expense(db, expense_id=expense_id, user_id=ctx.user_id, expense_updates=expense)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Expense not found") from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return db_expense


@router.delete("/{expense_id}", response_model=ExpenseResponse)
def delete_expense(expense_id: int, ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db)):
    db_expense = get_owned_expense(db, expense_id, ctx)
    deleted = ExpenseResponse.model_validate(db_expense)
    try:
        crud_expense.delete_db_expense(db, expense_id=expense_id, user_id=ctx.user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Expense not found") from e
    return deleted
