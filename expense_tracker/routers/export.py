from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from expense_tracker.auth import RequestContext, get_request_context
from expense_tracker.crud import crud_expense
from expense_tracker.db.core import get_db
from expense_tracker.services.export import EXPORT_FILENAME, render_csv
from expense_tracker.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(
    prefix="/export",
    tags=["export"],
)


@router.get("/csv")
def export_expenses_csv(ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db)) -> Response:
    """
    Download every expense of the logged-in user as a CSV attachment.
    """
    logger.info(f"Starting CSV export for user {ctx.user_id}")
    records = crud_expense.get_all_records(db, ctx.user_id)
    content = render_csv(records)
    logger.info(f"CSV export completed for user {ctx.user_id} ({len(records)} rows)")
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )
