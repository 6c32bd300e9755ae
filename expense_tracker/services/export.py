import csv
import io
from typing import Iterable, List

from expense_tracker.models.expense import ExpenseRecord


EXPORT_FILENAME = "expenses.csv"
EXPORT_HEADER = ["Description", "Category", "Amount", "Date", "Created At"]

# Byte-order mark so spreadsheet apps detect UTF-8
UTF8_BOM = "\ufeff"


def export_row(record: ExpenseRecord) -> List[str]:
    return [
        record.description,
        record.category_name or "",
        f"{record.amount:.2f}",
        record.expense_date.isoformat(),
        record.created_at.strftime("%Y-%m-%d %H:%M:%S") if record.created_at else "",
    ]


def render_csv(records: Iterable[ExpenseRecord]) -> str:
    """Render expense records as CSV text with a header row"""
    buffer = io.StringIO(newline="")
    buffer.write(UTF8_BOM)
    writer = csv.writer(buffer)
    writer.writerow(EXPORT_HEADER)
    for record in records:
        writer.writerow(export_row(record))
    return buffer.getvalue()
