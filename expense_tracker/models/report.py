from pydantic import BaseModel, Field, PlainSerializer
from typing import Optional, List, Union
from typing_extensions import Annotated
import datetime as dt
from decimal import Decimal


ZERO = Decimal("0.00")

# Summed in Decimal, emitted to the dashboard as plain JSON numbers
ChartAmount = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


# ===== AGGREGATION RESULTS =====

class DailyBucket(BaseModel):
    """Running total and category labels for one calendar day"""
    date: dt.date
    total: ChartAmount = ZERO
    categories: List[str] = Field(default_factory=list)

    def add(self, amount: Decimal, category_name: Optional[str]) -> None:
        self.total += amount
        if category_name and category_name not in self.categories:
            self.categories.append(category_name)


class MonthlyTotals(BaseModel):
    year: int
    totals: List[ChartAmount] = Field(default_factory=lambda: [ZERO] * 12)


class CategorySummaryRow(BaseModel):
    category_name: Optional[str]
    total: ChartAmount


# ===== CHART PAYLOADS =====

class ChartSeries(BaseModel):
    labels: List[str]
    values: List[ChartAmount]
    annotations: Optional[List[str]] = None


class ChartDataset(BaseModel):
    label: Optional[str] = None
    data: List[ChartAmount]
    backgroundColor: Union[str, List[str]]
    borderColor: Optional[str] = None
    borderWidth: int = 1
    tension: Optional[float] = None


class ChartData(BaseModel):
    labels: List[str]
    datasets: List[ChartDataset]
    categories: Optional[List[str]] = None


class ChartResponse(BaseModel):
    status: str = "success"
    message: str
    chart_data: ChartData


class DashboardStatistics(BaseModel):
    total_expenses: ChartAmount
    month_expenses: ChartAmount
    week_expenses: ChartAmount
    today_expenses: ChartAmount
    expense_count: int
