from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime, date
from decimal import Decimal
from enum import Enum


# ===== EXPENSE PYDANTIC MODELS =====

class ExpenseOrderField(str, Enum):
    EXPENSE_DATE = "expense_date"
    AMOUNT = "amount"
    DESCRIPTION = "description"
    CREATED_AT = "created_at"


class ExpenseCreate(BaseModel):
    description: str = Field(..., min_length=1, max_length=255, description="What the money was spent on")
    amount: Decimal = Field(..., gt=0, description="Expense amount, positive")
    category_id: Optional[int] = Field(None, description="The ID of the expense's category")
    expense_date: date = Field(..., description="Calendar date of the expense")

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v: Decimal) -> Decimal:
        v = round(v, 2)
        if v <= 0:
            raise ValueError('Amount must be a positive number')
        return v

    @field_validator('description')
    @classmethod
    def validate_description(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError('Description is required')
        return v


class ExpenseUpdate(BaseModel):
    """Update expense - all fields optional"""
    description: Optional[str] = Field(None, min_length=1, max_length=255)
    amount: Optional[Decimal] = Field(None, gt=0)
    category_id: Optional[int] = None
    expense_date: Optional[date] = None

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is None:
            return v
        v = round(v, 2)
        if v <= 0:
            raise ValueError('Amount must be a positive number')
        return v

    @field_validator('description')
    @classmethod
    def validate_description(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError('Description cannot be blank')
        return v


class ExpenseFilter(BaseModel):
    category_id: Optional[int] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None


class ExpenseRecord(BaseModel):
    """Read model handed from the record store to the aggregation engine"""
    id: int
    user_id: int
    description: str
    amount: Decimal
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    expense_date: date
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ExpenseResponse(BaseModel):
    """Expense data returned to client"""
    id: int
    description: str
    amount: Decimal
    category_id: Optional[int]
    category_name: Optional[str]
    expense_date: date
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ExpenseListResponse(BaseModel):
    count: int
    total_count: int
    expenses: List[ExpenseResponse]


class ExpenseTotalResponse(BaseModel):
    total: Decimal
