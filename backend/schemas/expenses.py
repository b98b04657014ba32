from pydantic import BaseModel, Field
from datetime import datetime
from decimal import Decimal
from typing import Optional

class ExpenseBase(BaseModel):
    category: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)
    description: Optional[str] = None
    expense_date: Optional[datetime] = None
    payment_mode: Optional[str] = None
    bank_account_id: Optional[int] = None

class ExpenseCreate(ExpenseBase):
    pass

class Expense(ExpenseBase):
    id: int
    expense_date: datetime
    created_by: Optional[str] = None

    class Config:
        from_attributes = True
