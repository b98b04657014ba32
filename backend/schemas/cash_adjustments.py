from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal
from models.cash_adjustments import AdjustmentType, AdjustmentCategory

class CashAdjustmentCreate(BaseModel):
    amount: Decimal = Field(..., gt=0)
    type: AdjustmentType
    category: Optional[AdjustmentCategory] = None # Inferred from the description when omitted
    adjustment_date: Optional[datetime] = None
    description: Optional[str] = None

class CashAdjustment(BaseModel):
    id: int
    amount: Decimal
    type: AdjustmentType
    category: AdjustmentCategory
    adjustment_date: datetime
    description: Optional[str] = None
    created_by: Optional[str] = None

    class Config:
        from_attributes = True
