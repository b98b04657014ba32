from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal

class SupplierCreate(BaseModel):
    name: str = Field(..., min_length=1)
    contact: Optional[str] = None
    opening_balance: Decimal = Field(Decimal("0"), ge=0)

class Supplier(BaseModel):
    id: int
    name: str
    contact: Optional[str] = None
    opening_balance: Decimal
    outstanding_balance: Decimal

    class Config:
        from_attributes = True

class SupplierPaymentCreate(BaseModel):
    supplier_id: int
    amount: Decimal = Field(..., gt=0)
    payment_date: Optional[datetime] = None
    note: Optional[str] = None
    payment_mode: Optional[str] = "CASH"
    bank_account_id: Optional[int] = None
    hide_from_daybook: bool = False

class SupplierPayment(BaseModel):
    id: int
    supplier_id: int
    amount: Decimal
    payment_date: datetime
    note: Optional[str] = None
    payment_mode: Optional[str] = None
    bank_account_id: Optional[int] = None
    hide_from_daybook: bool
    created_by: Optional[str] = None

    class Config:
        from_attributes = True
