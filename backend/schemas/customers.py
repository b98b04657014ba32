from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal
from models.customers import CustomerPaymentMethod

class CustomerCreate(BaseModel):
    name: str = Field(..., min_length=1)
    phone: Optional[str] = None
    opening_balance: Decimal = Field(Decimal("0"), ge=0)

class Customer(BaseModel):
    id: int
    name: str
    phone: Optional[str] = None
    opening_balance: Decimal
    outstanding_balance: Decimal

    class Config:
        from_attributes = True

class CustomerPaymentCreate(BaseModel):
    customer_id: int
    amount: Decimal = Field(..., gt=0)
    payment_date: Optional[datetime] = None
    payment_method: CustomerPaymentMethod = CustomerPaymentMethod.CASH
    bank_account_id: Optional[int] = None

class CustomerPayment(BaseModel):
    id: int
    customer_id: int
    amount: Decimal
    payment_date: datetime
    payment_method: CustomerPaymentMethod
    bank_account_id: Optional[int] = None
    created_by: Optional[str] = None

    class Config:
        from_attributes = True
