from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from models.sales import PaymentMode
from models.stock_batches import StockStatus

class SaleItemCreate(BaseModel):
    stock_batch_id: int
    quantity: Decimal = Field(..., gt=0)
    price: Optional[Decimal] = Field(None, ge=0) # Defaults to the batch selling price

class SaleCreate(BaseModel):
    items: List[SaleItemCreate]
    discount: Decimal = Field(Decimal("0"), ge=0)
    payment_mode: PaymentMode = PaymentMode.CASH
    # Cash tendered for CASH, initial payment for CREDIT; ignored for UPI/BANK
    amount_tendered: Decimal = Field(Decimal("0"), ge=0)
    customer_id: Optional[int] = None
    customer_name: Optional[str] = None
    bank_account_id: Optional[int] = None
    sale_date: Optional[datetime] = None

class SaleItem(BaseModel):
    id: int
    stock_batch_id: int
    product_id: int
    product_name: str
    quantity: Decimal
    price: Decimal
    status: StockStatus

    class Config:
        from_attributes = True

class Sale(BaseModel):
    id: int
    sale_date: datetime
    sub_total: Decimal
    discount: Decimal
    total_amount: Decimal
    amount_paid: Decimal
    change_returned: Decimal
    payment_mode: PaymentMode
    customer_id: Optional[int] = None
    customer_name: Optional[str] = None
    bank_account_id: Optional[int] = None
    created_by: Optional[str] = None
    items: List[SaleItem] = []

    class Config:
        from_attributes = True
