from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from models.stock_batches import PurchasePaymentStatus, StockStatus

class StockBatchCreate(BaseModel):
    product_id: int
    quantity: Decimal = Field(..., gt=0)
    purchase_price: Decimal = Field(..., ge=0)
    selling_price: Decimal = Field(..., ge=0)
    purchase_date: Optional[datetime] = None
    supplier_id: Optional[int] = None
    payment_status: PurchasePaymentStatus = PurchasePaymentStatus.PAID
    invoice_no: Optional[str] = None

class StockPriceUpdate(BaseModel):
    selling_price: Decimal = Field(..., ge=0)

class StockBatch(BaseModel):
    id: int
    product_id: int
    product_name: str
    quantity: Decimal
    original_quantity: Decimal
    purchase_price: Decimal
    selling_price: Decimal
    purchase_date: datetime
    supplier_id: Optional[int] = None
    supplier_name: Optional[str] = None
    payment_status: PurchasePaymentStatus
    invoice_no: Optional[str] = None

    class Config:
        from_attributes = True

class StockBatchWithStatus(StockBatch):
    status: StockStatus

class ComputedStock(BaseModel):
    new_stock: List[StockBatchWithStatus] = []
    old_stock: List[StockBatchWithStatus] = []
    damaged_stock: List[StockBatchWithStatus] = []
