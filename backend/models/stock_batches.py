from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from database import Base
import enum
from models.audit_mixin import TimestampMixin, shop_now

class PurchasePaymentStatus(enum.Enum):
    PAID = "PAID"
    CREDIT = "CREDIT"

class StockStatus(enum.Enum):
    NEW = "NEW"
    OLD = "OLD"
    DAMAGED = "DAMAGED"

class StockBatch(Base, TimestampMixin):
    __tablename__ = "stock_batches"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    product_name = Column(String, nullable=False) # Snapshot of product name at purchase time
    quantity = Column(Numeric(10, 3), nullable=False) # Remaining quantity
    original_quantity = Column(Numeric(10, 3), nullable=False)
    purchase_price = Column(Numeric(10, 2), nullable=False) # Cost per unit
    selling_price = Column(Numeric(10, 2), nullable=False)
    purchase_date = Column(DateTime(timezone=True), nullable=False, default=shop_now)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), nullable=True)
    supplier_name = Column(String, nullable=True)
    payment_status = Column(Enum(PurchasePaymentStatus), default=PurchasePaymentStatus.PAID, nullable=False)
    invoice_no = Column(String, nullable=True, index=True) # Groups item-wise batches of one purchase bill

    # Relationships
    product = relationship("Product", back_populates="stock_batches")
    supplier = relationship("Supplier", back_populates="stock_batches")
