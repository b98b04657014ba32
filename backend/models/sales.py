from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from database import Base
import enum
from models.audit_mixin import AuditMixin, shop_now
from models.stock_batches import StockStatus

class PaymentMode(enum.Enum):
    CASH = "CASH"
    UPI = "UPI"
    BANK = "BANK"
    CREDIT = "CREDIT"

class Sale(Base, AuditMixin):
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)
    sale_date = Column(DateTime(timezone=True), nullable=False, default=shop_now)
    sub_total = Column(Numeric(10, 2), nullable=False, default=0)
    discount = Column(Numeric(10, 2), nullable=False, default=0)
    total_amount = Column(Numeric(10, 2), nullable=False, default=0)
    amount_paid = Column(Numeric(10, 2), nullable=False, default=0)
    change_returned = Column(Numeric(10, 2), nullable=False, default=0)
    payment_mode = Column(Enum(PaymentMode), nullable=False, default=PaymentMode.CASH)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=True)
    customer_name = Column(String, nullable=True)
    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id"), nullable=True)

    # Relationships
    customer = relationship("Customer", back_populates="sales")
    items = relationship("SaleItem", back_populates="sale", cascade="all, delete-orphan")

class SaleItem(Base):
    __tablename__ = "sale_items"

    id = Column(Integer, primary_key=True, index=True)
    sale_id = Column(Integer, ForeignKey("sales.id"), nullable=False)
    stock_batch_id = Column(Integer, ForeignKey("stock_batches.id"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    product_name = Column(String, nullable=False)
    quantity = Column(Numeric(10, 3), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    status = Column(Enum(StockStatus), nullable=False, default=StockStatus.NEW) # Batch status when sold

    # Relationships
    sale = relationship("Sale", back_populates="items")
    stock_batch = relationship("StockBatch")
