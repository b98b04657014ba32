from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin, shop_now

class Supplier(Base, TimestampMixin):
    __tablename__ = "suppliers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    contact = Column(String, nullable=True)
    opening_balance = Column(Numeric(10, 2), nullable=False, default=0)
    # Running counter: amount the shop owes the supplier
    outstanding_balance = Column(Numeric(10, 2), nullable=False, default=0)

    # Relationships
    stock_batches = relationship("StockBatch", back_populates="supplier")
    payments = relationship("SupplierPayment", back_populates="supplier")

class SupplierPayment(Base, TimestampMixin):
    __tablename__ = "supplier_payments"

    id = Column(Integer, primary_key=True, index=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    payment_date = Column(DateTime(timezone=True), nullable=False, default=shop_now)
    note = Column(Text, nullable=True)
    payment_mode = Column(String, nullable=True) # e.g., "CASH", "BANK", "UPI"
    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id"), nullable=True)
    hide_from_daybook = Column(Boolean, nullable=False, default=False)

    # Relationships
    supplier = relationship("Supplier", back_populates="payments")
