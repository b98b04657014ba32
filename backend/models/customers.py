from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from database import Base
import enum
from models.audit_mixin import TimestampMixin, shop_now

class CustomerPaymentMethod(enum.Enum):
    CASH = "CASH"
    UPI = "UPI"
    CARD = "CARD"
    BANK = "BANK"
    CHEQUE = "CHEQUE"

class Customer(Base, TimestampMixin):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    # Balance carried over when the customer was registered
    opening_balance = Column(Numeric(10, 2), nullable=False, default=0)
    # Running counter: amount the customer owes the shop
    outstanding_balance = Column(Numeric(10, 2), nullable=False, default=0)

    # Relationships
    sales = relationship("Sale", back_populates="customer")
    payments = relationship("CustomerPayment", back_populates="customer")

class CustomerPayment(Base, TimestampMixin):
    __tablename__ = "customer_payments"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    payment_date = Column(DateTime(timezone=True), nullable=False, default=shop_now)
    payment_method = Column(Enum(CustomerPaymentMethod), nullable=False, default=CustomerPaymentMethod.CASH)
    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id"), nullable=True)

    # Relationships
    customer = relationship("Customer", back_populates="payments")
