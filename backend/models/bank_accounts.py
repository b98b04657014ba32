from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from database import Base
import enum
from models.audit_mixin import TimestampMixin, AuditMixin, shop_now

class BankTransactionType(enum.Enum):
    IN = "IN"
    OUT = "OUT"

class BankTransactionCategory(enum.Enum):
    OPENING = "OPENING"
    UPI = "UPI"
    SUPPLIER = "SUPPLIER"
    EXPENSE = "EXPENSE"
    OTHER = "OTHER"

class BankAccount(Base, TimestampMixin):
    __tablename__ = "bank_accounts"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False) # e.g., "HDFC Current", "Bank of India - UPI"
    account_number = Column(String, nullable=True)
    ifsc = Column(String, nullable=True)
    # Running counter, moved together with every transaction row
    balance = Column(Numeric(10, 2), nullable=False, default=0)

    # Relationships
    transactions = relationship("BankTransaction", back_populates="bank_account")

class BankTransaction(Base, AuditMixin):
    __tablename__ = "bank_transactions"

    id = Column(Integer, primary_key=True, index=True)
    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id"), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    type = Column(Enum(BankTransactionType), nullable=False)
    category = Column(Enum(BankTransactionCategory), nullable=False, default=BankTransactionCategory.OTHER)
    transaction_date = Column(DateTime(timezone=True), nullable=False, default=shop_now)
    description = Column(Text, nullable=True)
    # Record that spawned this transaction, e.g. ("sales", 12)
    source_type = Column(String, nullable=True)
    source_id = Column(Integer, nullable=True)

    # Relationships
    bank_account = relationship("BankAccount", back_populates="transactions")
