from sqlalchemy import Column, Integer, String, Text, DateTime, Numeric, ForeignKey
from database import Base
from models.audit_mixin import TimestampMixin, shop_now

class Expense(Base, TimestampMixin):
    __tablename__ = 'expenses'

    id = Column(Integer, primary_key=True, index=True)
    category = Column(String, nullable=False) # e.g., "SHOP_EXPENSE", "TRANSPORT", "SALARY"
    amount = Column(Numeric(10, 2), nullable=False)
    description = Column(Text, nullable=True)
    expense_date = Column(DateTime(timezone=True), nullable=False, default=shop_now)
    payment_mode = Column(String, nullable=True) # "CASH" or "BANK"
    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id"), nullable=True)
