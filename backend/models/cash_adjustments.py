from sqlalchemy import Column, Integer, Text, Numeric, DateTime, Enum
from database import Base
import enum
from models.audit_mixin import TimestampMixin, shop_now

class AdjustmentType(enum.Enum):
    ADD = "ADD"
    REMOVE = "REMOVE"

class AdjustmentCategory(enum.Enum):
    OPENING = "OPENING"
    OTHER = "OTHER"

class CashAdjustment(Base, TimestampMixin):
    __tablename__ = "cash_adjustments"

    id = Column(Integer, primary_key=True, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    type = Column(Enum(AdjustmentType), nullable=False)
    category = Column(Enum(AdjustmentCategory), nullable=False, default=AdjustmentCategory.OTHER)
    adjustment_date = Column(DateTime(timezone=True), nullable=False, default=shop_now)
    description = Column(Text, nullable=True)
