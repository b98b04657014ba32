from sqlalchemy import Column, Integer, String, Numeric
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin

class Product(Base, TimestampMixin):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, unique=True)
    default_price = Column(Numeric(10, 2), nullable=False, default=0)
    category = Column(String, nullable=False) # e.g., "Roses", "Lilies", "Fillers"

    # Relationships
    stock_batches = relationship("StockBatch", back_populates="product")
