from pydantic import BaseModel, Field
from decimal import Decimal

class ProductBase(BaseModel):
    name: str = Field(..., min_length=1)
    default_price: Decimal = Field(..., ge=0)
    category: str

class ProductCreate(ProductBase):
    pass

class Product(ProductBase):
    id: int

    class Config:
        from_attributes = True
