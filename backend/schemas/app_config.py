from pydantic import BaseModel
from typing import Optional

class AppConfigBase(BaseModel):
    name: str
    value: str

class AppConfigUpdate(BaseModel):
    value: Optional[str] = None

class AppConfigOut(AppConfigBase):
    id: int

    class Config:
        from_attributes = True

class StockAgeConfig(BaseModel):
    stock_old_after_days: int = 1
    stock_damaged_after_days: int = 2
