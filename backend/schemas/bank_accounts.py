from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal
from models.bank_accounts import BankTransactionType, BankTransactionCategory

class BankAccountCreate(BaseModel):
    name: str = Field(..., min_length=1)
    account_number: Optional[str] = None
    ifsc: Optional[str] = None
    opening_balance: Decimal = Field(Decimal("0"), ge=0)

class BankAccountUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    account_number: Optional[str] = None
    ifsc: Optional[str] = None

class BankAccount(BaseModel):
    id: int
    name: str
    account_number: Optional[str] = None
    ifsc: Optional[str] = None
    balance: Decimal

    class Config:
        from_attributes = True

class BankTransactionCreate(BaseModel):
    bank_account_id: int
    amount: Decimal = Field(..., gt=0)
    type: BankTransactionType
    category: Optional[BankTransactionCategory] = None # Inferred from the description when omitted
    transaction_date: Optional[datetime] = None
    description: Optional[str] = None

class BankTransaction(BaseModel):
    id: int
    bank_account_id: int
    amount: Decimal
    type: BankTransactionType
    category: BankTransactionCategory
    transaction_date: datetime
    description: Optional[str] = None
    source_type: Optional[str] = None
    source_id: Optional[int] = None
    created_by: Optional[str] = None

    class Config:
        from_attributes = True
