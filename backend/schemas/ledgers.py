from pydantic import BaseModel
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

# Day Book (cash account)
class DaybookEntry(BaseModel):
    date: datetime
    description: str
    entry_type: str  # INCOME or EXPENSE
    category: str    # SALE, PURCHASE, EXPENSE, PAYMENT, ADJUSTMENT, BANK
    credit: Decimal = Decimal("0")
    debit: Decimal = Decimal("0")
    recorded_amount: Optional[Decimal] = None  # Display-only amount of record-only rows
    source_type: Optional[str] = None
    source_id: Optional[int] = None
    balance: Decimal

class Daybook(BaseModel):
    start_date: date
    end_date: date
    opening_balance: Decimal
    entries: List[DaybookEntry]
    closing_balance: Decimal
    skipped_records: int = 0

# Subsidiary Ledgers - Customer / Supplier statements
class PartyStatementEntry(BaseModel):
    date: datetime
    reference: str
    description: str
    increase: Decimal = Decimal("0")  # Adds to what is owed
    decrease: Decimal = Decimal("0")  # Settles what is owed
    balance: Decimal

class PartyStatement(BaseModel):
    party_type: str  # customer or supplier
    party_id: int
    party_name: str
    as_of: Optional[date] = None
    opening_balance: Decimal
    entries: List[PartyStatementEntry]
    closing_balance: Decimal

class BalanceDrift(BaseModel):
    party_type: str
    party_id: int
    party_name: str
    stored_balance: Decimal
    derived_balance: Decimal
    difference: Decimal

class BalanceReconciliation(BaseModel):
    checked: int
    drifts: List[BalanceDrift]
    fixed: bool = False
