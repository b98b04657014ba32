from pydantic import BaseModel
from datetime import date
from decimal import Decimal
from typing import List, Optional

class ProfitAndLoss(BaseModel):
    start_date: date
    end_date: date
    revenue: Decimal
    total_purchases: Decimal
    total_expenses: Decimal
    damage_loss: Decimal
    net_profit: Decimal

class BankTotals(BaseModel):
    opening_in: Decimal = Decimal("0")
    upi_in: Decimal = Decimal("0")
    total_in: Decimal = Decimal("0")
    total_out: Decimal = Decimal("0")
    supplier_out: Decimal = Decimal("0")
    expenses_out: Decimal = Decimal("0")
    computed_balance: Decimal = Decimal("0")

class BankAccountSummary(BankTotals):
    bank_account_id: int
    name: str
    account_number: Optional[str] = None
    account_balance: Decimal
    balance_drift: Decimal

class BankSummary(BankTotals):
    account_balances: Decimal
    opening_from_daybook: Decimal
    computed_balance_with_opening: Decimal
    per_account: List[BankAccountSummary]
