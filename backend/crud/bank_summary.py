"""
Bank summary: all-time totals over bank transactions, globally and per account.

Every figure is keyed on the explicit ``type``/``category`` columns. The stored
account balances are reported next to the replayed ones so drift is visible.
"""
import logging
from decimal import Decimal
from typing import Iterable

from sqlalchemy.orm import Session

from models import BankAccount, BankTransaction, CashAdjustment
from models.bank_accounts import BankTransactionCategory, BankTransactionType
from models.cash_adjustments import AdjustmentCategory, AdjustmentType
from schemas.financial_reports import BankAccountSummary, BankSummary, BankTotals
from utils import enum_code
from crud.daybook import ZERO, to_amount

logger = logging.getLogger("bank_summary")

_CATEGORY_FIELDS = {
    BankTransactionCategory.OPENING.value: "opening_in",
    BankTransactionCategory.UPI.value: "upi_in",
    BankTransactionCategory.SUPPLIER.value: "supplier_out",
    BankTransactionCategory.EXPENSE.value: "expenses_out",
}


def summarize_transactions(transactions: Iterable) -> BankTotals:
    totals = {field: ZERO for field in BankTotals.model_fields}
    for txn in transactions:
        amount = to_amount(txn.amount)
        if enum_code(txn.type) == BankTransactionType.IN.value:
            totals["total_in"] += amount
        else:
            totals["total_out"] += amount
        field = _CATEGORY_FIELDS.get(enum_code(txn.category))
        if field:
            totals[field] += amount
    totals["computed_balance"] = totals["total_in"] - totals["total_out"]
    return BankTotals(**totals)


def opening_cash_from_adjustments(cash_adjustments: Iterable) -> Decimal:
    return sum(
        (to_amount(a.amount) for a in cash_adjustments
         if enum_code(a.type) == AdjustmentType.ADD.value
         and enum_code(a.category) == AdjustmentCategory.OPENING.value),
        ZERO,
    )


def build_bank_summary(accounts: Iterable, transactions: Iterable, cash_adjustments: Iterable = ()) -> BankSummary:
    accounts = list(accounts)
    transactions = list(transactions)

    totals = summarize_transactions(transactions)
    opening_from_daybook = opening_cash_from_adjustments(cash_adjustments)

    per_account = []
    for account in accounts:
        account_totals = summarize_transactions(t for t in transactions if t.bank_account_id == account.id)
        account_balance = to_amount(account.balance)
        drift = account_balance - account_totals.computed_balance
        if drift != 0:
            logger.warning(f"Bank account {account.id} stored balance {account_balance} differs from replay by {drift}")
        per_account.append(BankAccountSummary(
            **account_totals.model_dump(),
            bank_account_id=account.id,
            name=account.name,
            account_number=getattr(account, "account_number", None),
            account_balance=account_balance,
            balance_drift=drift,
        ))

    return BankSummary(
        **totals.model_dump(),
        account_balances=sum((to_amount(a.balance) for a in accounts), ZERO),
        opening_from_daybook=opening_from_daybook,
        computed_balance_with_opening=totals.computed_balance + opening_from_daybook,
        per_account=per_account,
    )


def get_bank_summary(db: Session) -> BankSummary:
    return build_bank_summary(
        db.query(BankAccount).order_by(BankAccount.id).all(),
        db.query(BankTransaction).all(),
        db.query(CashAdjustment).all(),
    )
