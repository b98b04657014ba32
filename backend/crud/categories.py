"""
Category rules for bank transactions and cash adjustments.

Aggregations read the explicit ``category`` column only. The description
heuristics below run once, when a record is created without a category (or when
legacy rows are back-filled), so free-text matching never leaks into reports.
"""
from typing import Optional

from models.bank_accounts import BankTransactionCategory, BankTransactionType
from models.cash_adjustments import AdjustmentCategory, AdjustmentType
from utils import enum_code


def infer_bank_category(description: Optional[str], txn_type) -> BankTransactionCategory:
    desc = (description or "").lower()
    if "opening" in desc:
        return BankTransactionCategory.OPENING
    if "upi" in desc:
        return BankTransactionCategory.UPI
    if "supplier" in desc:
        return BankTransactionCategory.SUPPLIER
    if enum_code(txn_type) == BankTransactionType.OUT.value:
        return BankTransactionCategory.EXPENSE
    return BankTransactionCategory.OTHER


def infer_adjustment_category(description: Optional[str], adjustment_type) -> AdjustmentCategory:
    if enum_code(adjustment_type) == AdjustmentType.ADD.value and "opening" in (description or "").lower():
        return AdjustmentCategory.OPENING
    return AdjustmentCategory.OTHER
