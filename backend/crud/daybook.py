"""
Day Book: the shop's chronological cash ledger for a date window.

The ledger is recomputed on every request from the full record collections. It
is a pure fold, so ``build_daybook`` can be exercised without a database, and
``get_daybook`` only loads the collections and hands them over.
"""
import logging
import re
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from models import Sale, Expense, SupplierPayment, CashAdjustment, BankTransaction, StockBatch
from models.bank_accounts import BankTransactionCategory, BankTransactionType
from models.cash_adjustments import AdjustmentType
from schemas.ledgers import Daybook, DaybookEntry
from utils import enum_code
from utils.dates import DateLike, InvalidRecordDate, parse_business_datetime, to_business_date

logger = logging.getLogger("daybook")

ZERO = Decimal("0")
_WHITESPACE = re.compile(r"\s+")


def to_amount(value) -> Decimal:
    if value is None:
        return ZERO
    return value if isinstance(value, Decimal) else Decimal(str(value))


def normalize_description(description: Optional[str]) -> str:
    return _WHITESPACE.sub(" ", description or "").strip().lower()


def entry_key(entry: dict) -> str:
    """Identity of an economic event: two rows with the same key describe it twice."""
    return "|".join([
        entry["date"].date().isoformat(),
        entry["category"].upper(),
        f"{entry['credit']:.2f}",
        f"{entry['debit']:.2f}",
        normalize_description(entry["description"]),
    ])


def _entry(instant, description, category, credit=ZERO, debit=ZERO, source_type=None, source_id=None, **extra):
    return {
        "date": instant,
        "description": description,
        "entry_type": "INCOME" if credit > 0 else "EXPENSE",
        "category": category,
        "credit": credit,
        "debit": debit,
        "source_type": source_type,
        "source_id": source_id,
        **extra,
    }


class _Ledger:
    """Routes records to the opening balance or to the window's entries."""

    def __init__(self, start: date, end: date):
        self.start = start
        self.end = end
        self.opening_balance = ZERO
        self.entries: List[dict] = []
        self.skipped = 0

    def locate(self, record, date_attr: str, label: str):
        """Return (instant, position) where position is 'before', 'within' or 'after'."""
        try:
            instant = parse_business_datetime(getattr(record, date_attr, None))
        except InvalidRecordDate as e:
            self.skipped += 1
            logger.warning(f"Quarantined {label} {getattr(record, 'id', '?')} from the day book: {e}")
            return None, None
        day = instant.date()
        if day < self.start:
            return instant, "before"
        if day <= self.end:
            return instant, "within"
        return instant, "after"


def _add_sales(ledger: _Ledger, sales: Iterable):
    for sale in sales:
        instant, position = ledger.locate(sale, "sale_date", "sale")
        paid = to_amount(sale.amount_paid)
        if position == "before":
            ledger.opening_balance += paid
        elif position == "within" and paid > 0:
            customer = getattr(sale, "customer_name", None) or "Walk-in"
            ledger.entries.append(_entry(
                instant, f"Sale #{sale.id} ({customer})", "SALE", credit=paid,
                source_type="sales", source_id=sale.id,
            ))


def _add_purchases(ledger: _Ledger, stock_batches: Iterable):
    # One row per purchase bill; item-wise batches of the same invoice collapse together
    groups = {}
    for batch in stock_batches:
        instant, position = ledger.locate(batch, "purchase_date", "stock batch")
        if position != "within":
            continue
        invoice_no = (getattr(batch, "invoice_no", None) or "").strip()
        key = f"INV::{invoice_no}" if invoice_no else f"BATCH::{batch.id}"
        quantity = to_amount(batch.original_quantity or batch.quantity)
        group = groups.setdefault(key, {
            "date": instant,
            "invoice_no": invoice_no,
            "supplier_name": getattr(batch, "supplier_name", None),
            "source_id": batch.id,
            "total": ZERO,
            "items": ZERO,
        })
        group["total"] += quantity * to_amount(batch.purchase_price)
        group["items"] += quantity

    for group in groups.values():
        supplier = group["supplier_name"] or "Supplier"
        items = group["items"].normalize()
        if group["invoice_no"]:
            description = f"Purchase Invoice: {group['invoice_no']} ({items:f} items) from {supplier}"
        else:
            description = f"Purchase: {supplier} ({items:f} items)"
        # Record-only row: shown for reference, never moves the running balance
        entry = _entry(
            group["date"], description, "PURCHASE",
            source_type="stock_batches", source_id=group["source_id"],
            recorded_amount=group["total"],
        )
        entry["entry_type"] = "EXPENSE"
        ledger.entries.append(entry)


def _add_expenses(ledger: _Ledger, expenses: Iterable):
    for expense in expenses:
        instant, position = ledger.locate(expense, "expense_date", "expense")
        amount = to_amount(expense.amount)
        if position == "before":
            ledger.opening_balance -= amount
        elif position == "within":
            description = f"Exp: {expense.category} - {getattr(expense, 'description', None) or ''}"
            ledger.entries.append(_entry(
                instant, description, "EXPENSE", debit=amount,
                source_type="expenses", source_id=expense.id,
            ))


def _add_supplier_payments(ledger: _Ledger, supplier_payments: Iterable):
    for payment in supplier_payments:
        if getattr(payment, "hide_from_daybook", False):
            continue
        instant, position = ledger.locate(payment, "payment_date", "supplier payment")
        amount = to_amount(payment.amount)
        if position == "before":
            ledger.opening_balance -= amount
        elif position == "within":
            ledger.entries.append(_entry(
                instant, f"Supplier Pay: {getattr(payment, 'note', None) or 'Payment'}", "PAYMENT", debit=amount,
                source_type="supplier_payments", source_id=payment.id,
            ))


def _add_cash_adjustments(ledger: _Ledger, cash_adjustments: Iterable):
    for adjustment in cash_adjustments:
        instant, position = ledger.locate(adjustment, "adjustment_date", "cash adjustment")
        amount = to_amount(adjustment.amount)
        is_add = enum_code(adjustment.type) == AdjustmentType.ADD.value
        if position == "before":
            ledger.opening_balance += amount if is_add else -amount
        elif position == "within":
            description = f"{getattr(adjustment, 'description', None) or 'Cash adjustment'} (Admin: {getattr(adjustment, 'created_by', None) or 'unknown'})"
            ledger.entries.append(_entry(
                instant, description, "ADJUSTMENT",
                credit=amount if is_add else ZERO,
                debit=ZERO if is_add else amount,
                source_type="cash_adjustments", source_id=adjustment.id,
            ))


def _add_bank_transactions(ledger: _Ledger, bank_transactions: Iterable):
    for txn in bank_transactions:
        instant, position = ledger.locate(txn, "transaction_date", "bank transaction")
        amount = to_amount(txn.amount)
        is_in = enum_code(txn.type) == BankTransactionType.IN.value
        if position == "before":
            ledger.opening_balance += amount if is_in else -amount
        elif position == "within":
            # Supplier bank payments already appear as supplier payment rows
            if enum_code(txn.category) == BankTransactionCategory.SUPPLIER.value:
                continue
            ledger.entries.append(_entry(
                instant, f"{getattr(txn, 'description', None) or 'Bank Txn'} (Bank)", "BANK",
                credit=amount if is_in else ZERO,
                debit=ZERO if is_in else amount,
                source_type="bank_transactions", source_id=txn.id,
            ))


def deduplicate_entries(entries: List[dict]) -> List[dict]:
    seen = set()
    unique = []
    for entry in entries:
        key = entry_key(entry)
        if key in seen:
            logger.debug(f"Dropping duplicate day book row {key}")
            continue
        seen.add(key)
        unique.append(entry)
    return unique


def build_daybook(
    start_date: DateLike,
    end_date: DateLike,
    sales: Iterable = (),
    expenses: Iterable = (),
    supplier_payments: Iterable = (),
    cash_adjustments: Iterable = (),
    bank_transactions: Iterable = (),
    stock_batches: Iterable = (),
) -> Daybook:
    """
    Compute the Day Book for ``[start_date, end_date]`` (both inclusive).

    Records dated before the window fold into the opening balance; records in the
    window become rows, which are de-duplicated, sorted by time and given a running
    balance. Purchases are listed with zero credit and debit.

    Raises:
        ValueError: if the window is inverted or its bounds are not dates.
    """
    start = to_business_date(start_date)
    end = to_business_date(end_date)
    if start > end:
        raise ValueError(f"start_date {start} is after end_date {end}")

    ledger = _Ledger(start, end)
    _add_sales(ledger, sales)
    _add_purchases(ledger, stock_batches)
    _add_expenses(ledger, expenses)
    _add_supplier_payments(ledger, supplier_payments)
    _add_cash_adjustments(ledger, cash_adjustments)
    _add_bank_transactions(ledger, bank_transactions)

    entries = deduplicate_entries(ledger.entries)
    entries.sort(key=lambda e: e["date"])

    balance = ledger.opening_balance
    rows = []
    for entry in entries:
        balance = balance + entry["credit"] - entry["debit"]
        rows.append(DaybookEntry(**entry, balance=balance))

    return Daybook(
        start_date=start,
        end_date=end,
        opening_balance=ledger.opening_balance,
        entries=rows,
        closing_balance=balance,
        skipped_records=ledger.skipped,
    )


def get_daybook(db: Session, start_date: date, end_date: date) -> Daybook:
    return build_daybook(
        start_date,
        end_date,
        sales=db.query(Sale).all(),
        expenses=db.query(Expense).all(),
        supplier_payments=db.query(SupplierPayment).all(),
        cash_adjustments=db.query(CashAdjustment).all(),
        bank_transactions=db.query(BankTransaction).all(),
        stock_batches=db.query(StockBatch).all(),
    )
