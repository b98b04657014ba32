"""
Balance tracker for customer receivables and supplier payables.

The ``outstanding_balance`` columns are running counters moved by atomic
``UPDATE ... SET x = x + :delta`` statements in the same transaction as the
record that causes them. Statements replay the underlying records, so the
counter can always be checked against history by ``reconcile_balances``.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from crud.audit_log import create_audit_log
from crud.bank_summary import summarize_transactions
from crud.daybook import ZERO, to_amount
from models import (
    BankAccount, BankTransaction, Customer, CustomerPayment, Sale, StockBatch, Supplier, SupplierPayment,
)
from models.sales import PaymentMode
from models.stock_batches import PurchasePaymentStatus
from schemas.audit_log import AuditLogCreate
from schemas.ledgers import BalanceDrift, BalanceReconciliation, PartyStatement, PartyStatementEntry
from utils import enum_code
from utils.dates import DateLike, InvalidRecordDate, parse_business_datetime, to_business_date

logger = logging.getLogger("balances")


def increment_counter(db: Session, column, record_id: int, delta: Decimal) -> None:
    """Atomically add ``delta`` to ``column`` of one row, e.g. ``Customer.outstanding_balance``."""
    model = column.class_
    updated = db.query(model).filter(model.id == record_id).update(
        {column: column + delta}, synchronize_session="fetch"
    )
    if not updated:
        raise ValueError(f"{model.__tablename__} {record_id} does not exist")


def increment_customer_balance(db: Session, customer_id: int, delta: Decimal) -> None:
    increment_counter(db, Customer.outstanding_balance, customer_id, delta)


def increment_supplier_balance(db: Session, supplier_id: int, delta: Decimal) -> None:
    increment_counter(db, Supplier.outstanding_balance, supplier_id, delta)


def sale_debt(sale) -> Decimal:
    """Unpaid remainder a credit sale adds to its customer's balance."""
    if enum_code(sale.payment_mode) != PaymentMode.CREDIT.value or not sale.customer_id:
        return ZERO
    debt = to_amount(sale.total_amount) - to_amount(sale.amount_paid)
    return debt if debt > 0 else ZERO


def purchase_credit(batch) -> Decimal:
    """Amount a stock batch bought on credit adds to its supplier's balance."""
    if enum_code(batch.payment_status) != PurchasePaymentStatus.CREDIT.value or not batch.supplier_id:
        return ZERO
    return to_amount(batch.original_quantity) * to_amount(batch.purchase_price)


def apply_sale(db: Session, sale: Sale) -> Decimal:
    debt = sale_debt(sale)
    if debt:
        increment_customer_balance(db, sale.customer_id, debt)
        logger.info(f"Customer {sale.customer_id} balance +{debt} for sale {sale.id}")
    return debt


def reverse_sale(db: Session, sale: Sale) -> Decimal:
    debt = sale_debt(sale)
    if debt:
        increment_customer_balance(db, sale.customer_id, -debt)
        logger.info(f"Customer {sale.customer_id} balance -{debt} reversing sale {sale.id}")
    return debt


def apply_customer_payment(db: Session, payment: CustomerPayment) -> None:
    increment_customer_balance(db, payment.customer_id, -to_amount(payment.amount))


def apply_stock_purchase(db: Session, batch: StockBatch) -> Decimal:
    credit = purchase_credit(batch)
    if credit:
        increment_supplier_balance(db, batch.supplier_id, credit)
        logger.info(f"Supplier {batch.supplier_id} balance +{credit} for stock batch {batch.id}")
    return credit


def apply_supplier_payment(db: Session, payment: SupplierPayment) -> None:
    increment_supplier_balance(db, payment.supplier_id, -to_amount(payment.amount))


# --- Statements (ledger replay) ---

def _fold_statement(party_type: str, party, events: List[dict], as_of: Optional[date]) -> PartyStatement:
    events.sort(key=lambda e: e["date"])
    opening = to_amount(party.opening_balance)
    balance = opening
    rows = []
    for event in events:
        balance = balance + event["increase"] - event["decrease"]
        rows.append(PartyStatementEntry(**event, balance=balance))
    return PartyStatement(
        party_type=party_type,
        party_id=party.id,
        party_name=party.name,
        as_of=as_of,
        opening_balance=opening,
        entries=rows,
        closing_balance=balance,
    )


def _event(record, date_attr: str, as_of: Optional[date], **fields) -> Optional[dict]:
    try:
        instant = parse_business_datetime(getattr(record, date_attr))
    except InvalidRecordDate as e:
        logger.warning(f"Skipping {record.__class__.__name__} {record.id} in statement: {e}")
        return None
    if as_of is not None and instant.date() > as_of:
        return None
    return {"date": instant, "increase": ZERO, "decrease": ZERO, **fields}


def build_customer_statement(customer, sales: Iterable = (), payments: Iterable = (), as_of: DateLike = None) -> PartyStatement:
    as_of = to_business_date(as_of) if as_of else None
    events = []
    for sale in sales:
        debt = sale_debt(sale)
        if not debt:
            continue
        event = _event(sale, "sale_date", as_of, reference=f"Sale #{sale.id}",
                       description="Credit sale", increase=debt)
        if event:
            events.append(event)
    for payment in payments:
        event = _event(payment, "payment_date", as_of, reference=f"Payment #{payment.id}",
                       description=f"Payment ({enum_code(payment.payment_method)})", decrease=to_amount(payment.amount))
        if event:
            events.append(event)
    return _fold_statement("customer", customer, events, as_of)


def build_supplier_statement(supplier, stock_batches: Iterable = (), payments: Iterable = (), as_of: DateLike = None) -> PartyStatement:
    as_of = to_business_date(as_of) if as_of else None
    events = []
    for batch in stock_batches:
        credit = purchase_credit(batch)
        if not credit:
            continue
        reference = f"Invoice {batch.invoice_no}" if batch.invoice_no else f"Batch #{batch.id}"
        event = _event(batch, "purchase_date", as_of, reference=reference,
                       description=f"Credit purchase: {batch.product_name}", increase=credit)
        if event:
            events.append(event)
    for payment in payments:
        event = _event(payment, "payment_date", as_of, reference=f"Payment #{payment.id}",
                       description=payment.note or "Supplier Payment", decrease=to_amount(payment.amount))
        if event:
            events.append(event)
    return _fold_statement("supplier", supplier, events, as_of)


def get_customer_statement(db: Session, customer_id: int, as_of: Optional[date] = None):
    customer = db.query(Customer).filter(Customer.id == customer_id).first()
    if not customer:
        return None
    sales = db.query(Sale).filter(Sale.customer_id == customer_id).all()
    payments = db.query(CustomerPayment).filter(CustomerPayment.customer_id == customer_id).all()
    return build_customer_statement(customer, sales, payments, as_of)


def get_supplier_statement(db: Session, supplier_id: int, as_of: Optional[date] = None):
    supplier = db.query(Supplier).filter(Supplier.id == supplier_id).first()
    if not supplier:
        return None
    batches = db.query(StockBatch).filter(StockBatch.supplier_id == supplier_id).all()
    payments = db.query(SupplierPayment).filter(SupplierPayment.supplier_id == supplier_id).all()
    return build_supplier_statement(supplier, batches, payments, as_of)


# --- Reconciliation ---

def _group_by(records: Iterable, attr: str) -> dict:
    grouped = {}
    for record in records:
        grouped.setdefault(getattr(record, attr), []).append(record)
    return grouped


def find_balance_drifts(db: Session):
    """Compare every stored counter with the balance replayed from its records."""
    checks = []

    sales = _group_by(db.query(Sale).filter(Sale.customer_id.isnot(None)).all(), "customer_id")
    customer_payments = _group_by(db.query(CustomerPayment).all(), "customer_id")
    for customer in db.query(Customer).order_by(Customer.id).all():
        statement = build_customer_statement(customer, sales.get(customer.id, []), customer_payments.get(customer.id, []))
        checks.append(("customer", customer, Customer.outstanding_balance, customer.outstanding_balance, statement.closing_balance))

    batches = _group_by(db.query(StockBatch).filter(StockBatch.supplier_id.isnot(None)).all(), "supplier_id")
    supplier_payments = _group_by(db.query(SupplierPayment).all(), "supplier_id")
    for supplier in db.query(Supplier).order_by(Supplier.id).all():
        statement = build_supplier_statement(supplier, batches.get(supplier.id, []), supplier_payments.get(supplier.id, []))
        checks.append(("supplier", supplier, Supplier.outstanding_balance, supplier.outstanding_balance, statement.closing_balance))

    transactions = _group_by(db.query(BankTransaction).all(), "bank_account_id")
    for account in db.query(BankAccount).order_by(BankAccount.id).all():
        derived = summarize_transactions(transactions.get(account.id, [])).computed_balance
        checks.append(("bank_account", account, BankAccount.balance, account.balance, derived))

    drifts = []
    for party_type, record, column, stored, derived in checks:
        stored = to_amount(stored)
        if stored != derived:
            drifts.append((column, record, BalanceDrift(
                party_type=party_type,
                party_id=record.id,
                party_name=record.name,
                stored_balance=stored,
                derived_balance=derived,
                difference=stored - derived,
            )))
    return len(checks), drifts


def reconcile_balances(db: Session, fix: bool = False, changed_by: str = "system") -> BalanceReconciliation:
    """
    Report counters that disagree with their replayed history.

    With ``fix=True`` each drifting counter is overwritten with the derived
    value and an audit row is written, all in one transaction.
    """
    checked, drifts = find_balance_drifts(db)
    for _, _, drift in drifts:
        logger.warning(
            f"Balance drift on {drift.party_type} {drift.party_id} ({drift.party_name}): "
            f"stored {drift.stored_balance}, derived {drift.derived_balance}"
        )

    if fix and drifts:
        try:
            for column, record, drift in drifts:
                setattr(record, column.key, drift.derived_balance)
                record.updated_by = changed_by
                create_audit_log(db, AuditLogCreate(
                    table_name=record.__tablename__,
                    record_id=record.id,
                    changed_by=changed_by,
                    action="RECONCILE",
                    old_values={column.key: float(drift.stored_balance)},
                    new_values={column.key: float(drift.derived_balance)},
                ))
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("Failed to fix balance drift")
            raise
        logger.info(f"Fixed {len(drifts)} drifting balances")

    return BalanceReconciliation(
        checked=checked,
        drifts=[drift for _, _, drift in drifts],
        fixed=fix and bool(drifts),
    )
