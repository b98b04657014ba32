from sqlalchemy.orm import Session
from crud.audit_log import create_audit_log
from crud.balances import apply_supplier_payment
from crud.bank_accounts import record_bank_transaction, resolve_bank_account
from schemas.audit_log import AuditLogCreate
from schemas import suppliers as schemas
from models.audit_mixin import shop_now
from models.bank_accounts import BankTransactionType, BankTransactionCategory
from models.suppliers import Supplier, SupplierPayment
from utils import sqlalchemy_to_dict
import logging

logger = logging.getLogger("suppliers")

BANK_MODES = ("BANK", "UPI")


def get_supplier(db: Session, supplier_id: int):
    return db.query(Supplier).filter(Supplier.id == supplier_id).first()


def get_suppliers(db: Session, skip: int = 0, limit: int = 100):
    return db.query(Supplier).order_by(Supplier.name).offset(skip).limit(limit).all()


def create_supplier(db: Session, supplier: schemas.SupplierCreate, user_id: str):
    name = supplier.name.strip()
    if not name:
        raise ValueError("Supplier name is required")
    db_supplier = Supplier(
        name=name,
        contact=supplier.contact,
        opening_balance=supplier.opening_balance,
        outstanding_balance=supplier.opening_balance,
        created_by=user_id,
    )
    db.add(db_supplier)
    db.flush()
    create_audit_log(db, AuditLogCreate(
        table_name='suppliers',
        record_id=db_supplier.id,
        changed_by=user_id,
        action='CREATE',
        new_values=sqlalchemy_to_dict(db_supplier)
    ))
    db.commit()
    db.refresh(db_supplier)
    return db_supplier


def get_supplier_payments(db: Session, supplier_id: int = None, skip: int = 0, limit: int = 100):
    query = db.query(SupplierPayment)
    if supplier_id is not None:
        query = query.filter(SupplierPayment.supplier_id == supplier_id)
    return query.order_by(SupplierPayment.payment_date.desc(), SupplierPayment.id.desc()).offset(skip).limit(limit).all()


def create_supplier_payment(db: Session, payment: schemas.SupplierPaymentCreate, user_id: str):
    supplier = get_supplier(db, payment.supplier_id)
    if not supplier:
        raise ValueError(f"Supplier {payment.supplier_id} not found")

    payment_mode = (payment.payment_mode or "CASH").upper()
    paid_from_bank = payment_mode in BANK_MODES or payment.bank_account_id is not None
    try:
        account = resolve_bank_account(db, payment.bank_account_id) if paid_from_bank else None
        if paid_from_bank and account is None:
            logger.warning("Bank supplier payment recorded without a bank transaction: no bank account exists")

        data = payment.model_dump()
        data["payment_date"] = payment.payment_date or shop_now()
        data["payment_mode"] = payment_mode
        data["bank_account_id"] = account.id if account else None
        db_payment = SupplierPayment(**data, created_by=user_id)
        db.add(db_payment)
        db.flush()

        apply_supplier_payment(db, db_payment)
        if account:
            record_bank_transaction(
                db, account.id, payment.amount, BankTransactionType.OUT, BankTransactionCategory.SUPPLIER,
                description=payment.note or "Supplier Payment", transaction_date=db_payment.payment_date,
                source_type="supplier_payments", source_id=db_payment.id, user_id=user_id,
            )

        create_audit_log(db, AuditLogCreate(
            table_name='supplier_payments',
            record_id=db_payment.id,
            changed_by=user_id,
            action='CREATE',
            new_values=sqlalchemy_to_dict(db_payment)
        ))
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Failed to record supplier payment")
        raise
    db.refresh(db_payment)
    logger.info(f"Paid supplier {supplier.id} {db_payment.amount} ({payment_mode})")
    return db_payment
