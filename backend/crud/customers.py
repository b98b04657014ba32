from sqlalchemy.orm import Session
from crud.audit_log import create_audit_log
from crud.balances import apply_customer_payment
from crud.bank_accounts import record_bank_transaction, resolve_bank_account
from schemas.audit_log import AuditLogCreate
from schemas import customers as schemas
from models.audit_mixin import shop_now
from models.bank_accounts import BankTransactionType, BankTransactionCategory
from models.customers import Customer, CustomerPayment, CustomerPaymentMethod
from utils import sqlalchemy_to_dict
import logging

logger = logging.getLogger("customers")


def get_customer(db: Session, customer_id: int):
    return db.query(Customer).filter(Customer.id == customer_id).first()


def get_customers(db: Session, skip: int = 0, limit: int = 100):
    return db.query(Customer).order_by(Customer.name).offset(skip).limit(limit).all()


def create_customer(db: Session, customer: schemas.CustomerCreate, user_id: str):
    name = customer.name.strip()
    if not name:
        raise ValueError("Customer name is required")
    db_customer = Customer(
        name=name,
        phone=customer.phone,
        opening_balance=customer.opening_balance,
        outstanding_balance=customer.opening_balance,
        created_by=user_id,
    )
    db.add(db_customer)
    db.flush()
    create_audit_log(db, AuditLogCreate(
        table_name='customers',
        record_id=db_customer.id,
        changed_by=user_id,
        action='CREATE',
        new_values=sqlalchemy_to_dict(db_customer)
    ))
    db.commit()
    db.refresh(db_customer)
    return db_customer


def get_customer_payments(db: Session, customer_id: int = None, skip: int = 0, limit: int = 100):
    query = db.query(CustomerPayment)
    if customer_id is not None:
        query = query.filter(CustomerPayment.customer_id == customer_id)
    return query.order_by(CustomerPayment.payment_date.desc(), CustomerPayment.id.desc()).offset(skip).limit(limit).all()


def create_customer_payment(db: Session, payment: schemas.CustomerPaymentCreate, user_id: str):
    customer = get_customer(db, payment.customer_id)
    if not customer:
        raise ValueError(f"Customer {payment.customer_id} not found")

    received_in_bank = (
        payment.payment_method in (CustomerPaymentMethod.UPI, CustomerPaymentMethod.BANK)
        or payment.bank_account_id is not None
    )
    try:
        account = resolve_bank_account(db, payment.bank_account_id) if received_in_bank else None
        if received_in_bank and account is None:
            logger.warning("Bank customer payment recorded without a bank transaction: no bank account exists")

        data = payment.model_dump()
        data["payment_date"] = payment.payment_date or shop_now()
        data["bank_account_id"] = account.id if account else None
        db_payment = CustomerPayment(**data, created_by=user_id)
        db.add(db_payment)
        db.flush()

        apply_customer_payment(db, db_payment)
        if account:
            category = BankTransactionCategory.UPI if payment.payment_method == CustomerPaymentMethod.UPI else BankTransactionCategory.OTHER
            record_bank_transaction(
                db, account.id, payment.amount, BankTransactionType.IN, category,
                description=f"Customer Payment ({customer.name})", transaction_date=db_payment.payment_date,
                source_type="customer_payments", source_id=db_payment.id, user_id=user_id,
            )

        create_audit_log(db, AuditLogCreate(
            table_name='customer_payments',
            record_id=db_payment.id,
            changed_by=user_id,
            action='CREATE',
            new_values=sqlalchemy_to_dict(db_payment)
        ))
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Failed to record customer payment")
        raise
    db.refresh(db_payment)
    logger.info(f"Customer {customer.id} paid {db_payment.amount} ({db_payment.payment_method.value})")
    return db_payment
