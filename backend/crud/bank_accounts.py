from sqlalchemy.orm import Session
from crud.audit_log import create_audit_log
from crud.balances import increment_counter
from crud.categories import infer_bank_category
from schemas.audit_log import AuditLogCreate
from utils import sqlalchemy_to_dict, enum_code
from models.audit_mixin import shop_now
from models.bank_accounts import BankAccount, BankTransaction, BankTransactionType, BankTransactionCategory
from schemas import bank_accounts as schemas
from decimal import Decimal
from typing import Optional
import logging

logger = logging.getLogger("bank_accounts")

AUTO_ACCOUNT_NAME = "Auto UPI Account"


def get_bank_account(db: Session, bank_account_id: int):
    return db.query(BankAccount).filter(BankAccount.id == bank_account_id).first()


def get_bank_accounts(db: Session):
    return db.query(BankAccount).order_by(BankAccount.id).all()


def get_bank_transactions(db: Session, bank_account_id: int = None, skip: int = 0, limit: int = 100):
    query = db.query(BankTransaction)
    if bank_account_id is not None:
        query = query.filter(BankTransaction.bank_account_id == bank_account_id)
    return query.order_by(BankTransaction.transaction_date.desc(), BankTransaction.id.desc()).offset(skip).limit(limit).all()


def increment_bank_balance(db: Session, bank_account_id: int, delta: Decimal) -> None:
    increment_counter(db, BankAccount.balance, bank_account_id, delta)


def resolve_bank_account(db: Session, bank_account_id: Optional[int] = None, auto_create: bool = False, user_id: str = None):
    """
    The account a payment lands in: the requested one, else the first account.

    With ``auto_create`` an "Auto UPI Account" is opened when the shop has none,
    so digital sales are never lost for want of an account.
    """
    if bank_account_id is not None:
        account = get_bank_account(db, bank_account_id)
        if not account:
            raise ValueError(f"Bank account {bank_account_id} not found")
        return account
    account = db.query(BankAccount).order_by(BankAccount.id).first()
    if account is None and auto_create:
        account = BankAccount(name=AUTO_ACCOUNT_NAME, balance=0, created_by=user_id)
        db.add(account)
        db.flush()
        logger.info(f"Created '{AUTO_ACCOUNT_NAME}' (id {account.id}) to receive a digital payment")
    return account


def record_bank_transaction(
    db: Session,
    bank_account_id: int,
    amount: Decimal,
    txn_type: BankTransactionType,
    category: BankTransactionCategory,
    description: str = None,
    transaction_date=None,
    source_type: str = None,
    source_id: int = None,
    user_id: str = None,
) -> BankTransaction:
    """Stage a transaction row and move the account balance with it; the caller commits."""
    db_txn = BankTransaction(
        bank_account_id=bank_account_id,
        amount=amount,
        type=txn_type,
        category=category,
        transaction_date=transaction_date or shop_now(),
        description=description,
        source_type=source_type,
        source_id=source_id,
        created_by=user_id,
    )
    db.add(db_txn)
    db.flush()
    delta = amount if txn_type == BankTransactionType.IN else -amount
    increment_bank_balance(db, bank_account_id, delta)
    return db_txn


def reverse_bank_transactions_for(db: Session, source_type: str, source_id: int, user_id: str) -> int:
    """Soft-delete the transactions a record spawned and undo their balance effect."""
    transactions = db.query(BankTransaction).filter(
        BankTransaction.source_type == source_type,
        BankTransaction.source_id == source_id,
    ).all()
    for txn in transactions:
        old_values = sqlalchemy_to_dict(txn)
        txn.deleted_at = shop_now()
        txn.deleted_by = user_id
        amount = Decimal(str(txn.amount))
        delta = -amount if enum_code(txn.type) == BankTransactionType.IN.value else amount
        increment_bank_balance(db, txn.bank_account_id, delta)
        db.flush()
        create_audit_log(db, AuditLogCreate(
            table_name='bank_transactions',
            record_id=txn.id,
            changed_by=user_id,
            action='DELETE',
            old_values=old_values,
            new_values=sqlalchemy_to_dict(txn)
        ))
    return len(transactions)


def create_bank_account(db: Session, account: schemas.BankAccountCreate, user_id: str):
    try:
        data = account.model_dump(exclude={"opening_balance"})
        db_account = BankAccount(**data, balance=0, created_by=user_id)
        db.add(db_account)
        db.flush()
        # The opening balance is a transaction so the balance always equals the replay
        if account.opening_balance > 0:
            record_bank_transaction(
                db, db_account.id, account.opening_balance,
                BankTransactionType.IN, BankTransactionCategory.OPENING,
                description="Opening Balance", source_type="bank_accounts", source_id=db_account.id,
                user_id=user_id,
            )
        create_audit_log(db, AuditLogCreate(
            table_name='bank_accounts',
            record_id=db_account.id,
            changed_by=user_id,
            action='CREATE',
            new_values=sqlalchemy_to_dict(db_account)
        ))
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Failed to create bank account")
        raise
    db.refresh(db_account)
    return db_account


def update_bank_account(db: Session, bank_account_id: int, account: schemas.BankAccountUpdate, user_id: str):
    db_account = get_bank_account(db, bank_account_id)
    if not db_account:
        return None
    old_values = sqlalchemy_to_dict(db_account)
    for field, value in account.model_dump(exclude_unset=True).items():
        setattr(db_account, field, value)
    db_account.updated_by = user_id
    db.flush()
    create_audit_log(db, AuditLogCreate(
        table_name='bank_accounts',
        record_id=db_account.id,
        changed_by=user_id,
        action='UPDATE',
        old_values=old_values,
        new_values=sqlalchemy_to_dict(db_account)
    ))
    db.commit()
    db.refresh(db_account)
    return db_account


def create_bank_transaction(db: Session, txn: schemas.BankTransactionCreate, user_id: str):
    if not get_bank_account(db, txn.bank_account_id):
        raise ValueError(f"Bank account {txn.bank_account_id} not found")
    category = txn.category or infer_bank_category(txn.description, txn.type)
    try:
        db_txn = record_bank_transaction(
            db, txn.bank_account_id, txn.amount, txn.type, category,
            description=txn.description, transaction_date=txn.transaction_date, user_id=user_id,
        )
        create_audit_log(db, AuditLogCreate(
            table_name='bank_transactions',
            record_id=db_txn.id,
            changed_by=user_id,
            action='CREATE',
            new_values=sqlalchemy_to_dict(db_txn)
        ))
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Failed to record bank transaction")
        raise
    db.refresh(db_txn)
    logger.info(f"Bank transaction {db_txn.id}: {txn.type.value} {txn.amount} ({category.value}) on account {txn.bank_account_id}")
    return db_txn
