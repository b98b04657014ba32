from sqlalchemy.orm import Session
from crud.audit_log import create_audit_log
from crud.bank_accounts import record_bank_transaction, resolve_bank_account
from schemas.audit_log import AuditLogCreate
from schemas import expenses as schemas
from models.audit_mixin import shop_now
from models.bank_accounts import BankTransactionType, BankTransactionCategory
from models.expenses import Expense
from utils import sqlalchemy_to_dict
from utils.dates import to_business_date
from datetime import date
import logging

logger = logging.getLogger("expenses")

BANK_MODES = ("BANK", "UPI")


def get_expense(db: Session, expense_id: int):
    return db.query(Expense).filter(Expense.id == expense_id).first()


def get_expenses(db: Session, start_date: date = None, end_date: date = None, skip: int = 0, limit: int = 100):
    expenses = db.query(Expense).order_by(Expense.expense_date.desc(), Expense.id.desc()).all()
    if start_date or end_date:
        expenses = [
            e for e in expenses
            if (not start_date or to_business_date(e.expense_date) >= start_date)
            and (not end_date or to_business_date(e.expense_date) <= end_date)
        ]
    return expenses[skip:skip + limit]


def create_expense(db: Session, expense: schemas.ExpenseCreate, user_id: str):
    if not expense.category.strip():
        raise ValueError("Expense category is required")
    payment_mode = (expense.payment_mode or "CASH").upper()
    paid_from_bank = payment_mode in BANK_MODES or expense.bank_account_id is not None

    try:
        account = resolve_bank_account(db, expense.bank_account_id) if paid_from_bank else None
        if paid_from_bank and account is None:
            logger.warning("Bank expense recorded without a bank transaction: no bank account exists")

        data = expense.model_dump()
        data["expense_date"] = expense.expense_date or shop_now()
        data["payment_mode"] = payment_mode
        data["bank_account_id"] = account.id if account else None
        db_expense = Expense(**data, created_by=user_id)
        db.add(db_expense)
        db.flush()

        if account:
            record_bank_transaction(
                db, account.id, expense.amount, BankTransactionType.OUT, BankTransactionCategory.EXPENSE,
                description=expense.description or "Expense", transaction_date=db_expense.expense_date,
                source_type="expenses", source_id=db_expense.id, user_id=user_id,
            )

        create_audit_log(db, AuditLogCreate(
            table_name='expenses',
            record_id=db_expense.id,
            changed_by=user_id,
            action='CREATE',
            new_values=sqlalchemy_to_dict(db_expense)
        ))
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Failed to create expense")
        raise
    db.refresh(db_expense)
    return db_expense
