from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional

from database import get_db
from crud import bank_accounts as crud_bank_accounts
from schemas.bank_accounts import BankAccount, BankAccountCreate, BankAccountUpdate, BankTransaction, BankTransactionCreate
from utils.auth_utils import get_current_user, get_user_identifier, require_admin

router = APIRouter(prefix="/bank-accounts", tags=["Bank Accounts"], dependencies=[Depends(get_current_user)])


@router.get("/", response_model=List[BankAccount])
def read_bank_accounts(db: Session = Depends(get_db)):
    return crud_bank_accounts.get_bank_accounts(db)


@router.post("/", response_model=BankAccount, status_code=status.HTTP_201_CREATED)
def create_bank_account(account: BankAccountCreate, db: Session = Depends(get_db), user: dict = Depends(require_admin)):
    """Open an account. A non-zero opening balance is recorded as an OPENING transaction."""
    return crud_bank_accounts.create_bank_account(db, account, user_id=get_user_identifier(user))


@router.patch("/{bank_account_id}", response_model=BankAccount)
def update_bank_account(bank_account_id: int, account: BankAccountUpdate, db: Session = Depends(get_db), user: dict = Depends(require_admin)):
    db_account = crud_bank_accounts.update_bank_account(db, bank_account_id, account, user_id=get_user_identifier(user))
    if db_account is None:
        raise HTTPException(status_code=404, detail="Bank account not found")
    return db_account


@router.get("/transactions/", response_model=List[BankTransaction])
def read_bank_transactions(bank_account_id: Optional[int] = None, skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return crud_bank_accounts.get_bank_transactions(db, bank_account_id=bank_account_id, skip=skip, limit=limit)


@router.post("/transactions/", response_model=BankTransaction, status_code=status.HTTP_201_CREATED)
def create_bank_transaction(txn: BankTransactionCreate, db: Session = Depends(get_db), user: dict = Depends(require_admin)):
    try:
        return crud_bank_accounts.create_bank_transaction(db, txn, user_id=get_user_identifier(user))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
