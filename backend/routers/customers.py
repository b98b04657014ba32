from datetime import date
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional

from database import get_db
from crud import customers as crud_customers
from crud import balances as crud_balances
from schemas.customers import Customer, CustomerCreate, CustomerPayment, CustomerPaymentCreate
from schemas.ledgers import PartyStatement
from utils.auth_utils import get_current_user, get_user_identifier

router = APIRouter(prefix="/customers", tags=["Customers"], dependencies=[Depends(get_current_user)])


@router.get("/", response_model=List[Customer])
def read_customers(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return crud_customers.get_customers(db, skip=skip, limit=limit)


@router.post("/", response_model=Customer, status_code=status.HTTP_201_CREATED)
def create_customer(customer: CustomerCreate, db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    try:
        return crud_customers.create_customer(db, customer, user_id=get_user_identifier(user))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/payments/", response_model=List[CustomerPayment])
def read_customer_payments(customer_id: Optional[int] = None, skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return crud_customers.get_customer_payments(db, customer_id=customer_id, skip=skip, limit=limit)


@router.post("/payments/", response_model=CustomerPayment, status_code=status.HTTP_201_CREATED)
def create_customer_payment(payment: CustomerPaymentCreate, db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    try:
        return crud_customers.create_customer_payment(db, payment, user_id=get_user_identifier(user))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{customer_id}/statement", response_model=PartyStatement)
def read_customer_statement(customer_id: int, as_of: Optional[date] = None, db: Session = Depends(get_db)):
    """Credit sales and payments replayed into a running balance, optionally up to ``as_of``."""
    statement = crud_balances.get_customer_statement(db, customer_id, as_of=as_of)
    if statement is None:
        raise HTTPException(status_code=404, detail="Customer not found")
    return statement
