from datetime import date
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional

from database import get_db
from crud import suppliers as crud_suppliers
from crud import balances as crud_balances
from schemas.suppliers import Supplier, SupplierCreate, SupplierPayment, SupplierPaymentCreate
from schemas.ledgers import PartyStatement
from utils.auth_utils import get_current_user, get_user_identifier

router = APIRouter(prefix="/suppliers", tags=["Suppliers"], dependencies=[Depends(get_current_user)])


@router.get("/", response_model=List[Supplier])
def read_suppliers(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return crud_suppliers.get_suppliers(db, skip=skip, limit=limit)


@router.post("/", response_model=Supplier, status_code=status.HTTP_201_CREATED)
def create_supplier(supplier: SupplierCreate, db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    try:
        return crud_suppliers.create_supplier(db, supplier, user_id=get_user_identifier(user))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/payments/", response_model=List[SupplierPayment])
def read_supplier_payments(supplier_id: Optional[int] = None, skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return crud_suppliers.get_supplier_payments(db, supplier_id=supplier_id, skip=skip, limit=limit)


@router.post("/payments/", response_model=SupplierPayment, status_code=status.HTTP_201_CREATED)
def create_supplier_payment(payment: SupplierPaymentCreate, db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    try:
        return crud_suppliers.create_supplier_payment(db, payment, user_id=get_user_identifier(user))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{supplier_id}/statement", response_model=PartyStatement)
def read_supplier_statement(supplier_id: int, as_of: Optional[date] = None, db: Session = Depends(get_db)):
    statement = crud_balances.get_supplier_statement(db, supplier_id, as_of=as_of)
    if statement is None:
        raise HTTPException(status_code=404, detail="Supplier not found")
    return statement
