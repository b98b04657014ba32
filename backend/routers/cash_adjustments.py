from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from database import get_db
from crud import cash_adjustments as crud_cash_adjustments
from schemas.cash_adjustments import CashAdjustment, CashAdjustmentCreate
from utils.auth_utils import get_current_user, get_user_identifier

router = APIRouter(prefix="/cash-adjustments", tags=["Cash Adjustments"], dependencies=[Depends(get_current_user)])


@router.get("/", response_model=List[CashAdjustment])
def read_cash_adjustments(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return crud_cash_adjustments.get_cash_adjustments(db, skip=skip, limit=limit)


@router.post("/", response_model=CashAdjustment, status_code=status.HTTP_201_CREATED)
def create_cash_adjustment(adjustment: CashAdjustmentCreate, db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    """Add or remove cash from the drawer outside of sales and expenses."""
    return crud_cash_adjustments.create_cash_adjustment(db, adjustment, user_id=get_user_identifier(user))
