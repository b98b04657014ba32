from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional

from database import get_db
from crud import sales as crud_sales
from schemas.sales import Sale, SaleCreate
from utils.auth_utils import get_current_user, get_user_identifier, require_admin

router = APIRouter(prefix="/sales", tags=["Sales"], dependencies=[Depends(get_current_user)])


@router.post("/", response_model=Sale, status_code=status.HTTP_201_CREATED)
def checkout(sale: SaleCreate, db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    try:
        return crud_sales.create_sale(db, sale, user_id=get_user_identifier(user))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/", response_model=List[Sale])
def read_sales(customer_id: Optional[int] = None, skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return crud_sales.get_sales(db, customer_id=customer_id, skip=skip, limit=limit)


@router.get("/{sale_id}", response_model=Sale)
def read_sale(sale_id: int, db: Session = Depends(get_db)):
    db_sale = crud_sales.get_sale(db, sale_id)
    if db_sale is None:
        raise HTTPException(status_code=404, detail="Sale not found")
    return db_sale


@router.delete("/{sale_id}", response_model=Sale)
def delete_sale(sale_id: int, db: Session = Depends(get_db), user: dict = Depends(require_admin)):
    """Soft-delete a sale, restoring its stock and reversing customer and bank balances."""
    db_sale = crud_sales.delete_sale(db, sale_id, user_id=get_user_identifier(user))
    if db_sale is None:
        raise HTTPException(status_code=404, detail="Sale not found")
    return db_sale
