from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from database import get_db
from crud import stock as crud_stock
from schemas.products import Product, ProductCreate
from schemas.stock_batches import StockBatch, StockBatchCreate, StockPriceUpdate, ComputedStock
from utils.auth_utils import get_current_user, get_user_identifier, require_admin

products_router = APIRouter(prefix="/products", tags=["Products"], dependencies=[Depends(get_current_user)])
router = APIRouter(prefix="/stock", tags=["Stock"], dependencies=[Depends(get_current_user)])


@products_router.get("/", response_model=List[Product])
def read_products(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return crud_stock.get_products(db, skip=skip, limit=limit)


@products_router.post("/", response_model=Product, status_code=status.HTTP_201_CREATED)
def create_product(product: ProductCreate, db: Session = Depends(get_db), user: dict = Depends(require_admin)):
    try:
        return crud_stock.create_product(db, product, user_id=get_user_identifier(user))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/", response_model=List[StockBatch])
def read_stock_batches(in_stock_only: bool = False, skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return crud_stock.get_stock_batches(db, in_stock_only=in_stock_only, skip=skip, limit=limit)


@router.get("/computed", response_model=ComputedStock)
def read_computed_stock(db: Session = Depends(get_db)):
    """Batches bucketed into new, old and damaged by their age."""
    return crud_stock.get_computed_stock(db)


@router.post("/", response_model=StockBatch, status_code=status.HTTP_201_CREATED)
def create_stock_batch(batch: StockBatchCreate, db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    """Record a purchase. Credit purchases from a supplier raise what the shop owes them."""
    try:
        return crud_stock.create_stock_batch(db, batch, user_id=get_user_identifier(user))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/{batch_id}/price", response_model=StockBatch)
def update_stock_price(batch_id: int, update: StockPriceUpdate, db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    db_batch = crud_stock.update_selling_price(db, batch_id, update, user_id=get_user_identifier(user))
    if db_batch is None:
        raise HTTPException(status_code=404, detail="Stock batch not found")
    return db_batch
