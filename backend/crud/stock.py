from sqlalchemy.orm import Session
from crud.audit_log import create_audit_log
from crud.app_config import get_stock_age_config
from crud.balances import apply_stock_purchase
from schemas.audit_log import AuditLogCreate
from schemas.app_config import StockAgeConfig
from schemas import products as product_schemas
from schemas import stock_batches as schemas
from models.audit_mixin import shop_now
from models.products import Product
from models.stock_batches import StockBatch, StockStatus
from models.suppliers import Supplier
from utils import sqlalchemy_to_dict
from utils.dates import DateLike, days_between
import logging

logger = logging.getLogger("stock")


# --- Products ---

def get_product(db: Session, product_id: int):
    return db.query(Product).filter(Product.id == product_id).first()


def get_products(db: Session, skip: int = 0, limit: int = 100):
    return db.query(Product).order_by(Product.name).offset(skip).limit(limit).all()


def create_product(db: Session, product: product_schemas.ProductCreate, user_id: str):
    if db.query(Product).filter(Product.name == product.name).first():
        raise ValueError(f"Product '{product.name}' already exists")
    db_product = Product(**product.model_dump(), created_by=user_id)
    db.add(db_product)
    db.flush()
    create_audit_log(db, AuditLogCreate(
        table_name='products',
        record_id=db_product.id,
        changed_by=user_id,
        action='CREATE',
        new_values=sqlalchemy_to_dict(db_product)
    ))
    db.commit()
    db.refresh(db_product)
    return db_product


# --- Stock status ---

def get_stock_status(purchase_date: DateLike, config: StockAgeConfig = None, today: DateLike = None) -> StockStatus:
    """Freshness of a batch from its age in whole days."""
    config = config or StockAgeConfig()
    age = days_between(purchase_date, today)
    if age < config.stock_old_after_days:
        return StockStatus.NEW
    if age < config.stock_damaged_after_days:
        return StockStatus.OLD
    return StockStatus.DAMAGED


def with_status(batch: StockBatch, config: StockAgeConfig, today: DateLike = None) -> schemas.StockBatchWithStatus:
    return schemas.StockBatchWithStatus(
        **schemas.StockBatch.model_validate(batch).model_dump(),
        status=get_stock_status(batch.purchase_date, config, today),
    )


# --- Stock batches ---

def get_stock_batch(db: Session, batch_id: int):
    return db.query(StockBatch).filter(StockBatch.id == batch_id).first()


def get_stock_batches(db: Session, in_stock_only: bool = False, skip: int = 0, limit: int = 100):
    query = db.query(StockBatch)
    if in_stock_only:
        query = query.filter(StockBatch.quantity > 0)
    return query.order_by(StockBatch.purchase_date.desc(), StockBatch.id.desc()).offset(skip).limit(limit).all()


def get_computed_stock(db: Session, today: DateLike = None) -> schemas.ComputedStock:
    config = get_stock_age_config(db)
    computed = schemas.ComputedStock()
    for batch in db.query(StockBatch).order_by(StockBatch.purchase_date, StockBatch.id).all():
        item = with_status(batch, config, today)
        if item.status == StockStatus.DAMAGED:
            computed.damaged_stock.append(item)
        elif batch.quantity > 0:
            if item.status == StockStatus.NEW:
                computed.new_stock.append(item)
            else:
                computed.old_stock.append(item)
    return computed


def create_stock_batch(db: Session, batch: schemas.StockBatchCreate, user_id: str):
    product = get_product(db, batch.product_id)
    if not product:
        raise ValueError(f"Product {batch.product_id} not found")
    supplier = None
    if batch.supplier_id is not None:
        supplier = db.query(Supplier).filter(Supplier.id == batch.supplier_id).first()
        if not supplier:
            raise ValueError(f"Supplier {batch.supplier_id} not found")

    try:
        data = batch.model_dump()
        data["purchase_date"] = batch.purchase_date or shop_now()
        data["invoice_no"] = (batch.invoice_no or "").strip() or None
        db_batch = StockBatch(
            **data,
            product_name=product.name,
            original_quantity=batch.quantity,
            supplier_name=supplier.name if supplier else None,
            created_by=user_id,
        )
        db.add(db_batch)
        db.flush()
        apply_stock_purchase(db, db_batch)
        create_audit_log(db, AuditLogCreate(
            table_name='stock_batches',
            record_id=db_batch.id,
            changed_by=user_id,
            action='CREATE',
            new_values=sqlalchemy_to_dict(db_batch)
        ))
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Failed to create stock batch")
        raise
    db.refresh(db_batch)
    logger.info(f"Stock batch {db_batch.id}: {db_batch.quantity} x {db_batch.product_name} @ {db_batch.purchase_price}")
    return db_batch


def update_selling_price(db: Session, batch_id: int, update: schemas.StockPriceUpdate, user_id: str):
    db_batch = get_stock_batch(db, batch_id)
    if not db_batch:
        return None
    old_values = sqlalchemy_to_dict(db_batch)
    db_batch.selling_price = update.selling_price
    db_batch.updated_by = user_id
    db.flush()
    create_audit_log(db, AuditLogCreate(
        table_name='stock_batches',
        record_id=db_batch.id,
        changed_by=user_id,
        action='UPDATE',
        old_values=old_values,
        new_values=sqlalchemy_to_dict(db_batch)
    ))
    db.commit()
    db.refresh(db_batch)
    return db_batch
