from sqlalchemy.orm import Session
from crud.audit_log import create_audit_log
from crud.categories import infer_adjustment_category
from schemas.audit_log import AuditLogCreate
from schemas import cash_adjustments as schemas
from models.audit_mixin import shop_now
from models.cash_adjustments import CashAdjustment
from utils import sqlalchemy_to_dict
import logging

logger = logging.getLogger("cash_adjustments")


def get_cash_adjustments(db: Session, skip: int = 0, limit: int = 100):
    return db.query(CashAdjustment).order_by(CashAdjustment.adjustment_date.desc(), CashAdjustment.id.desc()).offset(skip).limit(limit).all()


def create_cash_adjustment(db: Session, adjustment: schemas.CashAdjustmentCreate, user_id: str):
    data = adjustment.model_dump()
    data["category"] = adjustment.category or infer_adjustment_category(adjustment.description, adjustment.type)
    data["adjustment_date"] = adjustment.adjustment_date or shop_now()
    db_adjustment = CashAdjustment(**data, created_by=user_id)
    db.add(db_adjustment)
    db.flush()
    create_audit_log(db, AuditLogCreate(
        table_name='cash_adjustments',
        record_id=db_adjustment.id,
        changed_by=user_id,
        action='CREATE',
        new_values=sqlalchemy_to_dict(db_adjustment)
    ))
    db.commit()
    db.refresh(db_adjustment)
    logger.info(f"Cash {db_adjustment.type.value} {db_adjustment.amount} by {user_id}")
    return db_adjustment
