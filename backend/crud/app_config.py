from sqlalchemy.orm import Session
from models.app_config import AppConfig
from schemas.app_config import AppConfigUpdate, StockAgeConfig
from crud.audit_log import create_audit_log
from schemas.audit_log import AuditLogCreate
from utils import sqlalchemy_to_dict
import logging

logger = logging.getLogger("app_config")

DEFAULT_CONFIGS = {
    "stock_old_after_days": "1",
    "stock_damaged_after_days": "2",
}


# Get config by name (or all configs)
def get_config(db: Session, name: str = None):
    if name:
        return db.query(AppConfig).filter(AppConfig.name == name).first()
    return db.query(AppConfig).order_by(AppConfig.name).all()


# Update config by name, creating it when only a default exists
def update_config_by_name(db: Session, name: str, config: AppConfigUpdate, user_id: str):
    db_config = db.query(AppConfig).filter(AppConfig.name == name).first()
    if not db_config:
        if name not in DEFAULT_CONFIGS:
            return None
        db_config = AppConfig(name=name, value=DEFAULT_CONFIGS[name], created_by=user_id)
        db.add(db_config)
        db.flush()
        old_values = {}
        action = 'CREATE'
    else:
        old_values = sqlalchemy_to_dict(db_config)
        action = 'UPDATE'

    for field, value in config.model_dump(exclude_unset=True).items():
        setattr(db_config, field, value)
    db_config.updated_by = user_id
    db.flush()

    create_audit_log(db, AuditLogCreate(
        table_name='app_config',
        record_id=db_config.id,
        changed_by=user_id,
        action=action,
        old_values=old_values,
        new_values=sqlalchemy_to_dict(db_config)
    ))
    db.commit()
    db.refresh(db_config)
    return db_config


def get_stock_age_config(db: Session) -> StockAgeConfig:
    configs = db.query(AppConfig).filter(AppConfig.name.in_(DEFAULT_CONFIGS.keys())).all()
    config_dict = {**DEFAULT_CONFIGS, **{c.name: c.value for c in configs}}
    try:
        return StockAgeConfig(
            stock_old_after_days=int(config_dict["stock_old_after_days"]),
            stock_damaged_after_days=int(config_dict["stock_damaged_after_days"]),
        )
    except ValueError:
        logger.warning(f"Invalid stock age configuration {config_dict}; falling back to defaults.")
        return StockAgeConfig()
