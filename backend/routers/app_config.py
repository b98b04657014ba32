from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from database import get_db
from schemas.app_config import AppConfigUpdate, AppConfigOut, StockAgeConfig
from crud import app_config as crud_app_config
from utils.auth_utils import get_current_user, get_user_identifier, require_admin

router = APIRouter(tags=["Configurations"], dependencies=[Depends(get_current_user)])
logger = logging.getLogger(__name__)


@router.get("/configurations/", response_model=List[AppConfigOut])
def get_configs(name: Optional[str] = None, db: Session = Depends(get_db)):
    configs = crud_app_config.get_config(db, name=name)
    # Always return a list, even if empty
    return [configs] if name and configs else configs or []


@router.get("/configurations/stock-age", response_model=StockAgeConfig)
def get_stock_age_config(db: Session = Depends(get_db)):
    """Effective stock ageing thresholds, defaults included."""
    return crud_app_config.get_stock_age_config(db)


@router.patch("/configurations/{name}/", response_model=AppConfigOut)
def update_config(name: str, config: AppConfigUpdate, db: Session = Depends(get_db), user: dict = Depends(require_admin)):
    if name in crud_app_config.DEFAULT_CONFIGS and config.value is not None:
        try:
            if int(config.value) < 0:
                raise ValueError
        except ValueError:
            raise HTTPException(status_code=400, detail=f"{name} must be a non-negative whole number of days")
    updated = crud_app_config.update_config_by_name(db, name, config, get_user_identifier(user))
    if not updated:
        raise HTTPException(status_code=404, detail="Configuration not found")
    logger.info(f"Configuration '{name}' set to '{updated.value}' by {get_user_identifier(user)}")
    return updated
