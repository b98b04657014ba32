from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
import logging

from database import get_db
from crud import daybook as crud_daybook
from crud import bank_summary as crud_bank_summary
from crud import balances as crud_balances
from crud import financial_reports as crud_financial_reports
from crud import audit_log as crud_audit_log
from schemas.audit_log import AuditLogOut
from schemas.ledgers import Daybook, BalanceReconciliation
from schemas.financial_reports import BankSummary, ProfitAndLoss
from utils.auth_utils import get_current_user, get_user_identifier, require_admin
from utils.dates import InvalidRecordDate, to_business_date

router = APIRouter(
    prefix="/reports",
    tags=["Reports"],
    dependencies=[Depends(get_current_user)],
)
logger = logging.getLogger(__name__)


def parse_report_window(start_date: str, end_date: str):
    """Accept ISO dates or full timestamps and return the business-day window."""
    try:
        start = to_business_date(start_date)
        end = to_business_date(end_date)
    except InvalidRecordDate:
        raise HTTPException(status_code=400, detail="Invalid date format. Use ISO-8601, e.g. 2024-01-31 or 2024-01-31T10:00:00Z")
    if start > end:
        raise HTTPException(status_code=400, detail="Start date cannot be after the end date")
    return start, end


@router.get("/daybook", response_model=Daybook)
def get_daybook(start_date: str, end_date: str, db: Session = Depends(get_db)):
    """Cash day book for the window with opening, running and closing balances."""
    start, end = parse_report_window(start_date, end_date)
    return crud_daybook.get_daybook(db, start, end)


@router.get("/bank-summary", response_model=BankSummary)
def get_bank_summary(db: Session = Depends(get_db)):
    return crud_bank_summary.get_bank_summary(db)


@router.get("/profit-and-loss", response_model=ProfitAndLoss)
def get_profit_and_loss(start_date: str, end_date: str, db: Session = Depends(get_db)):
    start, end = parse_report_window(start_date, end_date)
    return crud_financial_reports.get_profit_and_loss(db, start, end)


@router.get("/balance-reconciliation", response_model=BalanceReconciliation)
def get_balance_reconciliation(db: Session = Depends(get_db), user: dict = Depends(require_admin)):
    """Report customer, supplier and bank balances that disagree with their history."""
    return crud_balances.reconcile_balances(db)


@router.post("/balance-reconciliation/fix", response_model=BalanceReconciliation)
def fix_balance_reconciliation(db: Session = Depends(get_db), user: dict = Depends(require_admin)):
    result = crud_balances.reconcile_balances(db, fix=True, changed_by=get_user_identifier(user))
    logger.info(f"Balance reconciliation fix by {get_user_identifier(user)}: {len(result.drifts)} corrected")
    return result


@router.get("/audit-log", response_model=List[AuditLogOut])
def get_audit_log(
    table_name: Optional[str] = None,
    record_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: dict = Depends(require_admin),
):
    return crud_audit_log.get_audit_logs(db, table_name=table_name, record_id=record_id)
