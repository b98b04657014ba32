import logging
from sqlalchemy.orm import Session

from database import SessionLocal
from crud.balances import reconcile_balances

logger = logging.getLogger(__name__)


def run_balance_reconciliation():
    """
    Nightly check of every stored balance against its replayed history.

    Read-only: drift is logged for an admin to review and fix through
    ``POST /reports/balance-reconciliation/fix``.
    """
    logger.info("Starting nightly balance reconciliation.")
    db: Session = SessionLocal()
    try:
        result = reconcile_balances(db)
        if result.drifts:
            logger.warning(f"Balance reconciliation found {len(result.drifts)} drifting balances out of {result.checked}.")
        else:
            logger.info(f"Balance reconciliation finished: {result.checked} balances consistent.")
    except Exception as e:
        logger.exception(f"Balance reconciliation failed: {e}")
    finally:
        db.close()
