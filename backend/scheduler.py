from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from tasks.reconciliation_tasks import run_balance_reconciliation
from utils.dates import SHOP_TIMEZONE

scheduler = BackgroundScheduler()

# Schedule to run every day at 11:00 PM shop time
scheduler.add_job(run_balance_reconciliation, CronTrigger(hour=23, minute=0, timezone=SHOP_TIMEZONE), id='balance_reconciliation_job')
