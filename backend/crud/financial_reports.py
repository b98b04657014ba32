from sqlalchemy.orm import Session
from models import Sale, StockBatch, Expense
from schemas.app_config import StockAgeConfig
from schemas.financial_reports import ProfitAndLoss
from crud.app_config import get_stock_age_config
from crud.daybook import ZERO, to_amount
from utils.dates import DateLike, InvalidRecordDate, to_business_date, is_within
from datetime import date, timedelta
from typing import Iterable
import logging

logger = logging.getLogger("financial_reports")


def _day_of(record, date_attr: str):
    try:
        return to_business_date(getattr(record, date_attr))
    except InvalidRecordDate as e:
        logger.warning(f"Skipping {record.__class__.__name__} {record.id} in profit and loss: {e}")
        return None


def _in_window(record, date_attr: str, start: date, end: date) -> bool:
    day = _day_of(record, date_attr)
    return day is not None and is_within(day, start, end)


def build_profit_and_loss(
    start_date: DateLike,
    end_date: DateLike,
    sales: Iterable = (),
    stock_batches: Iterable = (),
    expenses: Iterable = (),
    config: StockAgeConfig = None,
) -> ProfitAndLoss:
    start = to_business_date(start_date)
    end = to_business_date(end_date)
    if start > end:
        raise ValueError(f"start_date {start} is after end_date {end}")
    config = config or StockAgeConfig()
    stock_batches = list(stock_batches)

    # 1. Revenue
    revenue = sum((to_amount(s.total_amount) for s in sales if _in_window(s, "sale_date", start, end)), ZERO)

    # 2. Purchases at cost
    total_purchases = sum(
        (to_amount(b.original_quantity) * to_amount(b.purchase_price)
         for b in stock_batches if _in_window(b, "purchase_date", start, end)),
        ZERO,
    )

    # 3. Operating expenses
    total_expenses = sum((to_amount(e.amount) for e in expenses if _in_window(e, "expense_date", start, end)), ZERO)

    # 4. Stock written off: unsold quantity of batches that turned damaged in the window
    damage_loss = ZERO
    for batch in stock_batches:
        purchase_day = _day_of(batch, "purchase_date")
        if purchase_day is None:
            continue
        damage_day = purchase_day + timedelta(days=config.stock_damaged_after_days)
        if is_within(damage_day, start, end):
            damage_loss += to_amount(batch.quantity) * to_amount(batch.purchase_price)

    # 5. Net profit
    net_profit = revenue - total_purchases - total_expenses - damage_loss

    return ProfitAndLoss(
        start_date=start,
        end_date=end,
        revenue=revenue,
        total_purchases=total_purchases,
        total_expenses=total_expenses,
        damage_loss=damage_loss,
        net_profit=net_profit,
    )


def get_profit_and_loss(db: Session, start_date: date, end_date: date) -> ProfitAndLoss:
    return build_profit_and_loss(
        start_date,
        end_date,
        sales=db.query(Sale).all(),
        stock_batches=db.query(StockBatch).all(),
        expenses=db.query(Expense).all(),
        config=get_stock_age_config(db),
    )
