from datetime import date, datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest

from crud.app_config import get_stock_age_config, update_config_by_name
from crud.categories import infer_adjustment_category, infer_bank_category
from crud.financial_reports import build_profit_and_loss
from crud.stock import create_product, create_stock_batch, get_computed_stock, get_stock_status, update_selling_price
from models.bank_accounts import BankTransactionCategory
from models.cash_adjustments import AdjustmentCategory
from models.stock_batches import StockStatus
from schemas.app_config import AppConfigUpdate, StockAgeConfig
from schemas.products import ProductCreate
from schemas.stock_batches import StockBatchCreate, StockPriceUpdate


@pytest.mark.parametrize("age, expected", [
    (0, StockStatus.NEW),
    (1, StockStatus.OLD),
    (2, StockStatus.DAMAGED),
    (9, StockStatus.DAMAGED),
])
def test_stock_status_by_age(age, expected):
    today = date(2024, 5, 10)
    assert get_stock_status(today - timedelta(days=age), StockAgeConfig(), today) == expected


def test_stock_status_uses_configured_thresholds():
    config = StockAgeConfig(stock_old_after_days=3, stock_damaged_after_days=5)
    today = date(2024, 5, 10)

    assert get_stock_status("2024-05-08", config, today) == StockStatus.NEW
    assert get_stock_status("2024-05-06T18:00:00", config, today) == StockStatus.OLD
    assert get_stock_status("2024-05-05", config, today) == StockStatus.DAMAGED


def test_computed_stock_buckets(db_session, fresh_batch, old_batch):
    computed = get_computed_stock(db_session)

    assert [b.id for b in computed.new_stock] == [fresh_batch.id]
    assert computed.old_stock == []
    assert [b.id for b in computed.damaged_stock] == [old_batch.id]
    assert computed.damaged_stock[0].status == StockStatus.DAMAGED


def test_stock_age_config_updates(db_session):
    update_config_by_name(db_session, "stock_damaged_after_days", AppConfigUpdate(value="4"), "admin")

    config = get_stock_age_config(db_session)
    assert config.stock_old_after_days == 1
    assert config.stock_damaged_after_days == 4
    assert update_config_by_name(db_session, "unknown", AppConfigUpdate(value="1"), "admin") is None


def test_product_names_are_unique(db_session):
    create_product(db_session, ProductCreate(name="Lily", default_price=Decimal("30"), category="Lilies"), "admin")

    with pytest.raises(ValueError, match="already exists"):
        create_product(db_session, ProductCreate(name="Lily", default_price=Decimal("35"), category="Lilies"), "admin")


def test_stock_batch_snapshots_names(db_session, product, supplier):
    batch = create_stock_batch(db_session, StockBatchCreate(
        product_id=product.id, quantity=Decimal("12"), purchase_price=Decimal("9"), selling_price=Decimal("18"),
        supplier_id=supplier.id, invoice_no="  ",
    ), "admin")

    assert batch.product_name == "Red Rose"
    assert batch.supplier_name == "Hosur Farms"
    assert batch.original_quantity == Decimal("12")
    assert batch.invoice_no is None

    updated = update_selling_price(db_session, batch.id, StockPriceUpdate(selling_price=Decimal("22")), "admin")
    assert updated.selling_price == Decimal("22")
    assert updated.purchase_price == Decimal("9")


def test_stock_batch_for_unknown_product_is_rejected(db_session):
    with pytest.raises(ValueError, match="Product 42 not found"):
        create_stock_batch(db_session, StockBatchCreate(
            product_id=42, quantity=Decimal("1"), purchase_price=Decimal("1"), selling_price=Decimal("1"),
        ), "admin")


def test_profit_and_loss():
    sales = [
        SimpleNamespace(id=1, sale_date="2024-03-02", total_amount=Decimal("500")),
        SimpleNamespace(id=2, sale_date="2024-02-20", total_amount=Decimal("999")),
    ]
    batches = [
        # Bought and spoiled inside the window: 4 unsold units written off
        SimpleNamespace(id=1, purchase_date="2024-03-01", original_quantity=Decimal("10"),
                        quantity=Decimal("4"), purchase_price=Decimal("10")),
        # Bought before the window, turned damaged on 2024-03-01
        SimpleNamespace(id=2, purchase_date="2024-02-28", original_quantity=Decimal("5"),
                        quantity=Decimal("2"), purchase_price=Decimal("6")),
    ]
    expenses = [SimpleNamespace(id=1, expense_date=datetime(2024, 3, 5, 12), amount=Decimal("40"))]

    report = build_profit_and_loss("2024-03-01", "2024-03-31", sales, batches, expenses)

    assert report.revenue == Decimal("500")
    assert report.total_purchases == Decimal("100")
    assert report.total_expenses == Decimal("40")
    assert report.damage_loss == Decimal("52")
    assert report.net_profit == Decimal("308")


@pytest.mark.parametrize("description, txn_type, expected", [
    ("Opening Balance", "IN", BankTransactionCategory.OPENING),
    ("UPI Sale #4", "IN", BankTransactionCategory.UPI),
    ("Supplier settlement", "OUT", BankTransactionCategory.SUPPLIER),
    ("Electricity bill", "OUT", BankTransactionCategory.EXPENSE),
    ("Cash deposit", "IN", BankTransactionCategory.OTHER),
    (None, "IN", BankTransactionCategory.OTHER),
])
def test_infer_bank_category(description, txn_type, expected):
    assert infer_bank_category(description, txn_type) == expected


def test_infer_adjustment_category():
    assert infer_adjustment_category("Opening cash for the day", "ADD") == AdjustmentCategory.OPENING
    assert infer_adjustment_category("Opening cash correction", "REMOVE") == AdjustmentCategory.OTHER
    assert infer_adjustment_category(None, "ADD") == AdjustmentCategory.OTHER
