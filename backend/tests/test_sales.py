from decimal import Decimal

import pytest

from crud.sales import create_sale, delete_sale, get_sale
from crud.bank_accounts import AUTO_ACCOUNT_NAME
from models import BankAccount, BankTransaction, Sale, AuditLog
from models.bank_accounts import BankTransactionCategory, BankTransactionType
from models.sales import PaymentMode
from models.stock_batches import StockStatus
from schemas.sales import SaleCreate, SaleItemCreate


def checkout(db_session, batch, quantity, mode=PaymentMode.CASH, tendered=0, **extra):
    return create_sale(db_session, SaleCreate(
        items=[SaleItemCreate(stock_batch_id=batch.id, quantity=Decimal(str(quantity)))],
        payment_mode=mode,
        amount_tendered=Decimal(str(tendered)),
        **extra
    ), user_id="counter")


def test_cash_sale_returns_change_and_decrements_stock(db_session, fresh_batch):
    sale = checkout(db_session, fresh_batch, 3, tendered=100, discount=Decimal("10"))
    db_session.refresh(fresh_batch)

    assert sale.sub_total == Decimal("60")
    assert sale.total_amount == Decimal("50")
    assert sale.amount_paid == Decimal("50")
    assert sale.change_returned == Decimal("50")
    assert sale.items[0].status == StockStatus.NEW
    assert sale.created_by == "counter"
    assert fresh_batch.quantity == Decimal("47")
    assert db_session.query(AuditLog).filter(AuditLog.table_name == "sales", AuditLog.action == "CREATE").count() == 1


def test_item_price_overrides_selling_price(db_session, fresh_batch):
    sale = create_sale(db_session, SaleCreate(
        items=[SaleItemCreate(stock_batch_id=fresh_batch.id, quantity=Decimal("2"), price=Decimal("25"))],
        amount_tendered=Decimal("50"),
    ), user_id="counter")

    assert sale.total_amount == Decimal("50")


def test_short_cash_is_rejected(db_session, fresh_batch):
    with pytest.raises(ValueError, match="less than the total"):
        checkout(db_session, fresh_batch, 3, tendered=10)


def test_empty_cart_is_rejected(db_session):
    with pytest.raises(ValueError, match="empty cart"):
        create_sale(db_session, SaleCreate(items=[]), user_id="counter")


def test_overselling_is_rejected_and_rolled_back(db_session, fresh_batch):
    with pytest.raises(ValueError, match="left in batch"):
        create_sale(db_session, SaleCreate(
            items=[
                SaleItemCreate(stock_batch_id=fresh_batch.id, quantity=Decimal("40")),
                SaleItemCreate(stock_batch_id=fresh_batch.id, quantity=Decimal("20")),
            ],
            amount_tendered=Decimal("2000"),
        ), user_id="counter")

    db_session.refresh(fresh_batch)
    assert fresh_batch.quantity == Decimal("50")
    assert db_session.query(Sale).count() == 0


def test_damaged_stock_cannot_be_sold(db_session, old_batch):
    with pytest.raises(ValueError, match="damaged"):
        checkout(db_session, old_batch, 1, tendered=100)


def test_credit_sale_needs_customer(db_session, fresh_batch):
    with pytest.raises(ValueError, match="needs a customer"):
        checkout(db_session, fresh_batch, 1, mode=PaymentMode.CREDIT)


def test_credit_payment_cannot_exceed_total(db_session, fresh_batch, customer):
    with pytest.raises(ValueError, match="exceeds the total"):
        checkout(db_session, fresh_batch, 1, mode=PaymentMode.CREDIT, tendered=500, customer_id=customer.id)


def test_upi_sale_without_account_opens_auto_account(db_session, fresh_batch):
    sale = checkout(db_session, fresh_batch, 5, mode=PaymentMode.UPI)

    account = db_session.query(BankAccount).one()
    assert account.name == AUTO_ACCOUNT_NAME
    assert account.balance == Decimal("100")
    assert sale.amount_paid == Decimal("100")
    assert sale.bank_account_id == account.id

    txn = db_session.query(BankTransaction).one()
    assert txn.type == BankTransactionType.IN
    assert txn.category == BankTransactionCategory.UPI
    assert (txn.source_type, txn.source_id) == ("sales", sale.id)


def test_bank_sale_uses_first_account_with_other_category(db_session, fresh_batch, bank_account):
    checkout(db_session, fresh_batch, 1, mode=PaymentMode.BANK)

    txn = db_session.query(BankTransaction).one()
    assert txn.bank_account_id == bank_account.id
    assert txn.category == BankTransactionCategory.OTHER


def test_delete_sale_restores_stock_and_bank_balance(db_session, fresh_batch, bank_account):
    sale = checkout(db_session, fresh_batch, 5, mode=PaymentMode.UPI, bank_account_id=bank_account.id)
    db_session.refresh(bank_account)
    assert bank_account.balance == Decimal("100")

    deleted = delete_sale(db_session, sale.id, user_id="admin")
    db_session.refresh(bank_account)
    db_session.refresh(fresh_batch)

    assert deleted.deleted_by == "admin"
    assert get_sale(db_session, sale.id) is None
    assert bank_account.balance == 0
    assert fresh_batch.quantity == Decimal("50")
    assert db_session.query(BankTransaction).all() == []
    deleted_txn = db_session.query(BankTransaction).execution_options(include_deleted=True).one()
    assert deleted_txn.deleted_by == "admin"


def test_delete_missing_sale_returns_none(db_session):
    assert delete_sale(db_session, 404, user_id="admin") is None
