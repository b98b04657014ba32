import logging
from decimal import Decimal

from crud.customers import create_customer_payment
from crud.daybook import get_daybook
from crud.expenses import create_expense
from crud.stock import update_selling_price
from crud.suppliers import create_supplier_payment
from models import AuditLog, BankTransaction
from models.bank_accounts import BankTransactionCategory, BankTransactionType
from models.customers import CustomerPaymentMethod
from schemas.customers import CustomerPaymentCreate
from schemas.expenses import ExpenseCreate
from schemas.stock_batches import StockPriceUpdate
from schemas.suppliers import SupplierPaymentCreate
from utils.dates import shop_today


def test_bank_paid_expense_posts_outflow(db_session, bank_account):
    expense = create_expense(db_session, ExpenseCreate(
        category="Electricity", amount=Decimal("40"), payment_mode="BANK", description="EB bill",
    ), user_id="admin")
    db_session.refresh(bank_account)

    txn = db_session.query(BankTransaction).one()
    assert (txn.type, txn.category) == (BankTransactionType.OUT, BankTransactionCategory.EXPENSE)
    assert (txn.source_type, txn.source_id) == ("expenses", expense.id)
    assert expense.bank_account_id == bank_account.id
    assert bank_account.balance == Decimal("-40")


def test_cash_expense_leaves_bank_alone(db_session, bank_account):
    create_expense(db_session, ExpenseCreate(category="Tea", amount=Decimal("15")), user_id="admin")

    assert db_session.query(BankTransaction).all() == []


def test_upi_customer_payment_posts_inflow(db_session, customer, bank_account):
    create_customer_payment(db_session, CustomerPaymentCreate(
        customer_id=customer.id, amount=Decimal("60"), payment_method=CustomerPaymentMethod.UPI,
    ), user_id="counter")
    db_session.refresh(bank_account)
    db_session.refresh(customer)

    txn = db_session.query(BankTransaction).one()
    assert (txn.type, txn.category) == (BankTransactionType.IN, BankTransactionCategory.UPI)
    assert txn.description == "Customer Payment (Asha)"
    assert bank_account.balance == Decimal("60")
    assert customer.outstanding_balance == Decimal("-60")


def test_bank_customer_payment_uses_other_category(db_session, customer, bank_account):
    create_customer_payment(db_session, CustomerPaymentCreate(
        customer_id=customer.id, amount=Decimal("25"), payment_method=CustomerPaymentMethod.BANK,
    ), user_id="counter")

    assert db_session.query(BankTransaction).one().category == BankTransactionCategory.OTHER


def test_bank_customer_payment_without_account_warns(db_session, customer, caplog):
    with caplog.at_level(logging.WARNING):
        payment = create_customer_payment(db_session, CustomerPaymentCreate(
            customer_id=customer.id, amount=Decimal("25"), payment_method=CustomerPaymentMethod.UPI,
        ), user_id="counter")

    assert payment.bank_account_id is None
    assert db_session.query(BankTransaction).all() == []
    assert "no bank account exists" in caplog.text


def test_bank_supplier_payment_shows_once_in_daybook(db_session, supplier, bank_account):
    create_supplier_payment(db_session, SupplierPaymentCreate(
        supplier_id=supplier.id, amount=Decimal("80"), payment_mode="BANK", note="March flowers",
    ), user_id="admin")
    db_session.refresh(bank_account)
    db_session.refresh(supplier)

    txn = db_session.query(BankTransaction).one()
    assert (txn.type, txn.category) == (BankTransactionType.OUT, BankTransactionCategory.SUPPLIER)
    assert txn.description == "March flowers"
    assert bank_account.balance == Decimal("-80")
    assert supplier.outstanding_balance == Decimal("-80")

    today = shop_today()
    daybook = get_daybook(db_session, today, today)
    assert [(row.category, row.description) for row in daybook.entries] == [("PAYMENT", "Supplier Pay: March flowers")]
    assert daybook.closing_balance == daybook.opening_balance - 80


def test_hidden_supplier_payment_via_api(client, supplier):
    response = client.post("/suppliers/payments/", json={
        "supplier_id": supplier.id, "amount": "30", "hide_from_daybook": True,
    })
    assert response.status_code == 201

    day = shop_today().isoformat()
    daybook = client.get("/reports/daybook", params={"start_date": day, "end_date": day}).json()
    assert daybook["entries"] == []
    assert Decimal(client.get(f"/suppliers/{supplier.id}/statement").json()["closing_balance"]) == Decimal("-30")


def test_update_selling_price_is_audited(db_session, fresh_batch):
    updated = update_selling_price(db_session, fresh_batch.id, StockPriceUpdate(selling_price=Decimal("24")), "admin")

    assert updated.selling_price == Decimal("24")
    assert updated.purchase_price == Decimal("10")
    audit = db_session.query(AuditLog).filter(AuditLog.table_name == "stock_batches", AuditLog.action == "UPDATE").one()
    assert audit.old_values["selling_price"] == 20.0
    assert audit.new_values["selling_price"] == 24.0
    assert update_selling_price(db_session, 999, StockPriceUpdate(selling_price=Decimal("1")), "admin") is None


def test_price_endpoint(client, fresh_batch):
    response = client.patch(f"/stock/{fresh_batch.id}/price", json={"selling_price": "26"})
    assert response.status_code == 200
    assert Decimal(response.json()["selling_price"]) == Decimal("26")
    assert client.patch("/stock/999/price", json={"selling_price": "26"}).status_code == 404
