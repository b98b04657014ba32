from decimal import Decimal
from types import SimpleNamespace

from crud.bank_summary import build_bank_summary, get_bank_summary
from crud.bank_accounts import create_bank_account, create_bank_transaction
from schemas.bank_accounts import BankAccountCreate, BankTransactionCreate
from models.bank_accounts import BankTransactionType, BankTransactionCategory


def account(id, name, balance):
    return SimpleNamespace(id=id, name=name, account_number=None, balance=Decimal(str(balance)))


def txn(bank_account_id, amount, type, category):
    return SimpleNamespace(bank_account_id=bank_account_id, amount=Decimal(str(amount)), type=type, category=category)


def test_opening_and_upi_inflows():
    summary = build_bank_summary(
        [account(1, "HDFC", 1200)],
        [txn(1, 1000, "IN", "OPENING"), txn(1, 200, "IN", "UPI")],
    )

    assert summary.computed_balance == Decimal("1200")
    assert summary.upi_in == Decimal("200")
    assert summary.opening_in == Decimal("1000")
    assert summary.per_account[0].computed_balance == Decimal("1200")
    assert summary.per_account[0].balance_drift == 0


def test_outflows_and_per_account_breakdown():
    summary = build_bank_summary(
        [account(1, "HDFC", 700), account(2, "SBI", 90)],
        [
            txn(1, 1000, "IN", "OPENING"),
            txn(1, 200, "OUT", "SUPPLIER"),
            txn(1, 100, "OUT", "EXPENSE"),
            txn(2, 50, "IN", "OTHER"),
            txn(2, 10, "OUT", "OTHER"),
        ],
    )

    assert summary.total_in == Decimal("1050")
    assert summary.total_out == Decimal("310")
    assert summary.supplier_out == Decimal("200")
    assert summary.expenses_out == Decimal("100")
    assert summary.computed_balance == Decimal("740")
    assert summary.account_balances == Decimal("790")

    hdfc, sbi = summary.per_account
    assert hdfc.computed_balance == Decimal("700")
    assert hdfc.balance_drift == 0
    assert sbi.computed_balance == Decimal("40")
    assert sbi.balance_drift == Decimal("50")


def test_opening_from_daybook_uses_adjustment_category():
    adjustments = [
        SimpleNamespace(amount=Decimal("500"), type="ADD", category="OPENING"),
        SimpleNamespace(amount=Decimal("40"), type="ADD", category="OTHER"),
        SimpleNamespace(amount=Decimal("60"), type="REMOVE", category="OPENING"),
    ]
    summary = build_bank_summary([], [txn(1, 100, "IN", "UPI")], adjustments)

    assert summary.opening_from_daybook == Decimal("500")
    assert summary.computed_balance_with_opening == Decimal("600")


def test_empty_summary():
    summary = build_bank_summary([], [])

    assert summary.computed_balance == 0
    assert summary.per_account == []


def test_account_created_with_opening_balance_matches_replay(db_session):
    created = create_bank_account(db_session, BankAccountCreate(name="HDFC Current", opening_balance=Decimal("1000")), user_id="admin")
    create_bank_transaction(db_session, BankTransactionCreate(
        bank_account_id=created.id, amount=Decimal("200"), type=BankTransactionType.IN, description="UPI collection",
    ), user_id="admin")

    summary = get_bank_summary(db_session)

    assert summary.opening_in == Decimal("1000")
    assert summary.upi_in == Decimal("200")
    assert summary.computed_balance == Decimal("1200")
    assert summary.per_account[0].account_balance == Decimal("1200")
    assert summary.per_account[0].balance_drift == 0
