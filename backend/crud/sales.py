"""
Checkout and sale deletion.

A sale, its stock decrements, the customer balance increment, any bank
transaction and the audit row are written in one transaction.
"""
from sqlalchemy.orm import Session
from crud.audit_log import create_audit_log
from crud.app_config import get_stock_age_config
from crud.balances import apply_sale, reverse_sale, sale_debt
from crud.bank_accounts import record_bank_transaction, resolve_bank_account, reverse_bank_transactions_for
from crud.stock import get_stock_status
from schemas.audit_log import AuditLogCreate
from schemas import sales as schemas
from models.audit_mixin import shop_now
from models.bank_accounts import BankTransactionType, BankTransactionCategory
from models.customers import Customer
from models.sales import Sale, SaleItem, PaymentMode
from models.stock_batches import StockBatch, StockStatus
from utils import sqlalchemy_to_dict
from decimal import Decimal
import logging

logger = logging.getLogger("sales")

ZERO = Decimal("0")


def get_sale(db: Session, sale_id: int):
    return db.query(Sale).filter(Sale.id == sale_id).first()


def get_sales(db: Session, customer_id: int = None, skip: int = 0, limit: int = 100):
    query = db.query(Sale)
    if customer_id is not None:
        query = query.filter(Sale.customer_id == customer_id)
    return query.order_by(Sale.sale_date.desc(), Sale.id.desc()).offset(skip).limit(limit).all()


def _settle_payment(sale: schemas.SaleCreate, total: Decimal):
    """Return (amount_paid, change_returned) for the chosen payment mode."""
    if sale.payment_mode == PaymentMode.CASH:
        if sale.amount_tendered < total:
            raise ValueError(f"Cash tendered {sale.amount_tendered} is less than the total {total}")
        return total, sale.amount_tendered - total
    if sale.payment_mode == PaymentMode.CREDIT:
        if sale.amount_tendered > total:
            raise ValueError(f"Initial payment {sale.amount_tendered} exceeds the total {total}")
        return sale.amount_tendered, ZERO
    # UPI and BANK settle the full amount electronically
    return total, ZERO


def create_sale(db: Session, sale: schemas.SaleCreate, user_id: str):
    if not sale.items:
        raise ValueError("Cannot check out an empty cart")

    customer = None
    if sale.customer_id is not None:
        customer = db.query(Customer).filter(Customer.id == sale.customer_id).first()
        if not customer:
            raise ValueError(f"Customer {sale.customer_id} not found")
    if sale.payment_mode == PaymentMode.CREDIT and customer is None:
        raise ValueError("A credit sale needs a customer")

    config = get_stock_age_config(db)
    try:
        sale_date = sale.sale_date or shop_now()
        db_sale = Sale(
            sale_date=sale_date,
            discount=sale.discount,
            payment_mode=sale.payment_mode,
            customer_id=sale.customer_id,
            customer_name=customer.name if customer else (sale.customer_name or None),
            created_by=user_id,
        )

        sub_total = ZERO
        for item in sale.items:
            batch = db.query(StockBatch).filter(StockBatch.id == item.stock_batch_id).with_for_update().first()
            if not batch:
                raise ValueError(f"Stock batch {item.stock_batch_id} not found")
            status = get_stock_status(batch.purchase_date, config)
            if status == StockStatus.DAMAGED:
                raise ValueError(f"Stock batch {batch.id} ({batch.product_name}) is damaged and cannot be sold")
            if item.quantity > batch.quantity:
                raise ValueError(f"Only {batch.quantity} of {batch.product_name} left in batch {batch.id}")
            price = item.price if item.price is not None else batch.selling_price
            batch.quantity = batch.quantity - item.quantity
            sub_total += item.quantity * price
            db_sale.items.append(SaleItem(
                stock_batch_id=batch.id,
                product_id=batch.product_id,
                product_name=batch.product_name,
                quantity=item.quantity,
                price=price,
                status=status,
            ))

        if sale.discount > sub_total:
            raise ValueError(f"Discount {sale.discount} exceeds the sub total {sub_total}")
        total = sub_total - sale.discount
        amount_paid, change = _settle_payment(sale, total)
        db_sale.sub_total = sub_total
        db_sale.total_amount = total
        db_sale.amount_paid = amount_paid
        db_sale.change_returned = change

        if sale.payment_mode in (PaymentMode.UPI, PaymentMode.BANK):
            account = resolve_bank_account(db, sale.bank_account_id, auto_create=True, user_id=user_id)
            db_sale.bank_account_id = account.id

        db.add(db_sale)
        db.flush()

        if sale.payment_mode in (PaymentMode.UPI, PaymentMode.BANK) and amount_paid > 0:
            category = BankTransactionCategory.UPI if sale.payment_mode == PaymentMode.UPI else BankTransactionCategory.OTHER
            record_bank_transaction(
                db, db_sale.bank_account_id, amount_paid, BankTransactionType.IN, category,
                description=f"{sale.payment_mode.value} Sale #{db_sale.id}", transaction_date=sale_date,
                source_type="sales", source_id=db_sale.id, user_id=user_id,
            )
        apply_sale(db, db_sale)

        create_audit_log(db, AuditLogCreate(
            table_name='sales',
            record_id=db_sale.id,
            changed_by=user_id,
            action='CREATE',
            new_values=sqlalchemy_to_dict(db_sale)
        ))
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Checkout failed")
        raise
    db.refresh(db_sale)
    logger.info(f"Sale {db_sale.id}: total {db_sale.total_amount}, paid {db_sale.amount_paid} via {db_sale.payment_mode.value}")
    return db_sale


def delete_sale(db: Session, sale_id: int, user_id: str):
    """Soft-delete a sale, restoring stock and reversing every balance it moved."""
    db_sale = get_sale(db, sale_id)
    if not db_sale:
        return None
    try:
        old_values = sqlalchemy_to_dict(db_sale)
        for item in db_sale.items:
            batch = db.query(StockBatch).filter(StockBatch.id == item.stock_batch_id).with_for_update().first()
            if batch:
                batch.quantity = batch.quantity + item.quantity
        reverse_sale(db, db_sale)
        reverse_bank_transactions_for(db, "sales", db_sale.id, user_id)
        db_sale.deleted_at = shop_now()
        db_sale.deleted_by = user_id
        db.flush()
        create_audit_log(db, AuditLogCreate(
            table_name='sales',
            record_id=db_sale.id,
            changed_by=user_id,
            action='DELETE',
            old_values=old_values,
            new_values=sqlalchemy_to_dict(db_sale)
        ))
        db.commit()
    except Exception:
        db.rollback()
        logger.exception(f"Failed to delete sale {sale_id}")
        raise
    db.refresh(db_sale)
    logger.info(f"Sale {sale_id} deleted by {user_id}; customer balance reversed by {sale_debt(db_sale)}")
    return db_sale
