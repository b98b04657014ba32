from models.app_config import AppConfig
from models.audit_log import AuditLog
from models.products import Product
from models.stock_batches import StockBatch, StockStatus, PurchasePaymentStatus
from models.sales import Sale, SaleItem, PaymentMode
from models.expenses import Expense
from models.customers import Customer, CustomerPayment, CustomerPaymentMethod
from models.suppliers import Supplier, SupplierPayment
from models.cash_adjustments import CashAdjustment, AdjustmentType, AdjustmentCategory
from models.bank_accounts import BankAccount, BankTransaction, BankTransactionType, BankTransactionCategory

__all__ = ['AppConfig', 'AuditLog', 'Product', 'StockBatch', 'StockStatus', 'PurchasePaymentStatus', 'Sale', 'SaleItem', 'PaymentMode', 'Expense', 'Customer', 'CustomerPayment', 'CustomerPaymentMethod', 'Supplier', 'SupplierPayment', 'CashAdjustment', 'AdjustmentType', 'AdjustmentCategory', 'BankAccount', 'BankTransaction', 'BankTransactionType', 'BankTransactionCategory',]
