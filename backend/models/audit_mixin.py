from sqlalchemy import Column, DateTime, String
from datetime import datetime
import pytz

from utils.dates import SHOP_TIMEZONE


def shop_now():
    return datetime.now(pytz.timezone(SHOP_TIMEZONE))


class TimestampMixin:
    """Mixin that provides created/updated timestamps and user info.

    Used by every shop record. It does NOT include soft-delete columns, since
    most ledger rows are append-only and never removed.
    """
    # DateTime(timezone=True) persists the shop timezone offset with the value.
    created_at = Column(DateTime(timezone=True), default=shop_now)
    updated_at = Column(DateTime(timezone=True), onupdate=shop_now)
    created_by = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)


class SoftDeleteMixin:
    """Mixin for soft-delete columns (deleted_at, deleted_by).

    Applied to sales, their items and bank transactions, which an admin can
    delete but which must remain in the audit trail.
    """
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    deleted_by = Column(String, nullable=True)


class AuditMixin(TimestampMixin, SoftDeleteMixin):
    """Timestamps + soft-delete."""
    pass
