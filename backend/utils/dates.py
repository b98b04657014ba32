import os
from datetime import date, datetime, time
from typing import Optional, Union

import pytz
from dateutil import parser as date_parser
from dotenv import load_dotenv

load_dotenv()

SHOP_TIMEZONE = os.getenv("SHOP_TIMEZONE", "Asia/Kolkata")

DateLike = Union[date, datetime, str, None]


class InvalidRecordDate(ValueError):
    """Raised when a record carries a missing or unparseable date."""


def shop_today() -> date:
    return datetime.now(pytz.timezone(SHOP_TIMEZONE)).date()


def parse_business_datetime(value: DateLike) -> datetime:
    """
    Normalise a record date into a naive datetime in shop-local time.

    Accepts date objects, datetimes (naive ones are taken as shop-local, aware
    ones are converted to the shop timezone) and ISO-8601 strings, both
    date-only ("2024-01-05") and full timestamps ("2024-01-05T10:30:00Z").
    """
    if value is None or value == "":
        raise InvalidRecordDate("date is missing")
    if isinstance(value, str):
        try:
            value = date_parser.isoparse(value.strip())
        except (ValueError, OverflowError) as e:
            raise InvalidRecordDate(f"unparseable date {value!r}: {e}") from e
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(pytz.timezone(SHOP_TIMEZONE)).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    raise InvalidRecordDate(f"unsupported date value {value!r}")


def to_business_date(value: DateLike) -> date:
    """The shop-local calendar day a record belongs to."""
    return parse_business_datetime(value).date()


def is_within(day: date, start: date, end: date) -> bool:
    return start <= day <= end


def days_between(earlier: DateLike, later: Optional[DateLike] = None) -> int:
    """Absolute whole-day distance between two business days."""
    later_day = to_business_date(later) if later is not None else shop_today()
    return abs((later_day - to_business_date(earlier)).days)
