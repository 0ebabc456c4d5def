import calendar
import hashlib
import uuid
from datetime import date as _date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

MONTHS = list(calendar.month_name)[1:]


def hash_password(plain: str) -> str:
    """Return SHA256 hex digest of the input."""
    return hashlib.sha256(plain.encode()).hexdigest()


def new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:10].upper()}"


def round_half_up(value: Union[int, float], places: int = 2) -> float:
    quant = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quant, rounding=ROUND_HALF_UP))


def _minutes(hhmm: str) -> int:
    t = datetime.strptime(hhmm.strip(), "%H:%M")
    return t.hour * 60 + t.minute


def calculate_hours(start_time: str, end_time: str) -> float:
    """Session length in hours, two decimals, never negative."""
    diff = (_minutes(end_time) - _minutes(start_time)) / 60
    return max(0.0, round_half_up(diff, 2))


def month_year_of(iso_date: str):
    """("January", "2025") for "2025-01-14"."""
    d = _date.fromisoformat(iso_date)
    return calendar.month_name[d.month], str(d.year)


def format_period(month: str, year) -> str:
    return f"{month} {year}"


def parse_period(period: str):
    """Inverse of format_period; ("", "") when the text is not "Month Year"."""
    parts = (period or "").split()
    if len(parts) != 2:
        return "", ""
    return parts[0], parts[1]


def today_iso() -> str:
    return _date.today().isoformat()


def current_period():
    today = _date.today()
    return calendar.month_name[today.month], str(today.year)


def format_currency(amount, prefix: str = None) -> str:
    """"Rs. 2,500.00" style display; prefix defaults to the currency_prefix setting."""
    if prefix is None:
        from TutorDesk.data.repos.settings_repo import get_setting
        prefix = get_setting("currency_prefix", "Rs.")
    try:
        return f"{prefix} {float(amount):,.2f}"
    except (TypeError, ValueError):
        return str(amount)


def format_hours(hours) -> str:
    return f"{float(hours):.2f} hr"
