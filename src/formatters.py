from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any

DEFAULT_LOCALE = "ka-GE"
SUPPORTED_LOCALES = ("ka-GE", "en-US")

EN_MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
KA_MONTHS = [
    "იან.",
    "თებ.",
    "მარ.",
    "აპრ.",
    "მაი.",
    "ივნ.",
    "ივლ.",
    "აგვ.",
    "სექ.",
    "ოქტ.",
    "ნოე.",
    "დეკ.",
]

CURRENCY_CODE = "GEL"
CURRENCY_SYMBOL = "₾"


def locale_for_language(lang: str) -> str:
    return "ka-GE" if str(lang or "").strip().lower() == "ka" else "en-US"


def _coerce_locale(locale: str) -> str:
    return locale if locale in SUPPORTED_LOCALES else DEFAULT_LOCALE


def _to_decimal(value: Any) -> Decimal:
    try:
        amount = Decimal(str(value if value is not None else 0))
    except (InvalidOperation, ValueError):
        return Decimal("0")
    return amount if amount.is_finite() else Decimal("0")


def _group_digits(digits: str, separator: str) -> str:
    groups: list[str] = []
    while len(digits) > 3:
        groups.insert(0, digits[-3:])
        digits = digits[:-3]
    groups.insert(0, digits)
    return separator.join(groups)


def format_money(value: Any, locale: str = DEFAULT_LOCALE) -> str:
    """
    Render an amount in GEL with at most two fraction digits, trailing zeros
    dropped the way browsers do for maximumFractionDigits=2.
    """
    locale = _coerce_locale(locale)
    amount = _to_decimal(value)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        amount = amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    negative = amount < 0
    whole, _, fraction = f"{amount.copy_abs():.2f}".partition(".")
    fraction = fraction.rstrip("0")

    if locale == "en-US":
        number = _group_digits(whole, ",")
        if fraction:
            number = f"{number}.{fraction}"
        text = f"{CURRENCY_CODE} {number}"
    else:
        number = _group_digits(whole, " ")
        if fraction:
            number = f"{number},{fraction}"
        text = f"{number} {CURRENCY_SYMBOL}"
    return f"-{text}" if negative else text


def parse_iso_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def format_date(value: Any, locale: str = DEFAULT_LOCALE) -> str:
    if not value:
        return ""
    parsed = parse_iso_date(value)
    if parsed is None:
        return str(value)
    locale = _coerce_locale(locale)
    if locale == "en-US":
        return f"{EN_MONTHS[parsed.month - 1]} {parsed.day:02d}, {parsed.year}"
    return f"{parsed.day:02d} {KA_MONTHS[parsed.month - 1]} {parsed.year}"


def to_iso_date(value: date | datetime) -> str:
    # Local calendar day; datetimes are not converted to UTC first.
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()
