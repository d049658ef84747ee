"""Shared validation utilities"""

import re
from datetime import date, datetime
from typing import Optional

TR_PHONE_PATTERN = re.compile(r"^(\+90|0)?[0-9]{10}$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
TIME_PATTERN = re.compile(r"^([01][0-9]|2[0-3]):[0-5][0-9]$")

# Turkish letters that have no ASCII lowercase counterpart in slugs
_SLUG_TRANSLATION = str.maketrans(
    {"ğ": "g", "ü": "u", "ş": "s", "ı": "i", "ö": "o", "ç": "c"}
)


def validate_tr_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate a Turkish phone number and strip whitespace.

    Accepts 10 digits with an optional ``0`` or ``+90`` prefix.

    Raises:
        ValueError: If the phone number is invalid
    """
    if not phone:
        return phone

    compact = re.sub(r"\s", "", phone)
    if not TR_PHONE_PATTERN.match(compact):
        raise ValueError("Geçerli bir telefon numarası giriniz")
    return compact


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Returns:
        Lowercase, stripped email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()
    if not EMAIL_PATTERN.match(email):
        raise ValueError("Geçerli bir email adresi giriniz")
    return email


def validate_hhmm(value: Optional[str]) -> Optional[str]:
    """Validate a 24h ``HH:MM`` time string"""
    if value is None:
        return value
    if not TIME_PATTERN.match(value):
        raise ValueError("Saat HH:MM formatında olmalı")
    return value


def parse_day(value: str) -> date:
    """
    Parse a ``YYYY-MM-DD`` calendar day.

    Raises:
        ValueError: If the value is not a valid calendar day
    """
    return datetime.strptime(value, "%Y-%m-%d").date()


def slugify(text: str) -> str:
    """Build a URL slug from a (possibly Turkish) business name"""
    # "İ".lower() yields "i" plus a combining dot, so map it before lowering
    slug = text.replace("İ", "i").lower().translate(_SLUG_TRANSLATION)
    slug = re.sub(r"[^a-z0-9]", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")
