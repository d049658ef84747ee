from datetime import date

import pytest

from randevu.shared.pagination import pagination
from randevu.shared.validators import (
    parse_day,
    slugify,
    validate_email,
    validate_hhmm,
    validate_tr_phone,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("05321234567", "05321234567"),
        ("0532 123 45 67", "05321234567"),
        ("+905321234567", "+905321234567"),
        ("5321234567", "5321234567"),
        (None, None),
        ("", ""),
    ],
)
def test_valid_phone(raw, expected):
    assert validate_tr_phone(raw) == expected


@pytest.mark.parametrize("raw", ["12345", "0532-123-45-67", "+15321234567"])
def test_invalid_phone(raw):
    with pytest.raises(ValueError):
        validate_tr_phone(raw)


def test_email_is_normalized():
    assert validate_email("  Ali@Example.COM ") == "ali@example.com"
    with pytest.raises(ValueError):
        validate_email("not-an-email")


def test_hhmm():
    assert validate_hhmm("09:30") == "09:30"
    assert validate_hhmm(None) is None
    for bad in ("9:30", "24:00", "12:60"):
        with pytest.raises(ValueError):
            validate_hhmm(bad)


def test_parse_day():
    assert parse_day("2030-02-28") == date(2030, 2, 28)
    with pytest.raises(ValueError):
        parse_day("2030-02-30")


@pytest.mark.parametrize(
    "name, slug",
    [
        ("Güzel Saçlar Kuaför", "guzel-saclar-kuafor"),
        ("İstanbul Berber", "istanbul-berber"),
        ("  Oto  Yıkama!! ", "oto-yikama"),
        ("Çiçek & Şeker", "cicek-seker"),
    ],
)
def test_slugify(name, slug):
    assert slugify(name) == slug


def test_pagination():
    assert pagination(2, 10, 25) == {"page": 2, "limit": 10, "total": 25, "pages": 3}
    assert pagination(1, 20, 0)["pages"] == 0
