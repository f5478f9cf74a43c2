import re
import secrets
import string
from datetime import datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')
BASE36 = string.digits + string.ascii_lowercase

CENTS = Decimal("0.01")
MAX_DONATION = Decimal("1E16")  # Numeric(18, 2) holds 16 integer digits


def validate_email(email):
    return EMAIL_PATTERN.match(email or "") is not None


def _text(value):
    return value if isinstance(value, str) else ""


def validate_signup(data):
    """Field errors for a signup body, empty when it is valid."""
    errors = []
    name = _text(data.get("name")).strip()
    email = _text(data.get("email")).strip().lower()
    password = _text(data.get("password"))
    referral_code = data.get("referralCode")

    if len(name) < 2:
        errors.append({"field": "name", "msg": "Name must be at least 2 characters"})
    if not validate_email(email):
        errors.append({"field": "email", "msg": "Must be a valid email"})
    if len(password) < 6:
        errors.append({"field": "password", "msg": "Password must be at least 6 characters"})
    if referral_code is not None and not isinstance(referral_code, str):
        errors.append({"field": "referralCode", "msg": "Referral code must be a string"})
    return errors


def generate_referral_code(name, exists=None, attempts=10):
    """
    name + year + 4 random base36 chars, e.g. "janedoe2025x7k2".
    `exists` is a callable used to retry on collisions.
    """
    compact = re.sub(r"\s+", "", name).lower()[:40]
    prefix = f"{compact}{datetime.now().year}"

    def candidate():
        return prefix + ''.join(secrets.choice(BASE36) for _ in range(4))

    for _ in range(attempts):
        code = candidate()
        if exists is None or not exists(code):
            return code
    # fallback
    return prefix + ''.join(secrets.choice(BASE36) for _ in range(8))


def parse_positive_int(value, default):
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def parse_pagination(args, default_limit=10):
    """(page, limit) from query args, defaulting to page 1."""
    page = parse_positive_int(args.get("page"), 1)
    limit = parse_positive_int(args.get("limit"), default_limit)
    return page, limit


def parse_donation_amount(value):
    """
    Amount rounded to cents, or None when it is missing, non-numeric,
    non-finite, rounds to zero or does not fit the total_donations column.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite() or amount <= 0 or amount >= MAX_DONATION:
        return None
    amount = amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    if amount <= 0:
        return None
    return amount
