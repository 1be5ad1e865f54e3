# src/payload_builder.py
"""
Map loosely typed relay input onto the exact field set each gateway signs.

Validation always runs first and reports every problem at once. Nothing is
truncated, generated or signed for a request that fails it.
"""
import math
import secrets
import uuid
from datetime import datetime, timezone
from decimal import Decimal, DecimalException, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, Mapping, Optional

from config import GatewaySettings
from errors import ConfigurationError, ValidationError

PUN_MAX_LENGTH = 20
QPAY_REQUIRED_FIELDS = ("amount", "bankId", "merchantId", "description")
CYBERSOURCE_REQUIRED_FIELDS = ("amount",)


def _text(body: Mapping[str, Any], key: str) -> str:
    value = body.get(key)
    if value is None:
        return ""
    return str(value).strip()


def _parse_amount(amount) -> Decimal:
    try:
        value = Decimal(str(amount).strip())
    except (InvalidOperation, ValueError):
        raise ValueError("must be a number") from None
    if not value.is_finite():
        raise ValueError("must be a finite number")
    if value <= 0:
        raise ValueError("must be greater than zero")
    return value


def _round(value: Decimal, exponent: str, scale: int = 1) -> Decimal:
    try:
        rounded = (value * scale).quantize(Decimal(exponent), rounding=ROUND_HALF_UP)
    except DecimalException:
        raise ValueError("is out of range") from None
    if rounded <= 0:
        raise ValueError("rounds to zero")
    return rounded


def to_minor_units(amount) -> str:
    """
    12.50 -> "1250". Fixed x100, half-up, no per-currency exponent.

    Rounding is done on the decimal value, so 1.005 gives "101". A float
    based Math.round(1.005 * 100) gives 100 because 1.005 is stored as
    1.00499999...
    """
    value = _parse_amount(amount)
    return str(int(_round(value, "1", scale=100)))


def to_major_units(amount) -> str:
    """12.5 -> "12.50"."""
    value = _parse_amount(amount)
    return str(_round(value, "0.01"))


def format_transaction_date(now: Optional[datetime] = None) -> str:
    """ddMMyyyyHHmmss, zero padded, no separators."""
    now = now or datetime.now()
    return now.strftime("%d%m%Y%H%M%S")


def format_signed_date_time(now: Optional[datetime] = None) -> str:
    """UTC, second precision: 2024-01-31T09:05:00Z"""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%SZ")


def generate_pun(length: int = PUN_MAX_LENGTH) -> str:
    """Random uppercase hex reference, ``length`` characters."""
    return secrets.token_hex(math.ceil(length / 2))[:length].upper()


def _validate(body: Mapping[str, Any], required, amount_parser):
    missing = [name for name in required if not _text(body, name)]
    invalid = {}
    amount = None

    if "amount" not in missing and _text(body, "amount"):
        try:
            amount = amount_parser(body["amount"])
        except ValueError as exc:
            invalid["amount"] = str(exc)

    if missing or invalid:
        raise ValidationError(missing, invalid)
    return amount


# ---------------------------
# QPay
# ---------------------------

def build_qpay_fields(body: Mapping[str, Any], settings: GatewaySettings, now: Optional[datetime] = None) -> Dict[str, str]:
    amount = _validate(body, QPAY_REQUIRED_FIELDS, to_minor_units)

    # QPay requires PUN and MerchantModuleSessionID to carry the same value
    pun = _text(body, "pun")[:PUN_MAX_LENGTH] or generate_pun()

    return {
        "Action": "0",  # purchase
        "BankID": _text(body, "bankId"),
        "MerchantID": _text(body, "merchantId"),
        "CurrencyCode": settings.qpay_currency_code,
        "Amount": amount,
        "PUN": pun,
        "PaymentDescription": _text(body, "description"),
        "MerchantModuleSessionID": pun,
        "TransactionRequestDate": format_transaction_date(now),
        "Quantity": "1",
        "ExtraFields_f14": settings.qpay_return_url,
        "Lang": _text(body, "language") or settings.qpay_default_lang,
        "NationalID": _text(body, "nationalId") or settings.qpay_default_national_id,
    }


# ---------------------------
# CyberSource Secure Acceptance
# ---------------------------

def build_cybersource_fields(
    body: Mapping[str, Any],
    settings: GatewaySettings,
    now: Optional[datetime] = None,
    transaction_uuid: Optional[str] = None,
) -> Dict[str, Optional[str]]:
    amount = _validate(body, CYBERSOURCE_REQUIRED_FIELDS, to_major_units)

    if not settings.cybersource_access_key or not settings.cybersource_profile_id:
        raise ConfigurationError("CyberSource access key / profile id are not configured")

    now = now or datetime.now(timezone.utc)
    reference = _text(body, "referenceNumber") or f"REF-{int(now.timestamp() * 1000)}"

    return {
        "access_key": settings.cybersource_access_key,
        "profile_id": settings.cybersource_profile_id,
        "transaction_uuid": transaction_uuid or str(uuid.uuid4()),
        "signed_date_time": format_signed_date_time(now),
        "transaction_type": "sale",
        "reference_number": reference,
        "amount": amount,
        "currency": _text(body, "currency") or "USD",
        "locale": "en-us",
        "device_fingerprint_id": _text(body, "device_fingerprint_id") or None,
        "override_custom_cancel_page": settings.cybersource_response_url,
        "override_custom_receipt_page": settings.cybersource_response_url,
    }
