from dataclasses import replace
from decimal import Decimal

from canonical import build_signing_string, normalize_value
from profiles import CYBERSOURCE_REQUEST, QPAY_REQUEST, MissingFieldPolicy


def test_normalize_value():
    assert normalize_value(None, trim=True) is None
    assert normalize_value(7, trim=False) == "7"
    assert normalize_value(Decimal("12.50"), trim=True) == "12.50"
    assert normalize_value("  QPAYPG03 ", trim=True) == "QPAYPG03"
    assert normalize_value("  QPAYPG03 ", trim=False) == "  QPAYPG03 "


def test_secret_prefixed_string_is_bare_values_in_profile_order():
    payload = {"Amount": 1250, "Action": " 0 ", "MerchantID": "M123", "Unrelated": "ignored"}

    # Action, BankID (absent), MerchantID, CurrencyCode (absent), Amount, ...
    assert build_signing_string(QPAY_REQUEST, payload, secret="k") == "k0M1231250"


def test_key_value_string_keeps_values_untrimmed():
    payload = {"access_key": "a", "amount": " 1.00"}
    order = ("access_key", "amount", "currency")

    result = build_signing_string(CYBERSOURCE_REQUEST, payload, field_order=order)

    assert result == "access_key=a,amount= 1.00,currency="


def test_omit_policy_drops_absent_fields():
    profile = replace(CYBERSOURCE_REQUEST, missing_field_policy=MissingFieldPolicy.OMIT)
    payload = {"access_key": "a", "amount": "1.00"}

    result = build_signing_string(profile, payload, field_order=("access_key", "currency", "amount"))

    assert result == "access_key=a,amount=1.00"


def test_empty_string_and_absent_are_the_same_placeholder():
    with_empty = build_signing_string(QPAY_REQUEST, {"Action": "0", "BankID": ""}, secret="k")
    absent = build_signing_string(QPAY_REQUEST, {"Action": "0"}, secret="k")
    assert with_empty == absent
