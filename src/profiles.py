# src/profiles.py
"""
Static signing profiles, one per gateway message.

The field orders are fixed by each gateway's integration guide. They are
never derived from the incoming data.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from errors import ConfigurationError


class HashAlgorithm(str, Enum):
    HMAC_SHA256_BASE64 = "hmac-sha256-base64"
    SHA256_PREFIXED_HEX = "sha256-prefixed-hex"


class JoinStyle(str, Enum):
    KEY_VALUE_COMMA = "key-value-comma"     # field=value,field=value
    SECRET_PREFIXED = "secret-prefixed"     # <secret><value><value>...


class MissingFieldPolicy(str, Enum):
    EMPTY = "empty"
    OMIT = "omit"


@dataclass(frozen=True)
class SigningProfile:
    name: str
    field_order: Tuple[str, ...]
    algorithm: HashAlgorithm
    join_style: JoinStyle
    signature_field: str
    missing_field_policy: MissingFieldPolicy = MissingFieldPolicy.EMPTY
    trim_values: bool = False
    # set when the payload itself carries the list of signed fields
    signed_field_names_field: Optional[str] = None
    status_field: Optional[str] = None
    confirmation_field: Optional[str] = None
    message_field: Optional[str] = None
    accepted_statuses: Tuple[str, ...] = ()
    error_statuses: Tuple[str, ...] = ()

    @property
    def self_describing(self) -> bool:
        return self.signed_field_names_field is not None


# ---------------------------
# QPay (secret-prefixed SHA-256)
# ---------------------------

QPAY_REQUEST = SigningProfile(
    name="qpay.request",
    field_order=(
        "Action",
        "BankID",
        "MerchantID",
        "CurrencyCode",
        "Amount",
        "PUN",
        "PaymentDescription",
        "MerchantModuleSessionID",
        "TransactionRequestDate",
        "Quantity",
        "ExtraFields_f14",
        "Lang",
        "NationalID",
    ),
    algorithm=HashAlgorithm.SHA256_PREFIXED_HEX,
    join_style=JoinStyle.SECRET_PREFIXED,
    signature_field="SecureHash",
    trim_values=True,
)

QPAY_RESPONSE = SigningProfile(
    name="qpay.response",
    field_order=(
        "Response.AcquirerID",
        "Response.Amount",
        "Response.BankID",
        "Response.CardExpiryDate",
        "Response.CardHolderName",
        "Response.CardNumber",
        "Response.ConfirmationID",
        "Response.CurrencyCode",
        "Response.EZConnectResponseDate",
        "Response.Lang",
        "Response.MerchantID",
        "Response.MerchantModuleSessionID",
        "Response.PUN",
        "Response.Status",
        "Response.StatusMessage",
    ),
    algorithm=HashAlgorithm.SHA256_PREFIXED_HEX,
    join_style=JoinStyle.SECRET_PREFIXED,
    signature_field="Response.SecureHash",
    trim_values=True,
    status_field="Response.Status",
    confirmation_field="Response.ConfirmationID",
    message_field="Response.StatusMessage",
    accepted_statuses=("0000", "ACCEPT"),
)

# ---------------------------
# CyberSource Secure Acceptance (HMAC-SHA256, base64)
# ---------------------------

CYBERSOURCE_REQUEST = SigningProfile(
    name="cybersource.request",
    field_order=(
        "access_key",
        "profile_id",
        "transaction_uuid",
        "signed_field_names",
        "signed_date_time",
        "transaction_type",
        "reference_number",
        "amount",
        "currency",
        "locale",
        "device_fingerprint_id",
        "override_custom_cancel_page",
        "override_custom_receipt_page",
    ),
    algorithm=HashAlgorithm.HMAC_SHA256_BASE64,
    join_style=JoinStyle.KEY_VALUE_COMMA,
    signature_field="signature",
    signed_field_names_field="signed_field_names",
)

# The callback names its own signed fields, so there is no fixed order here.
CYBERSOURCE_RESPONSE = SigningProfile(
    name="cybersource.response",
    field_order=(),
    algorithm=HashAlgorithm.HMAC_SHA256_BASE64,
    join_style=JoinStyle.KEY_VALUE_COMMA,
    signature_field="signature",
    signed_field_names_field="signed_field_names",
    status_field="decision",
    confirmation_field="transaction_id",
    message_field="message",
    accepted_statuses=("ACCEPT",),
    error_statuses=("ERROR",),
)

PROFILES = {
    profile.name: profile
    for profile in (QPAY_REQUEST, QPAY_RESPONSE, CYBERSOURCE_REQUEST, CYBERSOURCE_RESPONSE)
}


def get_profile(name: str) -> SigningProfile:
    try:
        return PROFILES[name]
    except KeyError:
        raise ConfigurationError(f"Unknown signing profile: {name}") from None
