# src/verifier.py
import hmac
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from canonical import build_signing_string
from errors import MalformedResponse, VerificationFailed
from logger import logger
from profiles import SigningProfile
from signer import compute_signature, require_secret

ACCEPTED = "accepted"
DECLINED = "declined"
ERROR = "error"
INVALID_SIGNATURE = "invalid-signature"
MALFORMED = "malformed"


@dataclass(frozen=True)
class Verified:
    profile: str
    status: Optional[str]
    confirmation_id: Optional[str]
    outcome: str
    raw_fields: Dict[str, Any] = field(default_factory=dict)


def classify_status(profile: SigningProfile, status: Optional[str]) -> str:
    """Map a gateway status/decision code onto accepted, declined or error."""
    code = (status or "").strip().upper()
    if not code:
        return ERROR
    if code in profile.accepted_statuses:
        return ACCEPTED
    if code in profile.error_statuses:
        return ERROR
    return DECLINED


def resolve_field_order(profile: SigningProfile, payload: Mapping[str, Any]) -> Tuple[str, ...]:
    """
    Fields the gateway signed, in order.

    Self-describing callbacks declare the list themselves. That list is taken
    as sent: nothing binds it to a server-side expectation, so a sender can
    narrow what the signature covers.
    """
    if not profile.self_describing:
        return profile.field_order

    declared = payload.get(profile.signed_field_names_field)
    if declared is None or not str(declared).strip():
        raise MalformedResponse(
            f"Missing {profile.signed_field_names_field} in {profile.name} callback",
            {"field": profile.signed_field_names_field},
        )
    return tuple(str(declared).split(","))


def verify_payload(profile: SigningProfile, payload: Mapping[str, Any], secret: Optional[str]) -> Verified:
    """
    Check a gateway callback against ``profile``.

    Raises MalformedResponse when the signature or the signed field list is
    missing, VerificationFailed when the recomputed signature differs. The
    payload is never modified.
    """
    secret = require_secret(profile, secret)

    received = payload.get(profile.signature_field)
    if received is None or not str(received).strip():
        raise MalformedResponse(
            f"Missing {profile.signature_field} in {profile.name} callback",
            {"field": profile.signature_field},
        )

    order = resolve_field_order(profile, payload)
    unsigned = {k: v for k, v in payload.items() if k != profile.signature_field}

    signing_string = build_signing_string(profile, unsigned, order, secret)
    expected = compute_signature(profile, signing_string, secret)

    # compare_digest keeps timing flat; the result is the same as ==
    if not hmac.compare_digest(expected.encode("utf-8"), str(received).encode("utf-8")):
        logger.warning(f"Signature mismatch on {profile.name} callback")
        raise VerificationFailed(f"Invalid signature on {profile.name} callback")

    status = payload.get(profile.status_field) if profile.status_field else None
    confirmation_id = payload.get(profile.confirmation_field) if profile.confirmation_field else None

    return Verified(
        profile=profile.name,
        status=status,
        confirmation_id=confirmation_id,
        outcome=classify_status(profile, status),
        raw_fields=dict(payload),
    )
