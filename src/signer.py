# src/signer.py
import base64
import hashlib
import hmac
from typing import Any, Dict, Mapping, Optional

from canonical import build_signing_string, normalize_value
from errors import ConfigurationError
from logger import logger
from profiles import HashAlgorithm, MissingFieldPolicy, SigningProfile


def require_secret(profile: SigningProfile, secret: Optional[str]) -> str:
    """Refuse to go any further without a usable key."""
    if secret is None or not str(secret).strip():
        raise ConfigurationError(f"Secret key for {profile.name} is not configured")
    return secret


def compute_signature(profile: SigningProfile, signing_string: str, secret: str) -> str:
    """
    Hash a canonical string.

    HMAC-SHA256 is keyed with ``secret`` and encoded as base64. The
    secret-prefixed variant already has the key inside ``signing_string`` and
    is a plain SHA-256 in uppercase hex.
    """
    message = signing_string.encode("utf-8")

    if profile.algorithm is HashAlgorithm.HMAC_SHA256_BASE64:
        digest = hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()
        return base64.b64encode(digest).decode("ascii")

    if profile.algorithm is HashAlgorithm.SHA256_PREFIXED_HEX:
        return hashlib.sha256(message).hexdigest().upper()

    raise ConfigurationError(f"Unsupported hash algorithm: {profile.algorithm}")


def sign_payload(profile: SigningProfile, payload: Mapping[str, Any], secret: Optional[str]) -> Dict[str, str]:
    """
    Return the outbound field set for ``profile`` with its signature attached.

    Only the profile's fields are carried over. Values are the normalized
    strings that were hashed, absent ones get the profile placeholder. For
    self-describing profiles the ``signed_field_names`` entry is written
    before hashing, so it is covered by the signature too.
    """
    secret = require_secret(profile, secret)

    names_field = profile.signed_field_names_field
    signed: Dict[str, str] = {}
    order = []

    for field in profile.field_order:
        if field == names_field:
            order.append(field)
            continue
        value = normalize_value(payload.get(field), profile.trim_values)
        if value is None:
            if profile.missing_field_policy is MissingFieldPolicy.OMIT:
                continue
            value = ""
        signed[field] = value
        order.append(field)

    if names_field is not None:
        signed[names_field] = ",".join(order)

    # re-insert in signing order so the form fields read the same way
    signed = {field: signed[field] for field in order}

    signing_string = build_signing_string(profile, signed, order, secret)
    signed[profile.signature_field] = compute_signature(profile, signing_string, secret)

    logger.info(f"Signed {profile.name} payload ({len(order)} fields)")
    return signed
