# src/canonical.py
"""
Canonical signing strings.

Both gateways hash a byte-exact string built from their fields in a fixed
order. A stray space, a wrong placeholder or a swapped field gives a
different digest, so every profile goes through this one builder.

The returned string can contain the secret key (secret-prefixed style) and
must never be logged.
"""
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional

from profiles import JoinStyle, MissingFieldPolicy, SigningProfile


def normalize_value(value: Any, trim: bool) -> Optional[str]:
    """Stringify a field value. None means the field is absent."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        text = format(value, "f")
    else:
        text = str(value)
    return text.strip() if trim else text


def canonical_values(profile: SigningProfile, payload: Mapping[str, Any], field_order: Iterable[str]):
    """Yield (field, value) pairs in signing order, placeholders applied."""
    for field in field_order:
        value = normalize_value(payload.get(field), profile.trim_values)
        if value is None:
            if profile.missing_field_policy is MissingFieldPolicy.OMIT:
                continue
            value = ""
        yield field, value


def build_signing_string(
    profile: SigningProfile,
    payload: Mapping[str, Any],
    field_order: Optional[Iterable[str]] = None,
    secret: str = "",
) -> str:
    """
    Serialize ``payload`` for ``profile``.

    ``field_order`` defaults to the profile's fixed order. ``secret`` is only
    used by the secret-prefixed style, where it leads the string.
    """
    order = profile.field_order if field_order is None else field_order
    pairs = canonical_values(profile, payload, order)

    if profile.join_style is JoinStyle.KEY_VALUE_COMMA:
        return ",".join(f"{field}={value}" for field, value in pairs)

    return secret + "".join(value for _, value in pairs)
