"""
Relay error taxonomy.

Every error carries a stable ``code`` and an ``http_status`` hint so the HTTP
layer can render it without knowing which part of the core raised it.
"""
from typing import Any, Dict, Iterable, Optional


class RelayError(Exception):
    """Base class for everything the signing core raises."""

    code = "relay_error"
    http_status = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": "error",
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(RelayError):
    """
    Caller input is missing or malformed. Nothing was signed or sent.

    All offending fields are collected before raising, never just the first.
    """

    code = "invalid_request"
    http_status = 400

    def __init__(self, missing_fields: Iterable[str] = (), invalid_fields: Optional[Dict[str, str]] = None):
        self.missing_fields = list(missing_fields)
        self.invalid_fields = dict(invalid_fields or {})

        parts = []
        if self.missing_fields:
            parts.append(f"Missing required fields: {', '.join(self.missing_fields)}")
        for field, reason in self.invalid_fields.items():
            parts.append(f"{field} {reason}")

        super().__init__(
            "; ".join(parts) or "Invalid request",
            {"missing_fields": self.missing_fields, "invalid_fields": self.invalid_fields},
        )


class ConfigurationError(RelayError):
    """A secret or profile needed for signing is unavailable."""

    code = "configuration_error"
    http_status = 500


class VerificationFailed(RelayError):
    """The recomputed signature does not match the one the gateway attached."""

    code = "invalid_signature"
    http_status = 400


class MalformedResponse(RelayError):
    """The callback lacks its signature or the list of signed fields."""

    code = "malformed"
    http_status = 400


class UpstreamError(RelayError):
    """The direct server-to-server call to the gateway failed. Not retried."""

    code = "upstream_error"
    http_status = 502

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        super().__init__(message, {"upstream_status": status_code})
