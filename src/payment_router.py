# src/payment_router.py
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional
from urllib.parse import urlencode

import requests

from config import GatewaySettings
from errors import ConfigurationError, MalformedResponse, UpstreamError, ValidationError, VerificationFailed
from logger import logger
from payload_builder import build_cybersource_fields, build_qpay_fields
from profiles import SigningProfile, get_profile
from sanitizer import sanitize_gateway_fields
from signer import sign_payload
from verifier import INVALID_SIGNATURE, MALFORMED, verify_payload


class Transport(str, Enum):
    CLIENT_POST = "client_post"        # JSON, the client auto-posts the form
    REDIRECT_FORM = "redirect_form"    # auto-submitting HTML form
    SERVER_POST = "server_post"        # form-encoded POST from the relay

    @classmethod
    def parse(cls, value: Optional[str]) -> "Transport":
        if not value:
            return cls.CLIENT_POST
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValidationError(invalid_fields={"transport": f"must be one of {', '.join(t.value for t in cls)}"}) from None


@dataclass(frozen=True)
class GatewayRoute:
    name: str
    request_profile: SigningProfile
    response_profile: SigningProfile
    build_fields: Callable[..., Dict[str, Any]]
    secret: Callable[[GatewaySettings], Optional[str]]
    url: Callable[[GatewaySettings], Optional[str]]


GATEWAYS = {
    "qpay": GatewayRoute(
        name="qpay",
        request_profile=get_profile("qpay.request"),
        response_profile=get_profile("qpay.response"),
        build_fields=build_qpay_fields,
        secret=lambda s: s.qpay_secret_key,
        url=lambda s: s.qpay_redirect_url,
    ),
    "cybersource": GatewayRoute(
        name="cybersource",
        request_profile=get_profile("cybersource.request"),
        response_profile=get_profile("cybersource.response"),
        build_fields=build_cybersource_fields,
        secret=lambda s: s.cybersource_secret_key,
        url=lambda s: s.cybersource_payment_url,
    ),
}


def get_route(gateway: str) -> GatewayRoute:
    try:
        return GATEWAYS[gateway]
    except KeyError:
        raise ConfigurationError(f"Unknown gateway: {gateway}") from None


@dataclass
class SignedRequest:
    gateway: str
    gateway_url: str
    transport: Transport
    fields: Dict[str, str]
    upstream_status: Optional[int] = None
    upstream_body: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "success": True,
            "gateway": self.gateway,
            "paymentUrl": self.gateway_url,
            "transport": self.transport.value,
            "formFields": dict(self.fields),
        }
        if self.upstream_status is not None:
            data["upstream"] = {"status": self.upstream_status, "body": self.upstream_body}
        return data


@dataclass
class CallbackResult:
    gateway: str
    status: str                          # accepted / declined / error / invalid-signature / malformed
    message: str
    gateway_status: Optional[str] = None
    confirmation_id: Optional[str] = None
    raw_fields: Dict[str, Any] = field(default_factory=dict)

    @property
    def verified(self) -> bool:
        return self.status not in (INVALID_SIGNATURE, MALFORMED)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "gateway": self.gateway,
            "gatewayStatus": self.gateway_status,
            "confirmationId": self.confirmation_id,
            "message": self.message,
            "transactionDetails": dict(self.raw_fields),
        }


# ============================================================
# OUTBOUND
# ============================================================

def post_form(url: str, fields: Mapping[str, str], timeout: float):
    """
    Server-to-server submission. No retry: a failed call is reported to the
    caller as UpstreamError and the payment is not re-sent.
    """
    try:
        response = requests.post(
            url,
            data=dict(fields),
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            timeout=timeout,
        )
        response.raise_for_status()
    except requests.HTTPError as exc:
        status = exc.response.status_code if exc.response is not None else None
        body = exc.response.text if exc.response is not None else None
        raise UpstreamError(f"Gateway responded with HTTP {status}", status_code=status, body=body) from exc
    except requests.RequestException as exc:
        raise UpstreamError(f"Gateway request failed: {exc.__class__.__name__}") from exc

    return response.status_code, response.text


def initiate_payment(
    gateway: str,
    body: Mapping[str, Any],
    settings: GatewaySettings,
    transport: Transport = Transport.CLIENT_POST,
    now: Optional[datetime] = None,
) -> SignedRequest:
    """
    Build, sign and (for server_post) submit one payment request.

    Order matters: input is validated before anything is signed, and the
    secret is checked before any network call.
    """
    route = get_route(gateway)
    fields = route.build_fields(body, settings, now=now)

    gateway_url = route.url(settings)
    if not gateway_url:
        raise ConfigurationError(f"Payment URL for {gateway} is not configured")

    signed = sign_payload(route.request_profile, fields, route.secret(settings))
    result = SignedRequest(gateway=gateway, gateway_url=gateway_url, transport=transport, fields=signed)

    if transport is Transport.SERVER_POST:
        result.upstream_status, result.upstream_body = post_form(gateway_url, signed, settings.gateway_timeout)
        logger.info(f"[{gateway}] gateway accepted POST with HTTP {result.upstream_status}")

    logger.info({
        "event": "payment_initiated",
        "gateway": gateway,
        "transport": transport.value,
        "fields": [name for name in signed if name != route.request_profile.signature_field],
    })
    return result


# ============================================================
# INBOUND
# ============================================================

def handle_gateway_response(gateway: str, fields: Mapping[str, Any], settings: GatewaySettings) -> CallbackResult:
    """
    Verify a gateway callback and reduce it to one terminal status.

    Signature problems become ``invalid-signature`` / ``malformed`` results,
    not exceptions.
    A missing secret still raises ConfigurationError.
    """
    route = get_route(gateway)
    profile = route.response_profile
    raw = dict(fields)

    logger.info(f"[{gateway}] callback received: {sanitize_gateway_fields(raw)}")

    try:
        verified = verify_payload(profile, raw, route.secret(settings))
    except MalformedResponse as exc:
        logger.error(f"[{gateway}] malformed callback: {exc.message}")
        return CallbackResult(gateway=gateway, status=MALFORMED, message=exc.message, raw_fields=raw)
    except VerificationFailed:
        logger.error(f"[{gateway}] signature mismatch")
        return CallbackResult(gateway=gateway, status=INVALID_SIGNATURE, message="Invalid Signature", raw_fields=raw)

    message = raw.get(profile.message_field) if profile.message_field else None
    result = CallbackResult(
        gateway=gateway,
        status=verified.outcome,
        message=message or f"Transaction {verified.status or 'UNKNOWN'}",
        gateway_status=verified.status,
        confirmation_id=verified.confirmation_id,
        raw_fields=verified.raw_fields,
    )
    logger.info({
        "event": "callback_verified",
        "gateway": gateway,
        "status": result.status,
        "gateway_status": result.gateway_status,
        "confirmation_id": result.confirmation_id,
    })
    return result


def client_redirect_url(result: CallbackResult, settings: GatewaySettings) -> Optional[str]:
    """Landing page on the client app, or None when none is configured."""
    if not settings.client_response_url:
        return None

    params = {"status": result.status, "message": result.message}
    if result.confirmation_id:
        params["confirmationId"] = result.confirmation_id

    separator = "&" if "?" in settings.client_response_url else "?"
    return f"{settings.client_response_url}{separator}{urlencode(params)}"
