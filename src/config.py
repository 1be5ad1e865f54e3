# src/config.py
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

DEFAULT_CYBERSOURCE_URL = "https://secureacceptance.cybersource.com/pay"
DEFAULT_GATEWAY_TIMEOUT = 30.0


def _secret(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return None
    return value.strip() or None


@dataclass(frozen=True)
class GatewaySettings:
    """Read-only configuration shared by every request. Loaded once at start."""

    # QPay
    qpay_secret_key: Optional[str] = None
    qpay_redirect_url: Optional[str] = None
    qpay_return_url: str = ""
    qpay_currency_code: str = "634"  # QAR
    qpay_default_national_id: str = ""
    qpay_default_lang: str = "En"

    # CyberSource Secure Acceptance
    cybersource_profile_id: str = ""
    cybersource_access_key: str = ""
    cybersource_secret_key: Optional[str] = None
    cybersource_payment_url: str = DEFAULT_CYBERSOURCE_URL
    cybersource_response_url: str = ""

    # Relay
    client_response_url: Optional[str] = None
    client_origin: str = ""
    environment: str = "production"
    gateway_timeout: float = DEFAULT_GATEWAY_TIMEOUT
    port: int = 8080

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"


def load_settings(dotenv: bool = True) -> GatewaySettings:
    """
    Build settings from the process environment (and ``.env`` when present).

    Secrets are trimmed. A missing secret is allowed here; signing with it
    raises ConfigurationError at call time instead.
    """
    if dotenv:
        load_dotenv()

    return GatewaySettings(
        qpay_secret_key=_secret("QPAY_SECRET_KEY"),
        qpay_redirect_url=os.getenv("QPAY_REDIRECT_URL") or None,
        qpay_return_url=os.getenv("RETURN_URL", ""),
        qpay_currency_code=os.getenv("QPAY_CURRENCY_CODE", "634"),
        qpay_default_national_id=os.getenv("QPAY_DEFAULT_NATIONAL_ID", ""),
        qpay_default_lang=os.getenv("QPAY_DEFAULT_LANG", "En"),
        cybersource_profile_id=os.getenv("CYBERSOURCE_PROFILE_ID", ""),
        cybersource_access_key=os.getenv("CYBERSOURCE_ACCESS_KEY", ""),
        cybersource_secret_key=_secret("CYBERSOURCE_SECRET_KEY"),
        cybersource_payment_url=os.getenv("CYBERSOURCE_PAYMENT_URL", DEFAULT_CYBERSOURCE_URL),
        cybersource_response_url=os.getenv("CYBERSOURCE_RESPONSE_URL", ""),
        client_response_url=os.getenv("CLIENT_RESPONSE_URL") or None,
        client_origin=os.getenv("CLIENT_ORIGIN", ""),
        environment=os.getenv("ENVIRONMENT", "production"),
        gateway_timeout=float(os.getenv("GATEWAY_TIMEOUT", DEFAULT_GATEWAY_TIMEOUT)),
        port=int(os.getenv("PORT", 8080)),
    )
