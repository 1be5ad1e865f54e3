import os
from datetime import datetime

import pytest

os.environ.setdefault("RELAY_LOG", os.devnull)

from config import GatewaySettings  # noqa: E402

QPAY_SECRET = "qpay-test-secret"
CYBERSOURCE_SECRET = "cybersource-test-secret"
FIXED_NOW = datetime(2024, 3, 5, 9, 7, 3)


@pytest.fixture
def settings():
    return GatewaySettings(
        qpay_secret_key=QPAY_SECRET,
        qpay_redirect_url="https://qpay.test/pay",
        qpay_return_url="https://relay.test/payment/qpay/response",
        cybersource_profile_id="PROFILE-1",
        cybersource_access_key="ACCESS-1",
        cybersource_secret_key=CYBERSOURCE_SECRET,
        cybersource_payment_url="https://cybersource.test/pay",
        cybersource_response_url="https://relay.test/payment/cybersource/response",
        environment="development",
        gateway_timeout=5.0,
    )


@pytest.fixture
def order_body():
    return {
        "amount": "12.50",
        "bankId": "QPAYPG03",
        "merchantId": "M123",
        "description": "Order #1",
        "pun": "PUN0000000001",
    }


@pytest.fixture
def qpay_callback():
    """Unsigned QPay callback fields, every value distinct."""
    return {
        "Response.AcquirerID": "ACQ01",
        "Response.Amount": "1250",
        "Response.BankID": "QPAYPG03",
        "Response.CardExpiryDate": "1228",
        "Response.CardHolderName": "Jane Doe",
        "Response.CardNumber": "4242424242424242",
        "Response.ConfirmationID": "CONF-778",
        "Response.CurrencyCode": "634",
        "Response.EZConnectResponseDate": "05032024091500",
        "Response.Lang": "En",
        "Response.MerchantID": "M123",
        "Response.MerchantModuleSessionID": "PUN0000000001",
        "Response.PUN": "PUN0000000001",
        "Response.Status": "ACCEPT",
        "Response.StatusMessage": "Approved",
    }
