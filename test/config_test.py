from config import DEFAULT_CYBERSOURCE_URL, load_settings


def test_load_settings_from_environment(monkeypatch):
    monkeypatch.setenv("QPAY_SECRET_KEY", "  s3cret \n")
    monkeypatch.setenv("QPAY_REDIRECT_URL", "https://qpay.test/pay")
    monkeypatch.setenv("CYBERSOURCE_SECRET_KEY", "   ")
    monkeypatch.setenv("GATEWAY_TIMEOUT", "12.5")
    monkeypatch.setenv("ENVIRONMENT", "Development")
    monkeypatch.delenv("CYBERSOURCE_PAYMENT_URL", raising=False)
    monkeypatch.delenv("QPAY_CURRENCY_CODE", raising=False)

    settings = load_settings(dotenv=False)

    assert settings.qpay_secret_key == "s3cret"
    assert settings.cybersource_secret_key is None
    assert settings.qpay_redirect_url == "https://qpay.test/pay"
    assert settings.cybersource_payment_url == DEFAULT_CYBERSOURCE_URL
    assert settings.qpay_currency_code == "634"
    assert settings.gateway_timeout == 12.5
    assert settings.is_development
