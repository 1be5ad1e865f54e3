from flask import Flask, current_app, jsonify, redirect, render_template_string, request
from flask_cors import CORS

from config import GatewaySettings, load_settings
from errors import ConfigurationError, RelayError, ValidationError
from logger import logger
from payment_router import GATEWAYS, Transport, client_redirect_url, handle_gateway_response, initiate_payment

AUTOSUBMIT_FORM = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Redirecting to payment</title></head>
<body onload="document.forms[0].submit()">
<form method="post" action="{{ url }}">
{% for name, value in fields.items() %}<input type="hidden" name="{{ name }}" value="{{ value }}">
{% endfor %}<noscript><button type="submit">Continue to payment</button></noscript>
</form>
</body>
</html>
"""


def _settings() -> GatewaySettings:
    return current_app.config["GATEWAY_SETTINGS"]


def _request_fields():
    """Flat key->value view of the body, whether form-encoded or JSON."""
    if request.form:
        return request.form.to_dict()
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.args.to_dict()


def create_app(settings: GatewaySettings = None) -> Flask:
    app = Flask(__name__)
    app.config["GATEWAY_SETTINGS"] = settings or load_settings()
    settings = app.config["GATEWAY_SETTINGS"]

    # open to everyone only in development, otherwise the client app alone
    origins = "*" if settings.is_development else settings.client_origin
    if origins:
        CORS(app, resources={r"/payment/*": {"origins": origins}}, methods=["GET", "POST"])
    else:
        logger.warning("CLIENT_ORIGIN is not set, cross-origin requests are disabled")

    # ============================================================
    # ERRORS
    # ============================================================

    @app.errorhandler(RelayError)
    def relay_error(err):
        if isinstance(err, ValidationError):
            logger.warning(f"Rejected request: {err.message}")
        elif isinstance(err, ConfigurationError):
            logger.error(f"Configuration error: {err.message}")
        else:
            logger.error(f"{err.code}: {err.message}")
        return jsonify(err.to_dict()), err.http_status

    # ============================================================
    # HEALTH
    # ============================================================

    @app.get("/")
    def home():
        return "Payment relay is running"

    # ============================================================
    # PAYMENT REQUEST
    # ============================================================

    @app.post("/payment/<gateway>/request")
    def payment_request(gateway):
        if gateway not in GATEWAYS:
            return jsonify({"status": "error", "error": "unknown_gateway"}), 404

        body = _request_fields()
        transport = Transport.parse(body.get("transport") or request.args.get("transport"))

        signed = initiate_payment(gateway, body, _settings(), transport=transport)

        if transport is Transport.REDIRECT_FORM:
            return render_template_string(AUTOSUBMIT_FORM, url=signed.gateway_url, fields=signed.fields)
        return jsonify(signed.to_dict()), 200

    # ============================================================
    # GATEWAY CALLBACK
    # ============================================================

    @app.route("/payment/<gateway>/response", methods=["GET", "POST"])
    def payment_response(gateway):
        if gateway not in GATEWAYS:
            return jsonify({"status": "error", "error": "unknown_gateway"}), 404

        result = handle_gateway_response(gateway, _request_fields(), _settings())

        target = client_redirect_url(result, _settings())
        if target:
            return redirect(target)
        return jsonify(result.to_dict()), 200 if result.verified else 400

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(debug=app.config["GATEWAY_SETTINGS"].is_development, port=app.config["GATEWAY_SETTINGS"].port)
