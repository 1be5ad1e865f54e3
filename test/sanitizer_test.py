from sanitizer import sanitize_gateway_fields


def test_card_data_and_signatures_are_masked():
    raw = {
        "Response.CardNumber": "4242 4242 4242 4242",
        "Response.CardHolderName": "Jane Doe",
        "Response.CardExpiryDate": "1228",
        "Response.SecureHash": "ABCDEF",
        "Response.Status": "ACCEPT",
        "Response.Lang": "",
    }

    safe = sanitize_gateway_fields(raw)

    assert safe["Response.CardNumber"] == "**** **** **** 4242"
    assert safe["Response.CardHolderName"] == "J***"
    assert safe["Response.CardExpiryDate"] == "**/**"
    assert safe["Response.SecureHash"] == "<redacted>"
    assert safe["Response.Status"] == "ACCEPT"
    assert safe["Response.Lang"] == ""
    # original untouched
    assert raw["Response.CardNumber"] == "4242 4242 4242 4242"


def test_short_card_number():
    assert sanitize_gateway_fields({"req_card_number": "12"})["req_card_number"] == "****"
