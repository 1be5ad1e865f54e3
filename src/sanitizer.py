import re

# ---------------------------
# Fields that never reach the logs in clear
# ---------------------------
CARD_NUMBER_FIELDS = {"Response.CardNumber", "req_card_number", "card_number"}
CARD_HOLDER_FIELDS = {"Response.CardHolderName", "req_bill_to_forename", "req_bill_to_surname"}
CARD_EXPIRY_FIELDS = {"Response.CardExpiryDate", "req_card_expiry_date"}
SIGNATURE_FIELDS = {"Response.SecureHash", "SecureHash", "signature"}


def mask_card_number(value):
    card = re.sub(r'\D', '', str(value))
    return f"**** **** **** {card[-4:]}" if len(card) >= 4 else "****"


def sanitize_gateway_fields(data):
    """
    Copy of a gateway payload that is safe to log.

    Card data is masked (PCI) and signatures are dropped so a logged request
    cannot be replayed.
    """
    safe = {**data}

    for key, value in safe.items():
        if value in (None, ""):
            continue
        if key in CARD_NUMBER_FIELDS:
            safe[key] = mask_card_number(value)
        elif key in CARD_HOLDER_FIELDS:
            safe[key] = str(value)[0] + "***"
        elif key in CARD_EXPIRY_FIELDS:
            safe[key] = "**/**"
        elif key in SIGNATURE_FIELDS:
            safe[key] = "<redacted>"

    return safe
