import re

from vapi_gateway.core.exceptions import ValidationError

PHONE_SEPARATORS = re.compile(r"[\s\-()]")
PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{8,14}$")


def normalize_phone_number(phone_number: str) -> str:
    """
    Strip separators and return the number with a leading '+'.

    Accepts 9-15 digits with no leading zero, optionally prefixed by '+'.

    Raises:
        ValidationError: If the cleaned number does not match
    """
    clean_phone = PHONE_SEPARATORS.sub("", phone_number)

    if not PHONE_PATTERN.fullmatch(clean_phone):
        raise ValidationError(
            "Invalid phone number format. Use international format (+1234567890)",
            details={"phone_number": phone_number}
        )

    return clean_phone if clean_phone.startswith("+") else f"+{clean_phone}"
