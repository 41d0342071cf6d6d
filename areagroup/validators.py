import re


_PHONE_PUNCTUATION = re.compile(r"[+().\-\s]+")
_DIGITS = re.compile(r"[0-9]+")
_NAME = re.compile(r"[A-Za-z.\-]+")

# Some international call prefixes are 5 digits long.
MIN_PHONE_DIGITS = 10
MAX_PHONE_DIGITS = 15


def format_phone_number(phone_number: str) -> str:
    return _PHONE_PUNCTUATION.sub("", phone_number)


def is_valid_id(value: str) -> bool:
    return _DIGITS.fullmatch(value) is not None


def is_valid_name(value: str) -> bool:
    return _NAME.fullmatch(value) is not None


def is_valid_gender(value: str) -> bool:
    return value.lower() in ("male", "female")


def is_valid_phone_number(phone_number: str) -> bool:
    formatted = format_phone_number(phone_number)
    if not MIN_PHONE_DIGITS <= len(formatted) <= MAX_PHONE_DIGITS:
        return False
    return _DIGITS.fullmatch(formatted) is not None
