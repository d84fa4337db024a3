"""Field validators shared by domain entities."""

import re
from urllib.parse import urlparse

from pydantic import EmailStr, HttpUrl, TypeAdapter, ValidationError


_email_adapter = TypeAdapter(EmailStr)
_url_adapter = TypeAdapter(HttpUrl)

NORWEGIAN_PHONE_PATTERN = re.compile(r'^(0047|\+47|47)?\d{8}$')
NORWEGIAN_MOBILE_PATTERN = re.compile(r'^(0047|\+47|47)?[49]\d{7}$')


def is_valid_email(value: str) -> bool:
    try:
        _email_adapter.validate_python(value)
    except ValidationError:
        return False
    return True


def is_valid_url(value: str) -> bool:
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        return False
    return True


def origin_of(url: str) -> str:
    parsed = urlparse(url)
    return f'{parsed.scheme}://{parsed.netloc}'


def is_allowed_origin(url: str, allowed_origins: list[str]) -> bool:
    """True if the url parses and its scheme://host[:port] is one of allowed_origins."""
    if not is_valid_url(url):
        return False
    return origin_of(url) in {origin.rstrip('/') for origin in allowed_origins}
