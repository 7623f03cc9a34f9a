from pydantic import HttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from linkshort.core.exceptions import ValidationError

MAX_URL_LENGTH = 2048

_http_url = TypeAdapter(HttpUrl)


def validate_long_url(value, max_length: int = MAX_URL_LENGTH) -> str:
    """Check that ``value`` is a usable http(s) URL and return it unchanged.

    The caller's string is returned as-is rather than pydantic's normalized
    form, so a resolved link matches what was submitted exactly.
    """
    if value is None:
        raise ValidationError("Missing field: url")
    if not isinstance(value, str):
        raise ValidationError("URL must be a string")
    if not value or value.isspace():
        raise ValidationError("URL must not be empty")
    if value != value.strip():
        raise ValidationError("URL must not contain leading or trailing whitespace")
    if len(value) > max_length:
        raise ValidationError(f"URL must be less than {max_length} characters")

    # Only allow http/https
    if not (value.startswith('http://') or value.startswith('https://')):
        raise ValidationError("Only HTTP and HTTPS URLs are allowed")

    try:
        _http_url.validate_python(value)
    except PydanticValidationError:
        raise ValidationError("URL is not well-formed")

    return value
