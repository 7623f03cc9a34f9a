import secrets
import string

# Base62 alphabet; short codes are case-sensitive
ALPHABET = string.digits + string.ascii_lowercase + string.ascii_uppercase
BASE = len(ALPHABET)
SHORT_CODE_LENGTH = 7
# Widest code any configuration can issue
MAX_SHORT_CODE_LENGTH = 12

_ALPHABET_INDEX = {ch: i for i, ch in enumerate(ALPHABET)}


def generate_short_code(length: int = SHORT_CODE_LENGTH) -> str:
    """Generate a cryptographically secure random base62 code."""
    return ''.join(secrets.choice(ALPHABET) for _ in range(length))


def is_valid_short_code(code, max_length: int = MAX_SHORT_CODE_LENGTH) -> bool:
    """Accept any base62 code that some code length setting could have issued."""
    return (
        isinstance(code, str)
        and 0 < len(code) <= max_length
        and all(ch in _ALPHABET_INDEX for ch in code)
    )


def keyspace_size(length: int = SHORT_CODE_LENGTH) -> int:
    return BASE ** length


def encode_base62(num: int, length: int = SHORT_CODE_LENGTH) -> str:
    """Encode a non-negative integer as a zero-padded base62 string of fixed length."""
    if num < 0:
        raise ValueError("Cannot encode a negative number")
    if num >= keyspace_size(length):
        raise ValueError(f"{num} does not fit in {length} base62 characters")
    out = []
    while num:
        num, rem = divmod(num, BASE)
        out.append(ALPHABET[rem])
    return ''.join(reversed(out)).rjust(length, ALPHABET[0])

