"""Telegram Mini App initData HMAC-SHA256 validation.

Validates the initData string sent by the Telegram WebApp SDK to ensure
the request is authentic. Pure functions, no I/O. Freshness is left to the
caller, who compares `issued_at` with its own maximum age.

Reference: https://core.telegram.org/bots/webapps#validating-data-received-via-the-mini-app
"""

from dataclasses import dataclass
from datetime import datetime

from .auth_date import parse_auth_date
from .decoding import decode
from .errors import SignatureMismatch
from .pairs import encode_check_string, parse_pairs
from .scratch import ScratchAllocator, make_allocator
from .signature import compute_signature, signatures_match


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    issued_at: datetime
    issued_at_unix: int


def validate_init_data(
    init_data: str,
    bot_token: str,
    scratch_threshold: int | None = None,
    allocator: ScratchAllocator | None = None,
    strict: bool = False,
) -> ValidationResult:
    """Check the initData signature against `bot_token`.

    Raises a StructuralError subclass when the payload is malformed; a
    well-formed payload with a wrong signature returns is_valid=False.
    """
    if allocator is None:
        allocator = make_allocator(scratch_threshold)

    decoded = decode(init_data, allocator, strict=strict)
    parsed = parse_pairs(decoded.text)
    unix_seconds, issued_at = parse_auth_date(parsed.auth_date.value)

    check_bytes = encode_check_string(parsed, allocator)
    expected = compute_signature(bot_token, check_bytes)

    return ValidationResult(
        is_valid=signatures_match(expected, parsed.hash.value),
        issued_at=issued_at,
        issued_at_unix=unix_seconds,
    )


def ensure_valid(init_data: str, bot_token: str, **kwargs) -> ValidationResult:
    """Like validate_init_data, but raises SignatureMismatch instead of returning False."""
    result = validate_init_data(init_data, bot_token, **kwargs)
    if not result.is_valid:
        raise SignatureMismatch()
    return result
