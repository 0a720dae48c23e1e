import re
from datetime import datetime, timedelta, timezone

from .errors import InvalidAuthDate


_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_DECIMAL = re.compile(r"[+-]?[0-9]+", re.ASCII)


def parse_auth_date(value: str) -> tuple[int, datetime]:
    """Parse auth_date as signed 64-bit Unix seconds.

    Returns (unix_seconds, issued_at) with issued_at in UTC.
    """
    if not _DECIMAL.fullmatch(value):
        raise InvalidAuthDate(value)
    seconds = int(value)
    if not _INT64_MIN <= seconds <= _INT64_MAX:
        raise InvalidAuthDate(value)
    try:
        issued_at = _EPOCH + timedelta(seconds=seconds)
    except OverflowError:
        raise InvalidAuthDate(value) from None
    return seconds, issued_at
