"""Two-stage HMAC-SHA256 signing of the check string.

secret    = HMAC-SHA256(key=b"WebAppData", msg=bot_token)
signature = HMAC-SHA256(key=secret, msg=check_string)

Reference: https://core.telegram.org/bots/webapps#validating-data-received-via-the-mini-app
"""

import hashlib
import hmac


WEB_APP_DATA_KEY = b"WebAppData"


def derive_secret(bot_token: str) -> bytes:
    return hmac.new(WEB_APP_DATA_KEY, bot_token.encode("utf-8"), hashlib.sha256).digest()


def compute_signature(bot_token: str, check_data) -> str:
    """Return the lowercase hex signature of `check_data` (str or bytes-like)."""
    if isinstance(check_data, str):
        check_data = check_data.encode("utf-8")
    return hmac.new(derive_secret(bot_token), check_data, hashlib.sha256).hexdigest()


def signatures_match(expected_hex: str, supplied_hex: str) -> bool:
    """Case-insensitive comparison whose timing depends only on the lengths."""
    return hmac.compare_digest(
        expected_hex.lower().encode("utf-8"),
        supplied_hex.lower().encode("utf-8"),
    )
