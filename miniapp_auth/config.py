from dataclasses import dataclass

from .scratch import DEFAULT_SCRATCH_THRESHOLD


DEFAULT_MAX_AGE_SECONDS = 2 * 3600
DEFAULT_AUTH_SCHEME = "tma"

_BOOL_TRUE = {"true", "yes", "1", "on"}
_BOOL_FALSE = {"false", "no", "0", "off"}


@dataclass
class Config:
    bot_token: str
    max_age_seconds: int = DEFAULT_MAX_AGE_SECONDS
    scratch_threshold: int = DEFAULT_SCRATCH_THRESHOLD
    auth_scheme: str = DEFAULT_AUTH_SCHEME
    strict_decoding: bool = False
    api_port: int = 0
    cors_origin: str = "*"


def _parse_bool(raw: str, name: str) -> bool:
    lower = raw.lower().strip()
    if lower in _BOOL_TRUE:
        return True
    if lower in _BOOL_FALSE:
        return False
    raise ValueError(f"{name}: expected true/false, got '{raw}'")


def _parse_int(raw: str, name: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        raise ValueError(f"{name}: expected an integer, got '{raw}'") from None


def load_config(config) -> Config:
    """Build a Config from a parsed configparser object."""
    if not config.has_section("TELEGRAM"):
        raise ValueError("config is missing the [TELEGRAM] section")
    bot_token = config["TELEGRAM"].get("bot_token", "").strip()
    if not bot_token:
        raise ValueError("TELEGRAM.bot_token must not be empty")

    auth = config["AUTH"] if config.has_section("AUTH") else {}
    max_age = _parse_int(auth.get("max_age_seconds", str(DEFAULT_MAX_AGE_SECONDS)), "AUTH.max_age_seconds")
    if max_age <= 0:
        raise ValueError(f"AUTH.max_age_seconds must be positive, got {max_age}")
    threshold = _parse_int(auth.get("scratch_threshold", str(DEFAULT_SCRATCH_THRESHOLD)), "AUTH.scratch_threshold")
    if threshold < 0:
        raise ValueError(f"AUTH.scratch_threshold must be >= 0, got {threshold}")
    auth_scheme = auth.get("auth_scheme", DEFAULT_AUTH_SCHEME).strip() or DEFAULT_AUTH_SCHEME
    strict = _parse_bool(auth.get("strict_decoding", "false"), "AUTH.strict_decoding")

    api = config["API"] if config.has_section("API") else {}
    api_port = _parse_int(api.get("port", "0") or "0", "API.port")
    cors_origin = api.get("cors_origin", "*").strip() or "*"

    return Config(
        bot_token=bot_token,
        max_age_seconds=max_age,
        scratch_threshold=threshold,
        auth_scheme=auth_scheme,
        strict_decoding=strict,
        api_port=api_port,
        cors_origin=cors_origin,
    )
