"""Splitting decoded init data into parameters and building the check string.

The check string is fixed by Telegram: every `key=value` pair except
`hash`, sorted by its raw text and joined with `\\n`.
"""

from dataclasses import dataclass

from .errors import DuplicateParameter, MalformedParameter, MissingParameter
from .scratch import ScratchAllocator


HASH_KEY = "hash"
AUTH_DATE_KEY = "auth_date"
REQUIRED_KEYS = (HASH_KEY, AUTH_DATE_KEY)


@dataclass(frozen=True)
class Parameter:
    key: str
    value: str
    raw: str  # verbatim "key=value" slice

    @classmethod
    def from_segment(cls, segment: str) -> "Parameter":
        key, sep, value = segment.partition("=")
        if not sep:
            raise MalformedParameter(segment)
        return cls(key=key, value=value, raw=segment)


@dataclass(frozen=True)
class ParsedInitData:
    parameters: tuple[Parameter, ...]
    hash: Parameter
    auth_date: Parameter

    def signed_parameters(self) -> list[Parameter]:
        """All parameters except hash, in input order."""
        return [p for p in self.parameters if p.key != HASH_KEY]


def split_parameters(decoded: str) -> list[Parameter]:
    """Split on '&' into parameters, skipping empty segments."""
    return [Parameter.from_segment(s) for s in decoded.split("&") if s]


def parse_pairs(decoded: str) -> ParsedInitData:
    parameters = split_parameters(decoded)

    found: dict[str, Parameter] = {}
    for param in parameters:
        if param.key in REQUIRED_KEYS:
            if param.key in found:
                raise DuplicateParameter(param.key)
            found[param.key] = param

    for key in REQUIRED_KEYS:
        if key not in found:
            raise MissingParameter(key)

    return ParsedInitData(
        parameters=tuple(parameters),
        hash=found[HASH_KEY],
        auth_date=found[AUTH_DATE_KEY],
    )


def _sorted_raw(parsed: ParsedInitData) -> list[str]:
    return sorted(p.raw for p in parsed.signed_parameters())


def build_check_string(parsed: ParsedInitData) -> str:
    return "\n".join(_sorted_raw(parsed))


def encode_check_string(parsed: ParsedInitData, allocator: ScratchAllocator) -> memoryview:
    """Write the UTF-8 check string into a scratch buffer of exactly its size."""
    chunks = [raw.encode("utf-8") for raw in _sorted_raw(parsed)]
    size = sum(len(c) for c in chunks) + max(len(chunks) - 1, 0)
    buf = allocator.allocate(size)

    offset = 0
    for i, chunk in enumerate(chunks):
        if i:
            buf[offset] = 0x0A
            offset += 1
        buf[offset:offset + len(chunk)] = chunk
        offset += len(chunk)
    return buf
