"""URL-decoding of the raw init data string.

Handles `+` as space, `%XX` byte escapes and legacy `%uXXXX` escapes.
Consecutive high-bit bytes are collected in a scratch buffer and decoded as
UTF-8 together, so a multi-byte character spread over several `%XX`
escapes comes out as one character.
"""

import re
from dataclasses import dataclass

from .errors import DecodeError
from .scratch import ScratchAllocator, make_allocator


_SPECIAL = re.compile(r"[%+]")
_SURROGATE = re.compile("[\ud800-\udfff]")
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


@dataclass(frozen=True)
class DecodedText:
    text: str
    byte_count: int  # UTF-8 length of text
    char_count: int


def _is_hex(raw: str, start: int, count: int) -> bool:
    end = start + count
    return end <= len(raw) and all(c in _HEX_DIGITS for c in raw[start:end])


def _flush(pending: memoryview, length: int, out: list[str]) -> int:
    """Decode the pending UTF-8 bytes into `out` and return the new length (0)."""
    if length:
        out.append(bytes(pending[:length]).decode("utf-8", errors="replace"))
    return 0


def _replace_lone_surrogates(text: str) -> str:
    """Join valid surrogate pairs and turn unmatched halves into U+FFFD."""
    if not _SURROGATE.search(text):
        return text
    return text.encode("utf-16-le", "surrogatepass").decode("utf-16-le", errors="replace")


def decode(raw: str, allocator: ScratchAllocator | None = None, strict: bool = False) -> DecodedText:
    """Percent-decode `raw`.

    Malformed escapes are kept literally unless `strict` is set, in which
    case DecodeError is raised with the offset of the offending `%`.
    """
    if allocator is None:
        allocator = make_allocator()

    # Each pending byte consumes at least one '%' of the input
    pending = allocator.allocate(raw.count("%"))
    pending_len = 0
    out: list[str] = []

    i = 0
    n = len(raw)
    while i < n:
        match = _SPECIAL.search(raw, i)
        if match is None:
            pending_len = _flush(pending, pending_len, out)
            out.append(raw[i:])
            break

        pos = match.start()
        if pos > i:
            pending_len = _flush(pending, pending_len, out)
            out.append(raw[i:pos])
        i = pos

        if raw[i] == "+":
            pending_len = _flush(pending, pending_len, out)
            out.append(" ")
            i += 1
            continue

        if raw.startswith("u", i + 1) and _is_hex(raw, i + 2, 4):
            pending_len = _flush(pending, pending_len, out)
            out.append(chr(int(raw[i + 2:i + 6], 16)))
            i += 6
            continue

        if _is_hex(raw, i + 1, 2):
            value = int(raw[i + 1:i + 3], 16)
            if value < 0x80:
                pending_len = _flush(pending, pending_len, out)
                out.append(chr(value))
            else:
                pending[pending_len] = value
                pending_len += 1
            i += 3
            continue

        if strict:
            raise DecodeError(i)
        pending_len = _flush(pending, pending_len, out)
        out.append("%")
        i += 1

    _flush(pending, pending_len, out)

    text = _replace_lone_surrogates("".join(out))
    return DecodedText(text=text, byte_count=len(text.encode("utf-8")), char_count=len(text))
