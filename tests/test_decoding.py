"""Tests for percent-decoding of raw init data."""

import pytest

from miniapp_auth.decoding import DecodedText, decode
from miniapp_auth.errors import DecodeError
from miniapp_auth.scratch import HeapAllocator, ThresholdAllocator


class TestDecode:
    def test_plain_text_unchanged(self):
        assert decode("auth_date=1731861317").text == "auth_date=1731861317"

    def test_empty(self):
        assert decode("") == DecodedText(text="", byte_count=0, char_count=0)

    def test_plus_is_space(self):
        assert decode("a+b++c").text == "a b  c"

    def test_encoded_plus_stays_plus(self):
        assert decode("a%2Bb").text == "a+b"

    def test_ascii_escapes(self):
        assert decode("%7B%22id%22%3A1%7D").text == '{"id":1}'

    def test_lowercase_hex(self):
        assert decode("%7b%7d").text == "{}"

    def test_multibyte_utf8(self):
        assert decode("%D0%9F%D1%80").text == "Пр"

    def test_utf8_between_ascii(self):
        assert decode("a%C3%A9b").text == "aéb"

    def test_four_byte_utf8(self):
        assert decode("%F0%9F%98%80").text == "😀"

    def test_invalid_utf8_replaced(self):
        assert decode("x%FFy").text == "x\ufffdy"

    def test_percent_u_escape(self):
        assert decode("%u0041%u0436").text == "Aж"

    def test_percent_u_surrogate_pair_joined(self):
        assert decode("%uD83D%uDE00").text == "😀"

    def test_lone_high_surrogate_replaced(self):
        assert decode("%uD83Dx").text == "\ufffdx"

    def test_lone_low_surrogate_replaced(self):
        assert decode("a%uDE00").text == "a\ufffd"

    def test_uppercase_u_not_an_escape(self):
        assert decode("%U0041").text == "%U0041"

    @pytest.mark.parametrize("raw", ["100%", "%4", "%zz", "%u12", "%%41"])
    def test_malformed_escape_kept_literally(self, raw):
        expected = {"%%41": "%A"}.get(raw, raw)
        assert decode(raw).text == expected

    @pytest.mark.parametrize("raw,position", [("100%", 3), ("a%zz", 1), ("%u12", 0)])
    def test_strict_rejects_malformed_escape(self, raw, position):
        with pytest.raises(DecodeError) as exc:
            decode(raw, strict=True)
        assert exc.value.position == position

    def test_strict_accepts_valid_input(self):
        assert decode("a%20b%u0041", strict=True).text == "a bA"

    def test_counts(self):
        decoded = decode("%D0%9F%D1%80+1")
        assert decoded.text == "Пр 1"
        assert decoded.char_count == 4
        assert decoded.byte_count == 6


class TestDecodeBuffers:
    RAW = "user=%7B%22first_name%22%3A%22%D0%A1%D0%B5%D1%80%D0%B3%D0%B5%D0%B9%22%7D&x=" + "%E2%82%AC" * 500

    def test_same_output_for_every_allocator(self):
        expected = decode(self.RAW, HeapAllocator())
        assert decode(self.RAW, ThresholdAllocator(0)) == expected
        assert decode(self.RAW, ThresholdAllocator(16)) == expected
        assert decode(self.RAW, ThresholdAllocator(1 << 16)) == expected
        assert decode(self.RAW) == expected

    def test_large_input_uses_fallback(self):
        allocator = ThresholdAllocator(64)
        decoded = decode(self.RAW, allocator)
        assert decoded.text.endswith("€" * 500)
        assert allocator.fallbacks == 1

    def test_no_state_between_calls(self):
        allocator = ThresholdAllocator(4096)
        decode("%D0%9F%D0%9F%D0%9F", allocator)
        assert decode("%D1%80", allocator).text == "р"
