from datetime import datetime, timezone

import pytest

from miniapp_auth.auth_date import parse_auth_date
from miniapp_auth.errors import InvalidAuthDate


class TestParseAuthDate:
    def test_valid(self):
        seconds, issued_at = parse_auth_date("1731861317")
        assert seconds == 1731861317
        assert issued_at == datetime(2024, 11, 17, 16, 35, 17, tzinfo=timezone.utc)

    def test_epoch(self):
        assert parse_auth_date("0")[1] == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_signed(self):
        assert parse_auth_date("-60")[0] == -60
        assert parse_auth_date("+60")[0] == 60

    def test_leading_zeros(self):
        assert parse_auth_date("007")[0] == 7

    @pytest.mark.parametrize("value", [
        "", "abc", "1.5", "1_000", " 1", "1 ", "0x10", "١٢٣", "+", "--1",
    ])
    def test_not_an_integer(self, value):
        with pytest.raises(InvalidAuthDate) as exc:
            parse_auth_date(value)
        assert exc.value.value == value

    def test_beyond_int64(self):
        with pytest.raises(InvalidAuthDate):
            parse_auth_date(str(2 ** 63))

    def test_beyond_datetime_range(self):
        with pytest.raises(InvalidAuthDate):
            parse_auth_date("253402300800")  # 10000-01-01
