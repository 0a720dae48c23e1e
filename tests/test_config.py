"""Tests for loading config.ini."""

import configparser

import pytest

from miniapp_auth.config import (
    DEFAULT_AUTH_SCHEME, DEFAULT_MAX_AGE_SECONDS, Config, load_config,
)
from miniapp_auth.scratch import DEFAULT_SCRATCH_THRESHOLD


def _parse(text: str) -> configparser.ConfigParser:
    c = configparser.ConfigParser()
    c.read_string(text)
    return c


class TestLoadConfig:
    def test_minimal(self):
        config = load_config(_parse("[TELEGRAM]\nbot_token = 1:abc\n"))
        assert config == Config(bot_token="1:abc")
        assert config.max_age_seconds == DEFAULT_MAX_AGE_SECONDS
        assert config.scratch_threshold == DEFAULT_SCRATCH_THRESHOLD
        assert config.auth_scheme == DEFAULT_AUTH_SCHEME
        assert config.strict_decoding is False

    def test_full(self):
        config = load_config(_parse(
            "[TELEGRAM]\nbot_token = 1:abc\n"
            "[AUTH]\nmax_age_seconds = 60\nscratch_threshold = 0\n"
            "auth_scheme = TMiniApp\nstrict_decoding = yes\n"
            "[API]\nport = 8081\ncors_origin = https://example.org\n"
        ))
        assert config.max_age_seconds == 60
        assert config.scratch_threshold == 0
        assert config.auth_scheme == "TMiniApp"
        assert config.strict_decoding is True
        assert config.api_port == 8081
        assert config.cors_origin == "https://example.org"

    def test_missing_section(self):
        with pytest.raises(ValueError, match="TELEGRAM"):
            load_config(_parse("[AUTH]\nmax_age_seconds = 60\n"))

    def test_empty_token(self):
        with pytest.raises(ValueError, match="bot_token"):
            load_config(_parse("[TELEGRAM]\nbot_token =\n"))

    def test_negative_threshold(self):
        with pytest.raises(ValueError, match="scratch_threshold"):
            load_config(_parse("[TELEGRAM]\nbot_token = t\n[AUTH]\nscratch_threshold = -1\n"))

    def test_non_positive_max_age(self):
        with pytest.raises(ValueError, match="max_age_seconds"):
            load_config(_parse("[TELEGRAM]\nbot_token = t\n[AUTH]\nmax_age_seconds = 0\n"))

    def test_non_integer(self):
        with pytest.raises(ValueError, match="expected an integer"):
            load_config(_parse("[TELEGRAM]\nbot_token = t\n[AUTH]\nmax_age_seconds = soon\n"))

    def test_bad_bool(self):
        with pytest.raises(ValueError, match="strict_decoding"):
            load_config(_parse("[TELEGRAM]\nbot_token = t\n[AUTH]\nstrict_decoding = maybe\n"))
