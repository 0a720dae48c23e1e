import argparse
import configparser
import logging
import sys

from aiohttp import web

from .config import DEFAULT_MAX_AGE_SECONDS, Config, load_config
from .errors import StructuralError
from .web_api import create_web_app, is_fresh
from .web_auth import validate_init_data


logger = logging.getLogger("miniapp_auth")

EXIT_OK = 0
EXIT_REJECTED = 1
EXIT_MALFORMED = 2


def _read_config(path: str) -> Config:
    config_file = configparser.ConfigParser()
    if not config_file.read(path):
        raise ValueError(f"cannot read config file '{path}'")
    return load_config(config_file)


def _check_config(args) -> Config:
    """Config for `check`: --token overrides the file, and alone needs no file."""
    if args.token:
        config = _read_config(args.config) if args.config else Config(bot_token=args.token)
        config.bot_token = args.token
    else:
        config = _read_config(args.config or "config.ini")
    if args.max_age is not None:
        config.max_age_seconds = args.max_age
    return config


def check_command(args) -> int:
    config = _check_config(args)

    init_data = args.init_data
    if init_data in (None, "-"):
        init_data = sys.stdin.read()
    init_data = init_data.strip()

    try:
        result = validate_init_data(
            init_data, config.bot_token,
            scratch_threshold=config.scratch_threshold,
            strict=config.strict_decoding,
        )
    except StructuralError as e:
        print(f"malformed: {e}")
        return EXIT_MALFORMED

    if not result.is_valid:
        print("invalid")
        return EXIT_REJECTED
    if not is_fresh(result.issued_at, config.max_age_seconds):
        print(f"expired (issued at {result.issued_at.isoformat()})")
        return EXIT_REJECTED
    print(f"valid (issued at {result.issued_at.isoformat()})")
    return EXIT_OK


def serve_command(args) -> int:
    config = _read_config(args.config or "config.ini")
    app = create_web_app(config)
    logger.info("API server starting on port %d", config.api_port or 8080)
    web.run_app(app, port=config.api_port or 8080)
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Telegram Mini App init data validator")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check", help="Validate one initData string")
    check.add_argument("-c", "--config", type=str, default=None, help="Path to config file")
    check.add_argument("--token", type=str, default=None, help="Bot token (overrides config)")
    check.add_argument("--max-age", type=int, default=None,
                       help=f"Maximum age in seconds (default {DEFAULT_MAX_AGE_SECONDS})")
    check.add_argument("init_data", nargs="?", default=None, help="initData string, or - for stdin")
    check.set_defaults(func=check_command)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("-c", "--config", type=str, default=None, help="Path to config file")
    serve.set_defaults(func=serve_command)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args)
    except ValueError as e:
        parser.error(str(e))


if __name__ == "__main__":
    sys.exit(main())
