"""Mapping of the signed `user` field to a TelegramUser.

Only meaningful once the payload has been validated; this module does not
check signatures itself.
"""

import json
from dataclasses import asdict, dataclass

from .decoding import decode
from .errors import InvalidUserData
from .pairs import split_parameters


USER_KEY = "user"

_OPTIONAL_STR = ("last_name", "username", "language_code", "photo_url")
_OPTIONAL_BOOL = ("is_premium", "is_bot", "allows_write_to_pm")


@dataclass(frozen=True)
class TelegramUser:
    id: int
    first_name: str
    last_name: str | None = None
    username: str | None = None
    language_code: str | None = None
    photo_url: str | None = None
    is_premium: bool | None = None
    is_bot: bool | None = None
    allows_write_to_pm: bool | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "TelegramUser":
        if not isinstance(data, dict):
            raise InvalidUserData("user data must be a JSON object")

        user_id = data.get("id")
        # bool is an int subclass
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise InvalidUserData("user id is missing or not an integer")
        first_name = data.get("first_name")
        if not isinstance(first_name, str):
            raise InvalidUserData("user first_name is missing")

        kwargs = {}
        for name in _OPTIONAL_STR:
            value = data.get(name)
            if value is not None:
                if not isinstance(value, str):
                    raise InvalidUserData(f"user {name} must be a string")
                kwargs[name] = value
        for name in _OPTIONAL_BOOL:
            value = data.get(name)
            if value is not None:
                if not isinstance(value, bool):
                    raise InvalidUserData(f"user {name} must be a boolean")
                kwargs[name] = value

        return cls(id=user_id, first_name=first_name, **kwargs)

    def to_dict(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}


def user_from_init_data(init_data: str) -> TelegramUser | None:
    """Extract the user from raw initData, or None if it carries no `user`."""
    for param in split_parameters(decode(init_data).text):
        if param.key != USER_KEY:
            continue
        try:
            data = json.loads(param.value)
        except json.JSONDecodeError as e:
            raise InvalidUserData(f"user is not valid JSON: {e}") from e
        return TelegramUser.from_dict(data)
    return None
