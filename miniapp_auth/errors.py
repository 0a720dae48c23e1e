"""Error taxonomy for init data validation.

StructuralError subclasses mean the payload is malformed (a bad request).
SignatureMismatch and InitDataExpired are security outcomes (unauthorized).
"""


class InitDataError(Exception):
    pass


class StructuralError(InitDataError):
    pass


class MissingParameter(StructuralError):
    def __init__(self, key: str):
        super().__init__(f"Key '{key}' not found")
        self.key = key


class MalformedParameter(StructuralError):
    def __init__(self, segment: str):
        super().__init__(f"Parameter '{segment}' is not a key=value pair")
        self.segment = segment


class DuplicateParameter(StructuralError):
    def __init__(self, key: str):
        super().__init__(f"Key '{key}' occurs more than once")
        self.key = key


class InvalidAuthDate(StructuralError):
    def __init__(self, value: str):
        super().__init__(f"Failed to parse auth_date '{value}'")
        self.value = value


class DecodeError(StructuralError):
    def __init__(self, position: int):
        super().__init__(f"Invalid percent-escape at position {position}")
        self.position = position


class InvalidUserData(StructuralError):
    pass


class SignatureMismatch(InitDataError):
    def __init__(self):
        super().__init__("init data signature is invalid")


class InitDataExpired(InitDataError):
    def __init__(self):
        super().__init__("init data expired")
