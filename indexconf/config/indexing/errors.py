"""Errors raised while resolving index options."""

from typing import Any


class ConfigurationError(ValueError):
    """An index option is malformed, out of range, missing, or rejected by the schema builder."""

    def __init__(self, option: str, message: str):
        super().__init__(message)
        self.option = option
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"option": self.option, "message": self.message}
