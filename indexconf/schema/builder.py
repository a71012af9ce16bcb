"""Build a compiled Schema from its JSON text."""

import json
from typing import Any

from pydantic import ValidationError

from indexconf.schema.errors import SchemaError
from indexconf.schema.models import Schema


def _format_validation_error(e: ValidationError) -> str:
    """One line per problem: 'fields.age.type: Input should be ...'."""
    parts = []
    for err in e.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(parts)


class SchemaBuilder:
    """Holds a decoded schema document until it is built."""

    def __init__(self, document: dict[str, Any]):
        self._document = document

    @classmethod
    def from_json(cls, text: str) -> "SchemaBuilder":
        """Decode schema JSON. Raises SchemaError if it is not a JSON object."""
        try:
            document = json.loads(text)
        except json.JSONDecodeError as e:
            raise SchemaError(f"Unparseable JSON schema: {e.msg} at line {e.lineno} column {e.colno}") from e
        if not isinstance(document, dict):
            raise SchemaError(f"JSON schema must be an object, got {type(document).__name__}")
        return cls(document)

    def build(self) -> Schema:
        """Validate the document and return the compiled Schema. Raises SchemaError."""
        try:
            return Schema.model_validate(self._document)
        except ValidationError as e:
            raise SchemaError(_format_validation_error(e)) from e


def build_schema(text: str) -> Schema:
    """Default schema builder handed to the resolver."""
    return SchemaBuilder.from_json(text).build()
