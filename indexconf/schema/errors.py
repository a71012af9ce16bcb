"""Errors raised by the schema builder."""


class SchemaError(ValueError):
    """Raised when a schema definition is malformed or does not fit the table's columns."""
