"""Table and index identities handed to the resolver, and the Known/Unknown wrapper for them."""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union
from uuid import UUID, uuid5

from pydantic import BaseModel, ConfigDict, Field, model_validator

T = TypeVar("T")

# Namespace for table ids derived from "<keyspace>.<table>"
TABLE_ID_NAMESPACE = UUID("8f6b3a52-3c1e-5d0a-9e4b-6f2d1c7a9b30")


class TableMetadata(BaseModel):
    """The indexed table: where it lives and which columns (CQL type names) it has."""

    model_config = ConfigDict(frozen=True)

    keyspace: str = Field(..., min_length=1, description="Keyspace name")
    name: str = Field(..., min_length=1, description="Table name")
    id: UUID = Field(..., description="Table id, used in the data directory name. Derived from keyspace and name when omitted")
    columns: dict[str, str] = Field(default_factory=dict, description="Column name -> CQL type")

    @model_validator(mode="before")
    @classmethod
    def derive_id(cls, data: Any) -> Any:
        """Fill a missing id from keyspace and name so the same table always gets the same directory."""
        if isinstance(data, dict) and data.get("id") is None:
            keyspace, name = data.get("keyspace"), data.get("name")
            if isinstance(keyspace, str) and isinstance(name, str):
                data = {**data, "id": uuid5(TABLE_ID_NAMESPACE, f"{keyspace}.{name}")}
        return data

    def column_type(self, column: str) -> str | None:
        """Return the CQL type of the column, or None if the table has no such column."""
        return self.columns.get(column)


class IndexMetadata(BaseModel):
    """A search index declared on a table."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Index name")
    options: dict[str, str] = Field(default_factory=dict, description="Raw option map as written by the operator")


class Unknown:
    """Marker for an identity that is not available yet (validate-only mode)."""

    _instance: "Unknown | None" = None

    def __new__(cls) -> "Unknown":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNKNOWN"


UNKNOWN = Unknown()


@dataclass(frozen=True)
class Known(Generic[T]):
    """An identity that is available."""

    value: T


Identity = Union[Known[T], Unknown]


def as_identity(value: "T | Known[T] | Unknown | None") -> "Known[T] | Unknown":
    """Wrap a possibly-missing identity. None becomes UNKNOWN; wrapped values pass through."""
    if value is None:
        return UNKNOWN
    if isinstance(value, (Known, Unknown)):
        return value
    return Known(value)
