"""
Field mappers: how a schema field is fed from one or more table columns.
Each mapper declares the CQL column types it can index.
"""

from abc import abstractmethod
from typing import Annotated, ClassVar, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

TEXTUAL_TYPES = frozenset({"ascii", "text", "varchar"})
NUMERIC_TYPES = frozenset({"tinyint", "smallint", "int", "bigint", "varint", "float", "double", "decimal"})
DATE_TYPES = frozenset({"date", "timestamp", "timeuuid"})

DEFAULT_DATE_PATTERN = "yyyy/MM/dd HH:mm:ss.SSS Z"


def _split_top_level(args: str) -> list[str]:
    """Split 'a,map<b,c>' on commas that are not nested inside angle brackets."""
    parts: list[str] = []
    depth = 0
    start = 0
    for i, ch in enumerate(args):
        if ch == "<":
            depth += 1
        elif ch == ">":
            depth -= 1
        elif ch == "," and depth == 0:
            parts.append(args[start:i])
            start = i + 1
    parts.append(args[start:])
    return parts


def base_cql_type(cql_type: str) -> str:
    """
    Reduce a CQL type to the type a mapper sees: frozen<T>, list<T> and set<T> map to T,
    map<K,V> maps to V. Case and whitespace are normalized.
    """
    t = "".join(cql_type.split()).lower()
    while t.endswith(">"):
        if t.startswith(("frozen<", "list<", "set<")):
            t = t[t.index("<") + 1 : -1]
        elif t.startswith("map<"):
            t = _split_top_level(t[4:-1])[-1]
        else:
            break
    return t


class _Mapper(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    supported_types: ClassVar[frozenset[str]] = frozenset()

    validated: bool = Field(default=False, description="Reject writes whose value cannot be indexed")

    @abstractmethod
    def columns(self, field: str) -> tuple[str, ...]:
        """Names of the table columns this mapper reads."""

    def supports(self, cql_type: str) -> bool:
        return base_cql_type(cql_type) in self.supported_types


class _SingleColumnMapper(_Mapper):
    column: str | None = Field(default=None, min_length=1, description="Source column; defaults to the field name")

    def columns(self, field: str) -> tuple[str, ...]:
        return (self.column or field,)


class StringMapper(_SingleColumnMapper):
    supported_types: ClassVar[frozenset[str]] = (
        TEXTUAL_TYPES | NUMERIC_TYPES | DATE_TYPES | frozenset({"boolean", "inet", "uuid"})
    )

    type: Literal["string"]
    case_sensitive: bool = True


class TextMapper(_SingleColumnMapper):
    supported_types: ClassVar[frozenset[str]] = TEXTUAL_TYPES

    type: Literal["text"]
    analyzer: str | None = Field(default=None, min_length=1)


class IntegerMapper(_SingleColumnMapper):
    supported_types: ClassVar[frozenset[str]] = NUMERIC_TYPES | TEXTUAL_TYPES

    type: Literal["integer"]


class BigIntMapper(_SingleColumnMapper):
    supported_types: ClassVar[frozenset[str]] = NUMERIC_TYPES | TEXTUAL_TYPES

    type: Literal["bigint"]


class FloatMapper(_SingleColumnMapper):
    supported_types: ClassVar[frozenset[str]] = NUMERIC_TYPES | TEXTUAL_TYPES

    type: Literal["float"]


class DoubleMapper(_SingleColumnMapper):
    supported_types: ClassVar[frozenset[str]] = NUMERIC_TYPES | TEXTUAL_TYPES

    type: Literal["double"]


class BooleanMapper(_SingleColumnMapper):
    supported_types: ClassVar[frozenset[str]] = TEXTUAL_TYPES | frozenset({"boolean"})

    type: Literal["boolean"]


class DateMapper(_SingleColumnMapper):
    supported_types: ClassVar[frozenset[str]] = DATE_TYPES | TEXTUAL_TYPES | frozenset({"int", "bigint"})

    type: Literal["date"]
    pattern: str = Field(default=DEFAULT_DATE_PATTERN, min_length=1)


class UUIDMapper(_SingleColumnMapper):
    supported_types: ClassVar[frozenset[str]] = TEXTUAL_TYPES | frozenset({"uuid", "timeuuid"})

    type: Literal["uuid"]


class InetMapper(_SingleColumnMapper):
    supported_types: ClassVar[frozenset[str]] = TEXTUAL_TYPES | frozenset({"inet"})

    type: Literal["inet"]


class BlobMapper(_SingleColumnMapper):
    supported_types: ClassVar[frozenset[str]] = TEXTUAL_TYPES | frozenset({"blob"})

    type: Literal["blob"]


class GeoPointMapper(_Mapper):
    """Point built from a latitude and a longitude column."""

    supported_types: ClassVar[frozenset[str]] = NUMERIC_TYPES | TEXTUAL_TYPES

    type: Literal["geo_point"]
    latitude: str = Field(..., min_length=1)
    longitude: str = Field(..., min_length=1)
    max_levels: int = Field(default=11, ge=1, le=24)

    def columns(self, field: str) -> tuple[str, ...]:
        return (self.latitude, self.longitude)


Mapper = Annotated[
    Union[
        StringMapper,
        TextMapper,
        IntegerMapper,
        BigIntMapper,
        FloatMapper,
        DoubleMapper,
        BooleanMapper,
        DateMapper,
        UUIDMapper,
        InetMapper,
        BlobMapper,
        GeoPointMapper,
    ],
    Field(discriminator="type"),
]
