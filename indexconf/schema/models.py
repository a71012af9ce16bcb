"""Compiled index schema: which columns are indexed, and how."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from indexconf.config.indexing.identity import TableMetadata
from indexconf.schema.analyzers import PREBUILT_ANALYZERS, Analyzer
from indexconf.schema.errors import SchemaError
from indexconf.schema.mappers import Mapper, TextMapper


class Schema(BaseModel):
    """Field mappings plus the analyzers they use. Immutable once built."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    default_analyzer: str = Field(default="standard", min_length=1)
    analyzers: dict[str, Analyzer] = Field(default_factory=dict)
    fields: dict[str, Mapper] = Field(..., min_length=1)

    @model_validator(mode="after")
    def check_analyzer_references(self):
        """Every analyzer name used must be prebuilt or declared in `analyzers`."""
        known = PREBUILT_ANALYZERS | set(self.analyzers)
        if self.default_analyzer not in known:
            raise ValueError(f"Unknown default analyzer {self.default_analyzer!r}")
        for name, mapper in self.fields.items():
            if isinstance(mapper, TextMapper) and mapper.analyzer and mapper.analyzer not in known:
                raise ValueError(f"Unknown analyzer {mapper.analyzer!r} in mapper {name!r}")
        return self

    @property
    def mapped_columns(self) -> frozenset[str]:
        """Every table column read by at least one field."""
        return frozenset(col for name, mapper in self.fields.items() for col in mapper.columns(name))

    def validate_against(self, table: TableMetadata) -> None:
        """
        Check that every mapped column exists in the table with a type its mapper supports.
        Raises SchemaError on the first mismatch.
        """
        for name, mapper in self.fields.items():
            for column in mapper.columns(name):
                cql_type = table.column_type(column)
                if cql_type is None:
                    raise SchemaError(f"No column definition '{column}' for mapper '{name}'")
                if not mapper.supports(cql_type):
                    raise SchemaError(
                        f"'{mapper.type}' mapper '{name}' does not support type '{cql_type}' of column '{column}'"
                    )
