"""Index configuration models and the option vocabulary operators write."""

from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from indexconf.config.indexing.identity import IndexMetadata, TableMetadata

# Option names as operators write them in the index definition. Do not rename.
REFRESH_SECONDS_OPTION = "refresh_seconds"
RAM_BUFFER_MB_OPTION = "ram_buffer_mb"
MAX_MERGE_MB_OPTION = "max_merge_mb"
MAX_CACHED_MB_OPTION = "max_cached_mb"
INDEXING_THREADS_OPTION = "indexing_threads"
INDEXING_QUEUES_SIZE_OPTION = "indexing_queues_size"
EXCLUDED_DATA_CENTERS_OPTION = "excluded_data_centers"
DIRECTORY_PATH_OPTION = "directory_path"
SCHEMA_OPTION = "schema"

RECOGNIZED_OPTIONS = frozenset(
    {
        REFRESH_SECONDS_OPTION,
        RAM_BUFFER_MB_OPTION,
        MAX_MERGE_MB_OPTION,
        MAX_CACHED_MB_OPTION,
        INDEXING_THREADS_OPTION,
        INDEXING_QUEUES_SIZE_OPTION,
        EXCLUDED_DATA_CENTERS_OPTION,
        DIRECTORY_PATH_OPTION,
        SCHEMA_OPTION,
    }
)

# Sub-directory of the table's data directory holding search indexes
INDEXES_DIR_NAME = "lucene"


class IndexDefaults(BaseModel):
    """Values used for every option the operator leaves out."""

    model_config = ConfigDict(frozen=True)

    refresh_seconds: float = 60.0
    ram_buffer_mb: int = 64
    max_merge_mb: int = 5
    max_cached_mb: int = 30
    indexing_threads: int = 0
    indexing_queues_size: int = 50
    excluded_data_centers: tuple[str, ...] = ()


DEFAULTS = IndexDefaults()


@runtime_checkable
class CompiledSchema(Protocol):
    """What the resolver needs from a built schema."""

    def validate_against(self, table: TableMetadata) -> None: ...


class IndexConfig(BaseModel):
    """
    Validated configuration of one search index. Never mutated: altering the index
    options builds a new IndexConfig.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    index_schema: CompiledSchema = Field(..., description="Built schema, checked against the table columns")
    path: Path | None = Field(default=None, description="Index directory; None when only validating")
    refresh_seconds: float = Field(..., gt=0, allow_inf_nan=False)
    ram_buffer_mb: int = Field(..., gt=0)
    max_merge_mb: int = Field(..., gt=0)
    max_cached_mb: int = Field(..., gt=0)
    indexing_threads: int = Field(..., description="0 means the engine's default concurrency")
    indexing_queues_size: int = Field(..., gt=0)
    excluded_data_centers: tuple[str, ...] = Field(default=())

    @classmethod
    def from_index(cls, table: TableMetadata, index: IndexMetadata) -> "IndexConfig":
        """Resolve the options stored in the index definition."""
        from indexconf.config.indexing.resolver import resolve

        return resolve(index.options, table, index)

    def describe(self) -> dict[str, Any]:
        """Everything but the schema, for logs and API responses."""
        return {
            "refresh_seconds": self.refresh_seconds,
            "ram_buffer_mb": self.ram_buffer_mb,
            "max_merge_mb": self.max_merge_mb,
            "max_cached_mb": self.max_cached_mb,
            "indexing_threads": self.indexing_threads,
            "indexing_queues_size": self.indexing_queues_size,
            "excluded_data_centers": list(self.excluded_data_centers),
            "path": str(self.path) if self.path is not None else None,
        }
