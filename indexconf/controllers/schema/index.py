"""Request/response schemas for the /index-options endpoints."""

from pydantic import BaseModel, Field

from indexconf.config.indexing.identity import TableMetadata


class OptionError(BaseModel):
    """One rejected option."""

    option: str = Field(..., description="Option name, e.g. ram_buffer_mb or schema")
    message: str = Field(..., description="Why the value was rejected")


class ValidateRequest(BaseModel):
    """POST /index-options/validate request body."""

    options: dict[str, str] = Field(..., description="Raw index options as written by the operator")
    table: TableMetadata | None = Field(
        default=None, description="Indexed table; when omitted the schema is not checked against columns"
    )


class ValidateResponse(BaseModel):
    """POST /index-options/validate response body."""

    valid: bool = Field(..., description="True when no option was rejected")
    errors: list[OptionError] = Field(default_factory=list, description="Every rejected option, in checking order")


class ResolveRequest(BaseModel):
    """POST /index-options/resolve request body."""

    options: dict[str, str] = Field(..., description="Raw index options as written by the operator")
    table: TableMetadata = Field(..., description="Indexed table")
    index_name: str = Field(..., min_length=1, max_length=255, description="Index name")


class ResolveResponse(BaseModel):
    """POST /index-options/resolve response body: the resolved configuration."""

    index_name: str
    path: str | None
    refresh_seconds: float
    ram_buffer_mb: int
    max_merge_mb: int
    max_cached_mb: int
    indexing_threads: int
    indexing_queues_size: int
    excluded_data_centers: list[str]
    mapped_columns: list[str] = Field(default_factory=list, description="Table columns read by the schema")
