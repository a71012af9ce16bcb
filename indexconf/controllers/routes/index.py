"""POST /index-options/validate and /index-options/resolve: check raw index options before use."""

from fastapi import APIRouter, Depends, HTTPException

from indexconf.config.indexing.errors import ConfigurationError
from indexconf.config.indexing.identity import IndexMetadata
from indexconf.config.indexing.resolver import collect_errors, resolve
from indexconf.config.logging import get_logger
from indexconf.controllers.schema.index import (
    OptionError,
    ResolveRequest,
    ResolveResponse,
    ValidateRequest,
    ValidateResponse,
)
from indexconf.resources.storage.directories import DataDirectories, get_directories
from indexconf.schema.models import Schema

logger = get_logger(__name__)

router = APIRouter(prefix="/index-options", tags=["index-options"])


@router.post("/validate", response_model=ValidateResponse)
async def validate_index_options(body: ValidateRequest) -> ValidateResponse:
    """
    Check options the way CREATE/ALTER INDEX would, without an index.
    Reports every rejected option rather than only the first one.
    """
    errors = collect_errors(body.options, body.table)
    if errors:
        logger.info(
            "Index options rejected",
            extra={"options": sorted(e.option for e in errors)},
        )
    return ValidateResponse(
        valid=not errors,
        errors=[OptionError(**e.to_dict()) for e in errors],
    )


@router.post("/resolve", response_model=ResolveResponse)
async def resolve_index_options(
    body: ResolveRequest,
    directories: DataDirectories = Depends(get_directories),
) -> ResolveResponse:
    """Resolve options for a named index on a table. 400 with the first rejected option."""
    index = IndexMetadata(name=body.index_name, options=body.options)
    try:
        config = resolve(body.options, body.table, index, directories=directories)
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=e.to_dict()) from e

    schema = config.index_schema
    mapped_columns = sorted(schema.mapped_columns) if isinstance(schema, Schema) else []
    return ResolveResponse(
        index_name=index.name,
        mapped_columns=mapped_columns,
        **config.describe(),
    )
