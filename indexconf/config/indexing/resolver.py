"""
Turn the raw option map of a search index into a validated IndexConfig.

Options are checked one at a time in a fixed order: refresh_seconds, ram_buffer_mb,
max_merge_mb, max_cached_mb, indexing_threads, indexing_queues_size,
excluded_data_centers, directory_path, schema. resolve() and validate() stop at the
first bad option; collect_errors() runs every check and returns all failures.
The option map is only read, never modified or retained.
"""

import math
import re
from pathlib import Path
from typing import Any, Callable, Mapping

from indexconf.config.indexing.errors import ConfigurationError
from indexconf.config.indexing.identity import (
    UNKNOWN,
    Identity,
    IndexMetadata,
    Known,
    TableMetadata,
    Unknown,
    as_identity,
)
from indexconf.config.indexing.models import (
    DEFAULTS,
    DIRECTORY_PATH_OPTION,
    EXCLUDED_DATA_CENTERS_OPTION,
    INDEXES_DIR_NAME,
    INDEXING_QUEUES_SIZE_OPTION,
    INDEXING_THREADS_OPTION,
    MAX_CACHED_MB_OPTION,
    MAX_MERGE_MB_OPTION,
    RAM_BUFFER_MB_OPTION,
    RECOGNIZED_OPTIONS,
    REFRESH_SECONDS_OPTION,
    SCHEMA_OPTION,
    CompiledSchema,
    IndexConfig,
)
from indexconf.config.logging import get_logger, log_extra
from indexconf.resources.storage.directories import DirectoryNaming, get_directories
from indexconf.schema.builder import build_schema

logger = get_logger(__name__)

SchemaBuilderFn = Callable[[str], CompiledSchema]
TableArg = TableMetadata | Known[TableMetadata] | Unknown | None
IndexArg = IndexMetadata | Known[IndexMetadata] | Unknown | None

# Signed 32-bit decimal integers, no surrounding whitespace
_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1
_FLOAT_PATTERN = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def _parse_int(raw: str) -> int | None:
    if not _INT_PATTERN.fullmatch(raw):
        return None
    value = int(raw)
    if value < _INT_MIN or value > _INT_MAX:
        return None
    return value


def _parse_float(raw: str) -> float | None:
    text = raw.strip()
    if not _FLOAT_PATTERN.fullmatch(text):
        return None
    value = float(text)
    return value if math.isfinite(value) else None


def _positive_int(options: Mapping[str, str], option: str, default: int) -> int:
    raw = options.get(option)
    if raw is None:
        return default
    value = _parse_int(raw)
    if value is None:
        raise ConfigurationError(option, f"'{option}' must be a strictly positive integer")
    if value <= 0:
        raise ConfigurationError(option, f"'{option}' must be strictly positive")
    return value


def parse_refresh_seconds(options: Mapping[str, str]) -> float:
    raw = options.get(REFRESH_SECONDS_OPTION)
    if raw is None:
        return DEFAULTS.refresh_seconds
    value = _parse_float(raw)
    if value is None:
        raise ConfigurationError(
            REFRESH_SECONDS_OPTION, f"'{REFRESH_SECONDS_OPTION}' must be a strictly positive double"
        )
    if value <= 0:
        raise ConfigurationError(REFRESH_SECONDS_OPTION, f"'{REFRESH_SECONDS_OPTION}' must be strictly positive")
    return value


def parse_ram_buffer_mb(options: Mapping[str, str]) -> int:
    return _positive_int(options, RAM_BUFFER_MB_OPTION, DEFAULTS.ram_buffer_mb)


def parse_max_merge_mb(options: Mapping[str, str]) -> int:
    return _positive_int(options, MAX_MERGE_MB_OPTION, DEFAULTS.max_merge_mb)


def parse_max_cached_mb(options: Mapping[str, str]) -> int:
    return _positive_int(options, MAX_CACHED_MB_OPTION, DEFAULTS.max_cached_mb)


def parse_indexing_threads(options: Mapping[str, str]) -> int:
    """Any integer is accepted; 0 and negatives are left to the engine to interpret."""
    raw = options.get(INDEXING_THREADS_OPTION)
    if raw is None:
        return DEFAULTS.indexing_threads
    value = _parse_int(raw)
    if value is None:
        raise ConfigurationError(INDEXING_THREADS_OPTION, f"'{INDEXING_THREADS_OPTION}' must be a positive integer")
    return value


def parse_indexing_queues_size(options: Mapping[str, str]) -> int:
    return _positive_int(options, INDEXING_QUEUES_SIZE_OPTION, DEFAULTS.indexing_queues_size)


def parse_excluded_data_centers(options: Mapping[str, str]) -> tuple[str, ...]:
    """
    Trim the value, then split on every comma. Elements are kept as they are,
    so "dc1,,dc2" gives ("dc1", "", "dc2").
    """
    raw = options.get(EXCLUDED_DATA_CENTERS_OPTION)
    if raw is None:
        return DEFAULTS.excluded_data_centers
    return tuple(raw.strip().split(","))


def parse_path(
    options: Mapping[str, str],
    table: Identity[TableMetadata],
    index: Identity[IndexMetadata],
    directories: DirectoryNaming | None = None,
) -> Path | None:
    """
    An explicit directory_path wins and the directory service is not asked.
    Otherwise the path is <table base directory>/lucene/<index name>, or None
    when the table or the index is not known yet.
    """
    raw = options.get(DIRECTORY_PATH_OPTION)
    if raw is not None:
        return Path(raw)
    if isinstance(table, Known) and isinstance(index, Known):
        naming = directories if directories is not None else get_directories()
        return naming.base_directory_for(table.value) / INDEXES_DIR_NAME / index.value.name
    return None


def parse_schema(
    options: Mapping[str, str],
    table: Identity[TableMetadata],
    builder: SchemaBuilderFn = build_schema,
) -> CompiledSchema:
    """
    Build the mandatory schema and, when the table is known, check it against the
    table columns. Builder failures of any kind come back as ConfigurationError.
    """
    raw = options.get(SCHEMA_OPTION)
    if raw is None or not raw.strip():
        raise ConfigurationError(SCHEMA_OPTION, f"'{SCHEMA_OPTION}' required")
    try:
        schema = builder(raw)
        if isinstance(table, Known):
            schema.validate_against(table.value)
    except Exception as e:
        raise ConfigurationError(SCHEMA_OPTION, f"'{SCHEMA_OPTION}' is invalid : {e}") from e
    return schema


def _checks(
    options: Mapping[str, str],
    table: Identity[TableMetadata],
    index: Identity[IndexMetadata],
    directories: DirectoryNaming | None,
    builder: SchemaBuilderFn,
) -> list[tuple[str, Callable[[], Any]]]:
    """IndexConfig field name and its check, in checking order."""
    return [
        ("refresh_seconds", lambda: parse_refresh_seconds(options)),
        ("ram_buffer_mb", lambda: parse_ram_buffer_mb(options)),
        ("max_merge_mb", lambda: parse_max_merge_mb(options)),
        ("max_cached_mb", lambda: parse_max_cached_mb(options)),
        ("indexing_threads", lambda: parse_indexing_threads(options)),
        ("indexing_queues_size", lambda: parse_indexing_queues_size(options)),
        ("excluded_data_centers", lambda: parse_excluded_data_centers(options)),
        ("path", lambda: parse_path(options, table, index, directories)),
        ("index_schema", lambda: parse_schema(options, table, builder)),
    ]


def _log_options(options: Mapping[str, str], message: str) -> None:
    """One debug line per supplied option."""
    for key, value in options.items():
        if key in RECOGNIZED_OPTIONS:
            logger.debug(message, **log_extra({"option": key, "value": value}))
        else:
            logger.debug("Ignoring unrecognized option", **log_extra({"option": key, "value": value}))


def resolve(
    options: Mapping[str, str],
    table: TableArg,
    index: IndexArg,
    *,
    directories: DirectoryNaming | None = None,
    builder: SchemaBuilderFn = build_schema,
) -> IndexConfig:
    """
    Build the IndexConfig of an existing index. Both identities are required.
    Raises ConfigurationError for the first invalid option.
    """
    table_id = as_identity(table)
    index_id = as_identity(index)
    if isinstance(table_id, Unknown) or isinstance(index_id, Unknown):
        raise ValueError("resolve() needs both the table and the index; use validate() before the index exists")
    _log_options(options, "Building with option")
    values = {field: check() for field, check in _checks(options, table_id, index_id, directories, builder)}
    config = IndexConfig(**values)
    logger.debug("Index options resolved", **log_extra({"index": index_id.value.name, **config.describe()}))
    return config


def validate(
    options: Mapping[str, str],
    table: TableArg = UNKNOWN,
    *,
    builder: SchemaBuilderFn = build_schema,
) -> None:
    """
    Run every check resolve() runs, without an index. Checks that need the table are
    skipped when it is unknown. Raises ConfigurationError for the first invalid option.
    """
    _log_options(options, "Validating option")
    for _, check in _checks(options, as_identity(table), UNKNOWN, None, builder):
        check()


def collect_errors(
    options: Mapping[str, str],
    table: TableArg = UNKNOWN,
    *,
    builder: SchemaBuilderFn = build_schema,
) -> list[ConfigurationError]:
    """Like validate(), but runs every check and returns all failures in checking order."""
    _log_options(options, "Validating option")
    errors: list[ConfigurationError] = []
    for _, check in _checks(options, as_identity(table), UNKNOWN, None, builder):
        try:
            check()
        except ConfigurationError as e:
            errors.append(e)
    return errors
