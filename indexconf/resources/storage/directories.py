"""Per-table data directories. Naming only: nothing is created or checked on disk."""

from pathlib import Path
from typing import Protocol

from indexconf.config.indexing.identity import TableMetadata
from indexconf.config.logging import get_logger
from indexconf.config.storage.directories import get_directories_config

logger = get_logger(__name__)


class DirectoryNaming(Protocol):
    """Supplies the base directory holding a table's on-disk artifacts."""

    def base_directory_for(self, table: TableMetadata) -> Path: ...


class DataDirectories:
    """Lays tables out as <data_directory>/<keyspace>/<table>-<id without dashes>."""

    def __init__(self, data_directory: str | Path):
        self.data_directory = Path(data_directory).absolute()

    def base_directory_for(self, table: TableMetadata) -> Path:
        return self.data_directory / table.keyspace / f"{table.name}-{table.id.hex}"


_directories: DataDirectories | None = None


def get_directories() -> DataDirectories:
    """Return the shared directory-naming service. Creates it on first use."""
    global _directories
    if _directories is None:
        cfg = get_directories_config()
        _directories = DataDirectories(cfg["data_directory"])
        logger.info(
            "Data directories initialized",
            extra={"data_directory": str(_directories.data_directory)},
        )
    return _directories


def reset_directories() -> None:
    """Drop the shared instance so the next call re-reads settings."""
    global _directories
    _directories = None
