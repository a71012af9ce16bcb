import json
from pathlib import Path
from uuid import UUID

import pytest

from indexconf.config.indexing.identity import IndexMetadata, TableMetadata

TABLE_ID = UUID("5a1c395e-b41f-11e5-9f22-ba0be0483c18")


class RecordingDirectories:
    """Directory-naming stand-in that remembers which tables it was asked about."""

    def __init__(self, base: str = "/data/ks/tweets-5a1c395eb41f11e59f22ba0be0483c18"):
        self.base = Path(base)
        self.calls: list[TableMetadata] = []

    def base_directory_for(self, table: TableMetadata) -> Path:
        self.calls.append(table)
        return self.base


@pytest.fixture
def table() -> TableMetadata:
    return TableMetadata(
        keyspace="ks",
        name="tweets",
        id=TABLE_ID,
        columns={
            "id": "int",
            "user": "text",
            "body": "text",
            "created_at": "timestamp",
            "lat": "double",
            "lon": "double",
            "tags": "set<text>",
        },
    )


@pytest.fixture
def index() -> IndexMetadata:
    return IndexMetadata(name="tweets_idx")


@pytest.fixture
def schema_json() -> str:
    return json.dumps(
        {
            "default_analyzer": "english",
            "fields": {
                "id": {"type": "integer"},
                "user": {"type": "string", "case_sensitive": False},
                "body": {"type": "text", "analyzer": "english"},
                "created_at": {"type": "date", "pattern": "yyyy/MM/dd"},
                "place": {"type": "geo_point", "latitude": "lat", "longitude": "lon"},
            },
        }
    )


@pytest.fixture
def options(schema_json) -> dict[str, str]:
    return {"schema": schema_json}


@pytest.fixture
def directories() -> RecordingDirectories:
    return RecordingDirectories()
