"""resolve() / validate() / collect_errors(): paths, schema handling, ordering, determinism."""

import json
import logging
from pathlib import Path

import pytest

from indexconf.config.indexing.errors import ConfigurationError
from indexconf.config.indexing.identity import UNKNOWN, Known
from indexconf.config.indexing.models import IndexConfig
from indexconf.config.indexing.resolver import collect_errors, resolve, validate
from indexconf.schema.errors import SchemaError
from indexconf.schema.models import Schema


def test_resolve_builds_complete_config(options, table, index, directories):
    options.update(
        {
            "refresh_seconds": "0.5",
            "ram_buffer_mb": "128",
            "max_merge_mb": "10",
            "max_cached_mb": "40",
            "indexing_threads": "4",
            "indexing_queues_size": "100",
            "excluded_data_centers": "dc2,dc3",
        }
    )
    config = resolve(options, table, index, directories=directories)

    assert isinstance(config, IndexConfig)
    assert isinstance(config.index_schema, Schema)
    assert config.refresh_seconds == 0.5
    assert config.ram_buffer_mb == 128
    assert config.max_merge_mb == 10
    assert config.max_cached_mb == 40
    assert config.indexing_threads == 4
    assert config.indexing_queues_size == 100
    assert config.excluded_data_centers == ("dc2", "dc3")
    assert config.path == directories.base / "lucene" / "tweets_idx"


def test_derived_path_uses_directory_service(options, table, index, directories):
    config = resolve(options, table, index, directories=directories)
    assert config.path == Path("/data/ks/tweets-5a1c395eb41f11e59f22ba0be0483c18/lucene/tweets_idx")
    assert directories.calls == [table]


def test_explicit_directory_path_is_used_and_service_not_consulted(options, table, index, directories):
    options["directory_path"] = "/mnt/fast/tweets_idx"
    config = resolve(options, table, index, directories=directories)
    assert config.path == Path("/mnt/fast/tweets_idx")
    assert directories.calls == []


def test_relative_directory_path_is_kept_relative(options, table, index, directories):
    options["directory_path"] = "indexes/tweets"
    config = resolve(options, table, index, directories=directories)
    assert config.path == Path("indexes/tweets")
    assert not config.path.is_absolute()


@pytest.mark.parametrize("missing", ["table", "index"])
def test_resolve_requires_both_identities(options, table, index, directories, missing):
    args = {"table": table, "index": index}
    args[missing] = None
    with pytest.raises(ValueError, match="needs both the table and the index"):
        resolve(options, args["table"], args["index"], directories=directories)


def test_resolve_accepts_wrapped_identities(options, table, index, directories):
    config = resolve(options, Known(table), Known(index), directories=directories)
    assert config.path is not None


def test_resolve_rejects_unknown_marker(options, table, directories):
    with pytest.raises(ValueError):
        resolve(options, table, UNKNOWN, directories=directories)


@pytest.mark.parametrize("schema", [None, "", "   ", "\n\t"])
def test_missing_or_blank_schema_always_fails(table, index, directories, schema):
    options = {"refresh_seconds": "1", "ram_buffer_mb": "32"}
    if schema is not None:
        options["schema"] = schema
    with pytest.raises(ConfigurationError, match="'schema' required") as exc:
        resolve(options, table, index, directories=directories)
    assert exc.value.option == "schema"
    with pytest.raises(ConfigurationError, match="'schema' required"):
        validate(options, table)
    with pytest.raises(ConfigurationError, match="'schema' required"):
        validate(options)


def test_malformed_schema_is_wrapped(table, index, directories):
    options = {"schema": "{fields: "}
    with pytest.raises(ConfigurationError) as exc:
        resolve(options, table, index, directories=directories)
    assert exc.value.option == "schema"
    assert str(exc.value).startswith("'schema' is invalid : Unparseable JSON schema")
    assert isinstance(exc.value.__cause__, SchemaError)


def test_schema_inconsistent_with_table_is_wrapped(table, index, directories):
    options = {"schema": json.dumps({"fields": {"missing": {"type": "string"}}})}
    with pytest.raises(ConfigurationError, match="No column definition 'missing' for mapper 'missing'"):
        resolve(options, table, index, directories=directories)


def test_schema_not_checked_against_columns_without_table():
    options = {"schema": json.dumps({"fields": {"missing": {"type": "string"}}})}
    validate(options)
    validate(options, None)
    validate(options, UNKNOWN)


def test_schema_checked_against_columns_when_validating_with_table(table):
    options = {"schema": json.dumps({"fields": {"missing": {"type": "string"}}})}
    with pytest.raises(ConfigurationError, match="No column definition"):
        validate(options, table)


def test_custom_builder_errors_are_wrapped_keeping_builder_message(table, index, directories):
    def exploding_builder(text):
        raise RuntimeError("engine says no")

    with pytest.raises(ConfigurationError) as exc:
        resolve({"schema": "x"}, table, index, directories=directories, builder=exploding_builder)
    assert str(exc.value) == "'schema' is invalid : engine says no"
    assert isinstance(exc.value.__cause__, RuntimeError)


def test_custom_builder_validates_against_table(table, index, directories):
    seen = []

    class FakeSchema:
        def validate_against(self, t):
            seen.append(t)

    config = resolve({"schema": "anything"}, table, index, directories=directories, builder=lambda text: FakeSchema())
    assert seen == [table]
    assert isinstance(config.index_schema, FakeSchema)


def test_first_failure_wins_in_checking_order(table, index, directories):
    options = {"schema": "", "indexing_queues_size": "0", "ram_buffer_mb": "x", "max_cached_mb": "-1"}
    with pytest.raises(ConfigurationError) as exc:
        resolve(options, table, index, directories=directories)
    assert exc.value.option == "ram_buffer_mb"


def test_failure_stops_before_path_derivation(table, index, directories):
    with pytest.raises(ConfigurationError):
        resolve({"max_merge_mb": "0"}, table, index, directories=directories)
    assert directories.calls == []


def test_validate_without_index_never_produces_a_path(options, table, directories):
    assert validate(options, table) is None
    assert validate(options) is None
    assert directories.calls == []


def test_validate_without_table_accepts_valid_options(options):
    options["refresh_seconds"] = "30"
    validate(options, UNKNOWN)


def test_unrecognized_options_are_ignored(options, table, index, directories):
    options["refresh_second"] = "not a number"
    options["future_option"] = "whatever"
    config = resolve(options, table, index, directories=directories)
    assert config.refresh_seconds == 60.0
    validate(options, table)


def test_collect_errors_reports_every_bad_option_in_order(table):
    options = {
        "indexing_queues_size": "0",
        "refresh_seconds": "soon",
        "max_merge_mb": "-5",
        "indexing_threads": "lots",
    }
    errors = collect_errors(options, table)
    assert [e.option for e in errors] == [
        "refresh_seconds",
        "max_merge_mb",
        "indexing_threads",
        "indexing_queues_size",
        "schema",
    ]
    assert all(isinstance(e, ConfigurationError) for e in errors)


def test_collect_errors_empty_when_valid(options, table):
    assert collect_errors(options, table) == []


def test_resolution_is_deterministic_and_does_not_mutate_input(options, table, index, directories):
    options.update({"excluded_data_centers": "dc1,dc2", "refresh_seconds": "2.5", "unknown": "x"})
    before = dict(options)

    first = resolve(options, table, index, directories=directories)
    second = resolve(options, table, index, directories=directories)

    assert first == second
    assert first is not second
    assert options == before


def test_from_index_resolves_stored_options(schema_json, table, tmp_path, monkeypatch):
    from indexconf.config.indexing.identity import IndexMetadata
    from indexconf.resources.storage import directories as directories_module

    monkeypatch.setattr(directories_module, "_directories", directories_module.DataDirectories(tmp_path))
    index = IndexMetadata(name="by_user", options={"schema": schema_json, "max_cached_mb": "12"})

    config = IndexConfig.from_index(table, index)

    assert config.max_cached_mb == 12
    assert config.path == tmp_path / "ks" / f"tweets-{table.id.hex}" / "lucene" / "by_user"
    assert not config.path.exists()


def test_each_supplied_option_logged_once(options, table, index, directories, caplog):
    options["ram_buffer_mb"] = "16"
    options["typo_option"] = "1"
    with caplog.at_level(logging.DEBUG, logger="indexconf.config.indexing.resolver"):
        resolve(options, table, index, directories=directories)

    building = [r for r in caplog.records if r.getMessage() == "Building with option"]
    ignored = [r for r in caplog.records if r.getMessage() == "Ignoring unrecognized option"]
    assert sorted(r.option for r in building) == ["ram_buffer_mb", "schema"]
    assert [(r.option, r.value) for r in ignored] == [("typo_option", "1")]


def test_validate_logs_with_validating_message(options, caplog):
    with caplog.at_level(logging.DEBUG, logger="indexconf.config.indexing.resolver"):
        validate(options)
    assert [r.option for r in caplog.records if r.getMessage() == "Validating option"] == ["schema"]
