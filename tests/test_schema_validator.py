"""Tests for cukejson.runtime.schema_validator.

Verifies bundled schema loading, batch/report validation and error formatting.
"""

import json
import logging
from pathlib import Path

import pytest

from conftest import make_login_batch, make_test_step_finished
from cukejson.runtime.errors import SchemaLoadError, SchemaViolationError
from cukejson.runtime.formatter import format_report
from cukejson.runtime.schema_validator import (
    MESSAGES_SCHEMA,
    REPORT_SCHEMA,
    SCHEMA_DIR,
    collect_schema_errors,
    load_schema,
    validate_batch,
    validate_report,
)


class TestLoadSchema:

    @pytest.mark.parametrize("name", [MESSAGES_SCHEMA, REPORT_SCHEMA])
    def test_bundled_schemas_load(self, name):
        schema = load_schema(name)
        assert schema["$schema"].startswith("http://json-schema.org/draft-07")

    def test_bundled_schema_is_cached(self):
        assert load_schema(MESSAGES_SCHEMA) is load_schema(MESSAGES_SCHEMA)

    def test_loads_from_path(self, tmp_path: Path):
        path = tmp_path / "custom.schema.json"
        path.write_text(json.dumps({"type": "array"}))

        assert load_schema(path) == {"type": "array"}
        assert load_schema(str(path)) == {"type": "array"}

    def test_missing_file_raises(self, tmp_path: Path):
        with pytest.raises(SchemaLoadError, match="Failed to load schema"):
            load_schema(tmp_path / "absent.json")

    def test_invalid_json_raises(self, tmp_path: Path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with pytest.raises(SchemaLoadError):
            load_schema(path)

    def test_invalid_schema_raises(self, tmp_path: Path):
        path = tmp_path / "bad.schema.json"
        path.write_text(json.dumps({"type": 12}))

        with pytest.raises(SchemaLoadError, match="Invalid schema"):
            load_schema(path)

    def test_schema_dir_holds_both_schemas(self):
        assert (SCHEMA_DIR / MESSAGES_SCHEMA).is_file()
        assert (SCHEMA_DIR / REPORT_SCHEMA).is_file()


class TestValidateBatch:

    def test_login_batch_is_valid(self, caplog):
        caplog.set_level(logging.INFO)
        validate_batch(make_login_batch())

        assert "message batch JSON schema validation..." in caplog.text
        assert "Message batch JSON schema validation passed!" in caplog.text

    def test_unknown_status_is_rejected(self):
        batch = make_login_batch()
        batch[-1] = make_test_step_finished("ts1", "EXPLODED", seconds=1)

        with pytest.raises(SchemaViolationError) as exc_info:
            validate_batch(batch)

        assert exc_info.value.subject == "message batch"
        assert any("EXPLODED" in e for e in exc_info.value.errors)

    def test_feature_tag_list_is_required(self):
        batch = make_login_batch()
        del batch[1]["gherkinDocument"]["feature"]["tags"]

        with pytest.raises(SchemaViolationError) as exc_info:
            validate_batch(batch)

        assert exc_info.value.errors == [
            "Validation error at $[1].gherkinDocument.feature: 'tags' is a required property"
        ]

    def test_multi_key_envelope_is_rejected(self):
        with pytest.raises(SchemaViolationError):
            validate_batch([{"pickle": {"id": "a", "steps": []}, "meta": {}}])

    def test_other_kinds_are_accepted(self):
        validate_batch([{"meta": {"protocolVersion": "24.0.0"}}, {"attachment": {"body": "x"}}])

    def test_custom_schema(self):
        with pytest.raises(SchemaViolationError):
            validate_batch(make_login_batch(), schema={"type": "array", "maxItems": 1})


class TestValidateReport:

    def test_assembled_report_conforms(self):
        validate_report(format_report(make_login_batch()))

    def test_two_features_are_rejected(self):
        report = format_report(make_login_batch())

        with pytest.raises(SchemaViolationError) as exc_info:
            validate_report(report + report)

        assert exc_info.value.subject == "report"

    def test_wrong_duration_type_is_rejected(self):
        report = format_report(make_login_batch())
        report[0]["elements"][0]["steps"][0]["result"]["duration"] = "2s"

        with pytest.raises(SchemaViolationError, match="duration"):
            validate_report(report)


class TestCollectSchemaErrors:

    def test_valid_instance_has_no_errors(self):
        assert collect_schema_errors([], {"type": "array"}) == []

    def test_errors_carry_json_path(self):
        schema = {"type": "array", "items": {"type": "integer"}}

        errors = collect_schema_errors([1, "two", 3, "four"], schema)

        assert errors == [
            "Validation error at $[1]: 'two' is not of type 'integer'",
            "Validation error at $[3]: 'four' is not of type 'integer'",
        ]
