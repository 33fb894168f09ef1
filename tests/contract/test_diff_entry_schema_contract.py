from __future__ import annotations

import json

import jsonschema
import pytest

from bvt_data.logging.diff_log import LOG_RECORD_KEYS, DiffLogBuffer
from bvt_data.models import MISSING, DiffEntry, DiffReport

"""Diff log JSON Lines contract: fixed key set, MISSING as null, report names per line."""

DIFF_ENTRY_SCHEMA = {
    "type": "object",
    "additionalProperties": False,
    "required": ["key", "row", "column", "expected", "actual", "expected_type", "actual_type"],
    "properties": {
        "key": {"type": "string"},
        "row": {"type": "integer", "minimum": 0},
        "column": {"type": "string"},
        "expected": {"type": "string"},
        "actual": {"type": ["string", "null"]},
        "expected_type": {"enum": ["text", "int32", "float64", "decimal", "other"]},
        "actual_type": {"enum": ["text", "int32", "float64", "decimal", "other", None]},
    },
}


@pytest.mark.parametrize(
    "entry",
    [
        DiffEntry("2", 1, "text", "Text two.", "Text TWO.", "text", "text"),
        DiffEntry("1, x", 0, "val", "2.5", "2.00", "float64", "decimal"),
        DiffEntry("3", 2, "val", "NULL", MISSING, "decimal", MISSING),
    ],
)
def test_diff_entry_json_line_matches_schema(entry):
    jsonschema.validate(json.loads(entry.to_json_line()), DIFF_ENTRY_SCHEMA)


def test_schema_rejects_extra_key():
    record = json.loads(DiffEntry("1", 0, "c", "a", "b", "text", "text").to_json_line())
    record["extra"] = "not allowed"
    with pytest.raises(jsonschema.exceptions.ValidationError):
        jsonschema.validate(record, DIFF_ENTRY_SCHEMA)


def test_json_line_is_single_line_and_keeps_unicode():
    line = DiffEntry("1", 0, "名前", "a\nb", "ä", "text", "text").to_json_line()
    assert "\n" not in line
    assert "名前" in line and "ä" in line


def test_diff_log_record_adds_report_names(tmp_path):
    log_schema = {
        **DIFF_ENTRY_SCHEMA,
        "required": [*DIFF_ENTRY_SCHEMA["required"], "expected_name", "actual_name"],
        "properties": {
            **DIFF_ENTRY_SCHEMA["properties"],
            "expected_name": {"type": ["string", "null"]},
            "actual_name": {"type": ["string", "null"]},
        },
    }
    buf = DiffLogBuffer(tmp_path)
    buf.extend(DiffReport("E", "A", [DiffEntry("3", 2, "val", "NULL", MISSING, "decimal", MISSING)]))

    record = json.loads(buf.flush().read_text(encoding="utf-8"))

    jsonschema.validate(record, log_schema)
    assert set(record) == set(LOG_RECORD_KEYS)
