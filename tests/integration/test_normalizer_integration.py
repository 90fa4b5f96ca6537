"""
Integration Tests for Normalizer Service

These tests run the normalizer end to end: connector configuration and a JSON
Lines export are written to a temporary directory, the CLI entry point
normalizes them, and the emitted messages are checked.
"""

import io
import json

import pytest

from ingestion.normalizer.main import extract_updated_at, main, run_normalizer
from ingestion.normalizer.policy import FlatteningPolicy
from ingestion.source_extractor.adapters.jsonl_adapter import JsonlFileAdapter
from ingestion.source_extractor.source_config import ConnectorConfig, TableConfig

pytestmark = pytest.mark.integration


@pytest.fixture
def connector_config(tmp_path):
    path = tmp_path / "connector.yml"
    path.write_text(
        """
display_value: all
stream_prefix: test.servicenow
tables:
  incident:
    key_fields: number
  sys_user:
    enabled: false
""",
        encoding="utf-8",
    )
    return path


def read_messages(path):
    with open(path, encoding="utf-8") as handle:
        return [json.loads(line) for line in handle if line.strip()]


def test_full_normalizer_flow(tmp_path, connector_config, write_jsonl, display_value_incident):
    input_path = write_jsonl([
        display_value_incident,
        dict(display_value_incident, number="INC0010002", state={"display_value": "Closed", "value": "7"}),
    ])
    output_path = tmp_path / "out.jsonl"

    exit_code = main([
        "--table", "incident",
        "--input", str(input_path),
        "--output", str(output_path),
        "--config", str(connector_config),
    ])

    assert exit_code == 0

    messages = read_messages(output_path)
    assert len(messages) == 2

    first = messages[0]
    assert first["topic"] == "test.servicenow.incident"
    assert first["key"] == {"number": "INC0010001"}
    assert first["key_schema"]["fields"] == [{"type": "string", "optional": True, "field": "number"}]
    assert first["value"]["priority"] == "1"
    assert first["value"]["priority_display_value"] == "1 - Critical"
    assert first["updated_at"] == "2025-02-02T10:30:00+00:00"
    assert all(f["type"] == "string" for f in first["value_schema"]["fields"])

    second = messages[1]
    assert second["key"] == {"number": "INC0010002"}
    assert second["value"]["state"] == "7"
    assert second["value"]["state_display_value"] == "Closed"
    assert second["value_schema"] == first["value_schema"]


def test_nested_override_and_key_fields(tmp_path, connector_config, write_jsonl, display_value_incident):
    input_path = write_jsonl([display_value_incident])
    output_path = tmp_path / "out.jsonl"

    exit_code = main([
        "--table", "incident",
        "--input", str(input_path),
        "--output", str(output_path),
        "--config", str(connector_config),
        "--display-value", "true",
        "--key-fields", "number,priority",
    ])

    assert exit_code == 0

    message = read_messages(output_path)[0]
    assert message["value"]["priority"] == {"display_value": "1 - Critical", "value": "1"}
    assert message["key"] == {"number": "INC0010001", "priority": "1"}


def test_shape_mismatch_is_partial_failure(tmp_path, connector_config, write_jsonl, raw_incident):
    later = dict(raw_incident, number="INC0010002", close_code="Solved")
    input_path = write_jsonl([raw_incident, later, dict(raw_incident, number="INC0010003")])
    output_path = tmp_path / "out.jsonl"

    exit_code = main([
        "--table", "incident",
        "--input", str(input_path),
        "--output", str(output_path),
        "--config", str(connector_config),
    ])

    assert exit_code == 1
    assert [m["key"]["number"] for m in read_messages(output_path)] == ["INC0010001", "INC0010003"]


def test_disabled_table_is_skipped(tmp_path, connector_config, write_jsonl, raw_incident):
    output_path = tmp_path / "out.jsonl"

    exit_code = main([
        "--table", "sys_user",
        "--input", str(write_jsonl([raw_incident])),
        "--output", str(output_path),
        "--config", str(connector_config),
    ])

    assert exit_code == 0
    assert not output_path.exists()


@pytest.mark.parametrize("extra_args", [
    ["--display-value", "sometimes"],
    ["--config", "missing.yml"],
])
def test_fatal_errors(tmp_path, connector_config, write_jsonl, raw_incident, extra_args):
    args = [
        "--table", "incident",
        "--input", str(write_jsonl([raw_incident])),
        "--output", str(tmp_path / "out.jsonl"),
        "--config", str(connector_config),
    ]

    if extra_args[0] == "--config":
        extra_args = ["--config", str(tmp_path / extra_args[1])]

    assert main(args + extra_args) == 2


def test_missing_input_is_fatal(tmp_path, connector_config):
    exit_code = main([
        "--table", "incident",
        "--input", str(tmp_path / "missing.jsonl"),
        "--output", str(tmp_path / "out.jsonl"),
        "--config", str(connector_config),
    ])

    assert exit_code == 2


def test_run_normalizer_limit_and_stats(write_jsonl, raw_incident):
    records = [dict(raw_incident, number=f"INC{i:07d}") for i in range(5)]
    adapter = JsonlFileAdapter("incident", write_jsonl(records), records_per_page=2)
    config = ConnectorConfig(tables={"incident": TableConfig(key_fields=["number"])})
    output = io.StringIO()

    stats = run_normalizer(adapter, config, output, limit=3)

    assert stats == {'fetched': 3, 'normalized': 3, 'failed': 0}
    lines = output.getvalue().splitlines()
    assert [json.loads(line)["key"]["number"] for line in lines] == [
        "INC0000000", "INC0000001", "INC0000002",
    ]


def test_run_normalizer_invalid_timestamp_fails_record(write_jsonl, raw_incident):
    adapter = JsonlFileAdapter(
        "incident",
        write_jsonl([dict(raw_incident, sys_updated_on="yesterday")]),
    )
    output = io.StringIO()

    stats = run_normalizer(adapter, ConnectorConfig(), output, policy=FlatteningPolicy.NONE)

    assert stats == {'fetched': 1, 'normalized': 0, 'failed': 1}
    assert output.getvalue() == ""


class TestExtractUpdatedAt:
    """Tests for reading the configured timestamp field"""

    def test_display_value_object_uses_raw_value(self, display_value_incident):
        updated_at = extract_updated_at(display_value_incident, "sys_updated_on")

        assert updated_at.isoformat() == "2025-02-02T10:30:00+00:00"

    def test_display_format_scalar(self):
        updated_at = extract_updated_at({"sys_updated_on": "02/03/2025 10:30:00"}, "sys_updated_on")

        assert (updated_at.month, updated_at.day) == (2, 3)

    @pytest.mark.parametrize("record,field", [
        ({"sys_updated_on": "2025-02-02 10:30:00"}, None),
        ({}, "sys_updated_on"),
        ({"sys_updated_on": ""}, "sys_updated_on"),
        ({"sys_updated_on": {"display_value": "", "value": None}}, "sys_updated_on"),
    ])
    def test_missing_timestamp(self, record, field):
        assert extract_updated_at(record, field) is None
