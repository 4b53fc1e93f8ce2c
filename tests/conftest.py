"""Shared test fixtures and helpers for dslschema tests.

Provides:
- Metadata builders: yaml_type(), prop(), make_index()
- Catalog file fixtures: write_catalog(), catalog_file
- CliRunner fixtures: cli_runner, invoke_cli()
- JSON validation helpers: parse_json_output(), assert_json_envelope()
"""

from __future__ import annotations

import json
import os

import pytest
import yaml
from click.testing import CliRunner

from dslschema.metadata.index import MetadataIndex
from dslschema.metadata.model import TypeInfo

STEP_BASE = "org.apache.camel.model.ProcessorDefinition"
REF = "#/items/definitions/"

# ===========================================================================
# Metadata builders
# ===========================================================================


def prop(name, type_spec, required=False):
    """A property declaration as found on the type marker."""
    return {"name": name, "type": type_spec, "required": required}


def yaml_type(name, super_name=None, *, top_level=False, **marker):
    """A TypeInfo carrying the YamlType marker with the given attributes."""
    annotations = {"YamlType": dict(marker)}
    if top_level:
        annotations["YamlIn"] = {}
    return TypeInfo(name=name, super_name=super_name, annotations=annotations)


def plain_type(name, super_name=None):
    """A TypeInfo without any marker (completes superclass chains)."""
    return TypeInfo(name=name, super_name=super_name)


def make_index(*types):
    return MetadataIndex(types)


# ===========================================================================
# Catalog file helpers
# ===========================================================================


def write_catalog(path, types):
    """Write TypeInfo records to a YAML catalog file at *path*."""
    entries = []
    for info in types:
        entry = {"name": info.name}
        if info.super_name:
            entry["super"] = info.super_name
        if info.annotations:
            entry["annotations"] = info.annotations
        entries.append(entry)
    path.write_text(yaml.safe_dump({"types": entries}, sort_keys=False), encoding="utf-8")
    return path


SAMPLE_TYPES = (
    plain_type(STEP_BASE),
    yaml_type(
        "org.example.RouteDefinition",
        top_level=True,
        nodes=["route"],
        properties=[prop("id", "string"), prop("steps", "array:" + STEP_BASE)],
    ),
    yaml_type(
        "org.example.LogDefinition",
        STEP_BASE,
        nodes=["log"],
        properties=[prop("message", "string", required=True), prop("logging-level", "enum:INFO,WARN")],
    ),
    yaml_type(
        "org.example.ToDefinition",
        STEP_BASE,
        nodes=["to"],
        inline=True,
        properties=[prop("uri", "string", required=True)],
    ),
)


@pytest.fixture
def catalog_file(tmp_path):
    """A small catalog: one route (top-level), two steps."""
    return write_catalog(tmp_path / "catalog.yaml", SAMPLE_TYPES)


# ===========================================================================
# CliRunner helpers
# ===========================================================================


@pytest.fixture
def cli_runner():
    """Provide a Click CliRunner for in-process CLI testing."""
    return CliRunner()


def invoke_cli(runner, args, cwd=None, json_mode=False):
    """Invoke the dslschema CLI via CliRunner.

    Args:
        runner: CliRunner instance
        args: list of CLI arguments (e.g. ["catalog", "catalog.yaml"])
        cwd: directory to run in
        json_mode: if True, prepend --json flag
    Returns:
        click.testing.Result
    """
    from dslschema.cli import cli

    full_args = []
    if json_mode:
        full_args.append("--json")
    full_args.extend(args)

    old_cwd = os.getcwd()
    try:
        if cwd:
            os.chdir(str(cwd))
        result = runner.invoke(cli, full_args, catch_exceptions=False)
    finally:
        os.chdir(old_cwd)

    return result


# ===========================================================================
# JSON validation helpers
# ===========================================================================


def parse_json_output(result, command=None):
    """Parse JSON from a CliRunner result.

    Raises AssertionError with context on a non-zero exit or bad JSON.
    """
    assert result.exit_code == 0, f"Command {command or '?'} failed (exit {result.exit_code}):\n{result.output}"
    try:
        return json.loads(result.output)
    except json.JSONDecodeError as e:
        pytest.fail(f"Invalid JSON from {command or '?'}: {e}\nOutput was:\n{result.output[:500]}")


def assert_json_envelope(data, command=None):
    """Validate that a parsed JSON dict follows the envelope contract."""
    assert isinstance(data, dict), f"Expected dict, got {type(data)}"
    assert "command" in data, "Missing 'command' key in envelope"
    assert "version" in data, "Missing 'version' key in envelope"
    assert "summary" in data, "Missing 'summary' key in envelope"
    assert "timestamp" in data.get("_meta", {}), "Missing 'timestamp' in _meta"
    if command:
        assert data["command"] == command, f"Expected command={command}, got {data['command']}"
    assert isinstance(data["summary"], dict)
    assert "verdict" in data["summary"]
