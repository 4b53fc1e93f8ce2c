"""End-to-end CLI tests: generate, catalog and refs via CliRunner."""

from __future__ import annotations

import json

import pytest

from dslschema.config import CONFIG_NAME
from dslschema.exit_codes import (
    EXIT_CATALOG_ERROR,
    EXIT_CONFIG_ERROR,
    EXIT_PARTIAL,
    EXIT_USAGE,
    EXIT_WRITE_FAILURE,
)
from tests.conftest import (
    REF,
    SAMPLE_TYPES,
    STEP_BASE,
    assert_json_envelope,
    invoke_cli,
    parse_json_output,
    prop,
    write_catalog,
    yaml_type,
)


@pytest.fixture
def dangling_catalog(tmp_path):
    types = SAMPLE_TYPES + (
        yaml_type("org.example.BeanDefinition", STEP_BASE, nodes=["bean"], properties=[prop("ref", "object:org.example.Gone")]),
    )
    return write_catalog(tmp_path / "dangling.yaml", types)


# ===========================================================================
# generate
# ===========================================================================


class TestGenerate:
    def test_writes_schema(self, cli_runner, catalog_file, tmp_path):
        out = tmp_path / "out" / "schema.json"
        result = invoke_cli(cli_runner, ["generate", str(catalog_file), "-o", str(out)], cwd=tmp_path)
        assert result.exit_code == 0, result.output
        assert "VERDICT: written" in result.output
        schema = json.loads(out.read_text(encoding="utf-8"))
        assert schema["items"]["properties"]["route"] == {"$ref": REF + "org.example.RouteDefinition"}

    def test_second_run_is_unchanged(self, cli_runner, catalog_file, tmp_path):
        out = tmp_path / "schema.json"
        args = ["generate", str(catalog_file), "-o", str(out)]
        invoke_cli(cli_runner, args, cwd=tmp_path)
        before = out.stat().st_mtime_ns
        result = invoke_cli(cli_runner, args, cwd=tmp_path)
        assert result.exit_code == 0
        assert "VERDICT: unchanged" in result.output
        assert out.stat().st_mtime_ns == before

    def test_stdout(self, cli_runner, catalog_file, tmp_path):
        result = invoke_cli(cli_runner, ["generate", str(catalog_file), "--stdout"], cwd=tmp_path)
        assert result.exit_code == 0
        schema = json.loads(result.output)
        assert schema["type"] == "array"
        assert "logging-level" in schema["items"]["definitions"]["org.example.LogDefinition"]["properties"]

    def test_camel_case_and_strict_objects(self, cli_runner, catalog_file, tmp_path):
        result = invoke_cli(
            cli_runner,
            ["generate", str(catalog_file), "--stdout", "--camel-case", "--no-additional-properties"],
            cwd=tmp_path,
        )
        schema = json.loads(result.output)
        log_def = schema["items"]["definitions"]["org.example.LogDefinition"]
        assert "loggingLevel" in log_def["properties"]
        assert log_def["additionalProperties"] is False
        assert schema["items"]["additionalProperties"] is False

    def test_ban_option(self, cli_runner, catalog_file, tmp_path):
        result = invoke_cli(
            cli_runner, ["generate", str(catalog_file), "--stdout", "--ban", "*.LogDefinition"], cwd=tmp_path
        )
        schema = json.loads(result.output)
        assert "org.example.LogDefinition" not in schema["items"]["definitions"]

    def test_output_from_config(self, cli_runner, catalog_file, tmp_path):
        (tmp_path / CONFIG_NAME).write_text("output: gen/schema.json\nkebab_case: false\n")
        result = invoke_cli(cli_runner, ["generate", str(catalog_file)], cwd=tmp_path)
        assert result.exit_code == 0, result.output
        schema = json.loads((tmp_path / "gen" / "schema.json").read_text())
        assert "loggingLevel" in schema["items"]["definitions"]["org.example.LogDefinition"]["properties"]

    def test_flag_overrides_config(self, cli_runner, catalog_file, tmp_path):
        (tmp_path / CONFIG_NAME).write_text("kebab_case: false\n")
        result = invoke_cli(cli_runner, ["generate", str(catalog_file), "--stdout", "--kebab-case"], cwd=tmp_path)
        assert "logging-level" in result.output

    def test_json_envelope(self, cli_runner, catalog_file, tmp_path):
        out = tmp_path / "schema.json"
        result = invoke_cli(cli_runner, ["generate", str(catalog_file), "-o", str(out)], cwd=tmp_path, json_mode=True)
        data = parse_json_output(result, "generate")
        assert_json_envelope(data, "generate")
        assert data["summary"]["verdict"] == "written"
        assert data["summary"]["definitions"] == 4
        assert data["dangling"] == []

    def test_missing_output_is_usage_error(self, cli_runner, catalog_file, tmp_path):
        result = invoke_cli(cli_runner, ["generate", str(catalog_file)], cwd=tmp_path)
        assert result.exit_code == EXIT_USAGE

    def test_bad_catalog(self, cli_runner, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("types: 3\n")
        result = invoke_cli(cli_runner, ["generate", str(bad), "--stdout"], cwd=tmp_path)
        assert result.exit_code == EXIT_CATALOG_ERROR
        assert "'types'" in result.output

    def test_unknown_source_format(self, cli_runner, tmp_path):
        src = tmp_path / "model.txt"
        src.write_text("")
        result = invoke_cli(cli_runner, ["generate", str(src), "--stdout"], cwd=tmp_path)
        assert result.exit_code == EXIT_CATALOG_ERROR

    def test_no_sources(self, cli_runner, tmp_path):
        result = invoke_cli(cli_runner, ["generate", "--stdout"], cwd=tmp_path)
        assert result.exit_code == EXIT_CATALOG_ERROR

    def test_invalid_config(self, cli_runner, catalog_file, tmp_path):
        (tmp_path / CONFIG_NAME).write_text("colour: red\n")
        result = invoke_cli(cli_runner, ["generate", str(catalog_file), "--stdout"], cwd=tmp_path)
        assert result.exit_code == EXIT_CONFIG_ERROR

    def test_unwritable_output(self, cli_runner, catalog_file, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        result = invoke_cli(
            cli_runner, ["generate", str(catalog_file), "-o", str(blocker / "schema.json")], cwd=tmp_path
        )
        assert result.exit_code == EXIT_WRITE_FAILURE

    def test_explicit_config_option(self, cli_runner, catalog_file, tmp_path):
        cfg = tmp_path / "custom.yaml"
        cfg.write_text("additional_properties: false\n")
        result = invoke_cli(cli_runner, ["--config", str(cfg), "generate", str(catalog_file), "--stdout"], cwd=tmp_path)
        assert json.loads(result.output)["items"]["additionalProperties"] is False


# ===========================================================================
# catalog
# ===========================================================================


class TestCatalogCommand:
    def test_text(self, cli_runner, catalog_file, tmp_path):
        result = invoke_cli(cli_runner, ["catalog", str(catalog_file)], cwd=tmp_path)
        assert result.exit_code == 0
        assert "VERDICT: 3 types (1 items, 2 steps)" in result.output
        assert "org.example.ToDefinition" in result.output
        assert "step inline" in result.output

    def test_json(self, cli_runner, catalog_file, tmp_path):
        result = invoke_cli(cli_runner, ["catalog", str(catalog_file)], cwd=tmp_path, json_mode=True)
        data = parse_json_output(result, "catalog")
        assert_json_envelope(data, "catalog")
        assert [row["key"] for row in data["types"]] == [
            "org.example.LogDefinition",
            "org.example.RouteDefinition",
            "org.example.ToDefinition",
        ]
        roles = {row["key"]: row["role"] for row in data["types"]}
        assert roles["org.example.RouteDefinition"] == "item"
        assert roles["org.example.LogDefinition"] == "step"


# ===========================================================================
# refs
# ===========================================================================


class TestRefsCommand:
    def test_clean(self, cli_runner, catalog_file, tmp_path):
        result = invoke_cli(cli_runner, ["refs", str(catalog_file), "--strict"], cwd=tmp_path)
        assert result.exit_code == 0
        assert "VERDICT: all references resolve" in result.output

    def test_dangling_reported(self, cli_runner, dangling_catalog, tmp_path):
        result = invoke_cli(cli_runner, ["refs", str(dangling_catalog)], cwd=tmp_path)
        assert result.exit_code == 0
        assert "VERDICT: 1 dangling references" in result.output
        assert "org.example.Gone  <-  org.example.BeanDefinition" in result.output

    def test_strict_exit_code(self, cli_runner, dangling_catalog, tmp_path):
        result = invoke_cli(cli_runner, ["refs", str(dangling_catalog), "--strict"], cwd=tmp_path)
        assert result.exit_code == EXIT_PARTIAL

    def test_json(self, cli_runner, dangling_catalog, tmp_path):
        result = invoke_cli(cli_runner, ["refs", str(dangling_catalog)], cwd=tmp_path, json_mode=True)
        data = parse_json_output(result, "refs")
        assert_json_envelope(data, "refs")
        assert data["summary"]["dangling_refs"] == 1
        assert data["dangling"] == [{"target": "org.example.Gone", "referrers": ["org.example.BeanDefinition"]}]

    def test_generate_still_writes_with_dangling(self, cli_runner, dangling_catalog, tmp_path):
        out = tmp_path / "schema.json"
        result = invoke_cli(cli_runner, ["generate", str(dangling_catalog), "-o", str(out)], cwd=tmp_path)
        assert result.exit_code == 0
        assert out.exists()
        assert "1 dangling references" in result.output


def test_help_lists_commands(cli_runner):
    result = invoke_cli(cli_runner, ["--help"])
    assert result.exit_code == 0
    for name in ("generate", "catalog", "refs"):
        assert name in result.output
