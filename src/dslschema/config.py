"""Generator configuration: defaults, discovery and loading of .dslschema.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml

CONFIG_NAME = ".dslschema.yaml"

DEFAULT_SCHEMA_DIALECT = "http://json-schema.org/draft-04/schema#"
DEFAULT_BASE_STEP_TYPE = "org.apache.camel.model.ProcessorDefinition"


@dataclass(frozen=True)
class GeneratorConfig:
    """Switches for one schema build.

    ``kebab_case`` keeps hyphenated property keys; when false every key is
    rewritten to compact camel case.  ``additional_properties`` false adds
    ``additionalProperties: false`` to items, step and object definitions.
    """

    kebab_case: bool = True
    additional_properties: bool = True
    base_step_type: str = DEFAULT_BASE_STEP_TYPE
    schema_dialect: str = DEFAULT_SCHEMA_DIALECT
    type_marker: str = "YamlType"
    in_marker: str = "YamlIn"
    banned: tuple[str, ...] = field(default_factory=tuple)
    output: str | None = None

    def with_overrides(self, **overrides: Any) -> GeneratorConfig:
        """Copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if "banned" in changes:
            changes["banned"] = tuple(changes["banned"])
        return replace(self, **changes)


_BOOL_KEYS = {"kebab_case", "additional_properties"}
_STR_KEYS = {"base_step_type", "schema_dialect", "type_marker", "in_marker", "output"}


def find_config_root(start: str = ".") -> Path | None:
    """Walk up from *start* looking for a .dslschema.yaml file.

    Returns the directory containing the config, or None.
    """
    current = Path(start).resolve()
    while True:
        if (current / CONFIG_NAME).exists():
            return current
        if current == current.parent:
            return None
        current = current.parent


def load_config(path: Path) -> GeneratorConfig:
    """Read and validate a config file (or a directory holding one).

    Raises FileNotFoundError or ValueError on problems.
    """
    config_path = path / CONFIG_NAME if path.is_dir() else path
    if not config_path.exists():
        raise FileNotFoundError(f"No config at {config_path}")
    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Cannot parse {config_path}: {exc}") from exc
    if data is None:
        data = {}
    _validate_config(data)
    if "banned" in data:
        data = dict(data, banned=tuple(data["banned"]))
    return GeneratorConfig(**data)


def discover_config(start: str = ".") -> GeneratorConfig:
    """Config from the nearest .dslschema.yaml, or the defaults."""
    root = find_config_root(start)
    if root is None:
        return GeneratorConfig()
    return load_config(root)


def _validate_config(cfg: Any) -> None:
    """Raise ValueError if the config is structurally invalid."""
    if not isinstance(cfg, dict):
        raise ValueError("Config must be a YAML mapping")
    known = {f.name for f in fields(GeneratorConfig)}
    for key, value in cfg.items():
        if key not in known:
            raise ValueError(f"Unknown config key: {key}")
        if key in _BOOL_KEYS and not isinstance(value, bool):
            raise ValueError(f"'{key}' must be true or false")
        if key in _STR_KEYS and value is not None and not isinstance(value, str):
            raise ValueError(f"'{key}' must be a string")
        if key == "banned":
            if not isinstance(value, list) or not all(isinstance(p, str) for p in value):
                raise ValueError("'banned' must be a list of type name patterns")
