"""Load type metadata from a YAML or JSON catalog file.

Catalog layout::

    types:
      - name: org.example.FooDefinition
        super: org.example.ProcessorDefinition
        annotations:
          YamlType:
            nodes: [foo]
            properties:
              - {name: bar, type: string, required: true}
          YamlIn: {}

Every entry needs a ``name``; ``super`` and ``annotations`` are optional.
Types without annotations are still useful: they complete superclass
chains so inherited properties can be collected.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from dslschema.exit_codes import CatalogError
from dslschema.metadata.index import MetadataIndex
from dslschema.metadata.model import TypeInfo

log = logging.getLogger(__name__)

CATALOG_SUFFIXES = (".yaml", ".yml", ".json")


def load_catalog_file(path: str | Path) -> MetadataIndex:
    """Parse *path* into a :class:`MetadataIndex`.

    Raises :class:`CatalogError` when the file is missing, unparsable or
    structurally invalid.
    """
    path = Path(path)
    if not path.is_file():
        raise CatalogError(f"Catalog file not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        raise CatalogError(f"Cannot parse catalog {path}: {exc}") from exc

    types = parse_catalog(data, source=str(path))
    log.info("Loaded %d types from %s", len(types), path)
    return MetadataIndex(types)


def parse_catalog(data: Any, source: str | None = None) -> list[TypeInfo]:
    """Turn already-parsed catalog data into :class:`TypeInfo` records."""
    where = source or "catalog"
    if not isinstance(data, dict):
        raise CatalogError(f"{where}: top level must be a mapping")
    entries = data.get("types")
    if not isinstance(entries, list):
        raise CatalogError(f"{where}: missing or invalid 'types' list")

    types = []
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise CatalogError(f"{where}: type entry {i} must be a mapping")
        name = entry.get("name")
        if not name or not isinstance(name, str):
            raise CatalogError(f"{where}: type entry {i} missing 'name'")
        annotations = entry.get("annotations") or {}
        if not isinstance(annotations, dict):
            raise CatalogError(f"{where}: annotations of {name} must be a mapping")
        for marker, values in annotations.items():
            if values is not None and not isinstance(values, dict):
                raise CatalogError(f"{where}: annotation {marker} of {name} must be a mapping")
        types.append(
            TypeInfo(
                name=name,
                super_name=entry.get("super") or None,
                annotations={marker: dict(values or {}) for marker, values in annotations.items()},
                source=source,
            )
        )
    return types
