"""Shared metadata-source and configuration helpers for all commands."""

from __future__ import annotations

import logging
from pathlib import Path

from dslschema.config import GeneratorConfig, discover_config, load_config
from dslschema.exit_codes import CatalogError, ConfigError
from dslschema.metadata.index import MetadataIndex
from dslschema.metadata.loader import CATALOG_SUFFIXES, load_catalog_file

log = logging.getLogger(__name__)

SOURCE_FORMATS = ("auto", "catalog", "java")


def detect_format(source: Path) -> str:
    """``catalog`` for YAML/JSON files, ``java`` for sources and directories."""
    if source.is_dir() or source.suffix == ".java":
        return "java"
    if source.suffix.lower() in CATALOG_SUFFIXES:
        return "catalog"
    raise CatalogError(f"Cannot tell the format of {source}; pass --format")


def load_index(sources: tuple[str, ...] | list[str], fmt: str = "auto") -> MetadataIndex:
    """Merge every source into one index; earlier sources win on name clashes."""
    if not sources:
        raise CatalogError("No metadata sources given.")

    index = MetadataIndex()
    java_sources: list[Path] = []
    for raw in sources:
        source = Path(raw)
        if not source.exists():
            raise CatalogError(f"Metadata source not found: {source}")
        kind = detect_format(source) if fmt == "auto" else fmt
        if kind == "catalog":
            index = index.merged(load_catalog_file(source))
        else:
            java_sources.append(source)

    if java_sources:
        from dslschema.metadata.java_scanner import scan_java_sources

        index = index.merged(scan_java_sources(java_sources))

    log.debug("Metadata index holds %d types", len(index))
    return index


def resolve_config(ctx_obj: dict | None, **overrides) -> GeneratorConfig:
    """Config file (explicit or discovered) with CLI overrides applied."""
    config_path = (ctx_obj or {}).get("config_path")
    try:
        if config_path:
            base = load_config(Path(config_path))
        else:
            base = discover_config()
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    return base.with_overrides(**overrides)
