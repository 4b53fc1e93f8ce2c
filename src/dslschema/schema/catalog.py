"""Catalog of schema-generating types, keyed and ordered deterministically."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from dslschema.metadata.index import MetadataIndex
from dslschema.metadata.model import TypeInfo

log = logging.getLogger(__name__)

# Types without an explicit order sort last.
DEFAULT_ORDER = 2147483647


@dataclass(frozen=True)
class TypeDescriptor:
    """One catalog entry: a definition key and the type that declares it.

    ``info`` is the annotated type whose properties make up the definition.
    ``type_info`` is the type the key itself names (it differs from
    ``info`` for alternate keys declared through ``types``); the ban check
    and the step-base check run against it.
    """

    key: str
    nodes: tuple[str, ...]
    order: int
    top_level: bool
    inline: bool
    info: TypeInfo
    type_info: TypeInfo | None


def type_order(info: TypeInfo, marker: str) -> int:
    value = info.annotation_value(marker, "order", DEFAULT_ORDER)
    try:
        return int(value)
    except (TypeError, ValueError):
        log.warning("Non-numeric order %r on %s, using default", value, info.name)
        return DEFAULT_ORDER


def _string_list(value) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


class TypeCatalog:
    """Collects every type carrying the type marker.

    Keys come from the marker's ``types`` list, or from the type's own name
    when no alternate keys are declared.  Declarations are visited by
    ascending ``order`` (ties keep the index's name order) and the first
    declaration to claim a key keeps it.  Keys whose type is banned are
    dropped entirely.
    """

    def __init__(
        self,
        index: MetadataIndex,
        banned: Callable[[TypeInfo | None], bool],
        type_marker: str = "YamlType",
        in_marker: str = "YamlIn",
    ):
        self.index = index
        self.banned = banned
        self.type_marker = type_marker
        self.in_marker = in_marker

    def build(self) -> list[tuple[str, TypeDescriptor]]:
        annotated = sorted(
            self.index.annotated(self.type_marker),
            key=lambda ci: type_order(ci, self.type_marker),
        )

        claimed: dict[str, TypeInfo] = {}
        for ci in annotated:
            if ci.has_annotation_value(self.type_marker, "types"):
                for key in _string_list(ci.annotation_value(self.type_marker, "types")):
                    claimed.setdefault(key, ci)
            else:
                claimed.setdefault(ci.name, ci)

        entries = []
        for key in sorted(claimed):
            ci = claimed[key]
            type_info = self.index.get(key) or ci
            if self.banned(type_info):
                log.info("Skipping banned type %s", key)
                continue
            entries.append((key, self._describe(key, ci, type_info)))
        return entries

    def _describe(self, key: str, ci: TypeInfo, type_info: TypeInfo) -> TypeDescriptor:
        nodes = _string_list(ci.annotation_value(self.type_marker, "nodes"))
        return TypeDescriptor(
            key=key,
            nodes=tuple(sorted(set(nodes))),
            order=type_order(ci, self.type_marker),
            top_level=ci.has_annotation(self.in_marker),
            inline=bool(ci.annotation_value(self.type_marker, "inline", False)),
            info=ci,
            type_info=type_info,
        )
