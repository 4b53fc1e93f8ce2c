"""Property collection across a type's inheritance chain."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from dslschema.metadata.index import MetadataIndex
from dslschema.metadata.model import TypeInfo

log = logging.getLogger(__name__)

INTERNAL_PREFIX = "__"
EXTENDS = "__extends"


@dataclass(frozen=True)
class PropertyDescriptor:
    """A declared property: name, type-spec string and required flag."""

    name: str
    type: str
    required: bool = False

    @property
    def is_internal(self) -> bool:
        return self.name.startswith(INTERNAL_PREFIX)


def _as_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


class PropertyCollector:
    """Walks a type and its superclasses, most-derived first.

    Rules, per declared property in declaration order:

    * a property without a string name or type is logged and skipped;
    * an ``object:<Ref>`` property whose ``<Ref>`` is banned is skipped
      (``array:`` and ``enum:`` properties are never ban-checked);
    * internal directives (``__`` prefix) are always kept;
    * a name already collected ends collection for this type *and* all of
      its ancestors, so anything declared after it is dropped too.

    After a type's own list, its superclass is visited.  A superclass that
    is not in the index ends the walk.
    """

    def __init__(
        self,
        index: MetadataIndex,
        banned: Callable[[TypeInfo | None], bool],
        type_marker: str = "YamlType",
    ):
        self.index = index
        self.banned = banned
        self.type_marker = type_marker

    def collect(
        self, info: TypeInfo | None, accumulator: list[PropertyDescriptor] | None = None
    ) -> list[PropertyDescriptor]:
        if accumulator is None:
            accumulator = []
        self._collect(info, accumulator, set())
        return accumulator

    def declared(self, info: TypeInfo) -> list[dict]:
        raw = info.annotation_value(self.type_marker, "properties") or []
        if isinstance(raw, dict):
            # a single annotation written without braces
            raw = [raw]
        return [p for p in raw if isinstance(p, dict)]

    def _collect(self, info: TypeInfo | None, accumulator: list[PropertyDescriptor], seen: set[str]) -> None:
        if info is None or info.name in seen:
            return
        seen.add(info.name)

        for raw in self.declared(info):
            name = raw.get("name")
            type_spec = raw.get("type")
            if not (name and isinstance(name, str) and type_spec and isinstance(type_spec, str)):
                log.warning("Missing or non-string name or type for property %r on type %s", raw, info.name)
                continue

            if type_spec.startswith("object:"):
                if self.banned(self.index.get(type_spec[len("object:"):])):
                    continue

            prop = PropertyDescriptor(name, type_spec, _as_bool(raw.get("required", False)))
            if prop.is_internal:
                accumulator.append(prop)
                continue

            if any(p.name == name for p in accumulator):
                log.debug("Duplicate property %s on %s, stopping collection", name, info.name)
                return
            accumulator.append(prop)

        self._collect(self.index.superclass(info), accumulator, seen)
