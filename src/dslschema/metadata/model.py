"""Type metadata records shared by every metadata source."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class TypeInfo:
    """Metadata for one class: canonical name, superclass and annotations.

    ``annotations`` maps an annotation's simple name (``YamlType``,
    ``YamlIn``, ...) to its attribute values.  Attribute values are plain
    Python data: strings, ints, bools, lists and nested dicts (nested
    annotations such as ``@YamlProperty`` become dicts).
    """

    name: str
    super_name: str | None = None
    annotations: dict[str, dict[str, Any]] = field(default_factory=dict, compare=False)
    source: str | None = field(default=None, compare=False)

    @property
    def simple_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]

    def has_annotation(self, marker: str) -> bool:
        return marker in self.annotations

    def annotation_value(self, marker: str, attr: str, default: Any = None) -> Any:
        """Return ``attr`` of annotation ``marker``, or *default* when absent."""
        values = self.annotations.get(marker)
        if values is None:
            return default
        return values.get(attr, default)

    def has_annotation_value(self, marker: str, attr: str) -> bool:
        values = self.annotations.get(marker)
        return values is not None and attr in values
