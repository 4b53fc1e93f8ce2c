"""Schema tree construction.

The emitted document is an array schema whose ``items`` accept exactly one
top-level node alias.  Every catalog type gets a definition under
``items.definitions``; the base step type's definition doubles as the
``step`` umbrella, listing every node alias of types that extend it::

    {
      "$schema": "...",
      "type": "array",
      "items": {
        "maxProperties": 1,
        "definitions": {"<key>": {...}, ...},
        "properties": {"<node>": {"$ref": "#/items/definitions/<key>"}}
      }
    }
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from dslschema.config import GeneratorConfig
from dslschema.metadata.index import MetadataIndex
from dslschema.metadata.model import TypeInfo
from dslschema.schema.banned import NO_BANS
from dslschema.schema.catalog import TypeCatalog, TypeDescriptor
from dslschema.schema.naming import dash_to_camel_case, normalize_tree
from dslschema.schema.properties import EXTENDS, PropertyCollector, PropertyDescriptor
from dslschema.schema.typespec import after, fragment, ref

log = logging.getLogger(__name__)


class BuildSession:
    """Mutable state of one build: the root and its shared nodes."""

    def __init__(self, config: GeneratorConfig):
        self.config = config
        self.root: dict = {
            "$schema": config.schema_dialect,
            "type": "array",
        }
        self.items: dict = {"maxProperties": 1}
        self.root["items"] = self.items
        if not config.additional_properties:
            self.items["additionalProperties"] = False
        self.definitions: dict = {}
        self.items["definitions"] = self.definitions

        self.step: dict = self.definition(config.base_step_type)
        self.step["type"] = "object"
        self.step["maxProperties"] = 1
        if not config.additional_properties:
            self.step["additionalProperties"] = False

    def definition(self, key: str) -> dict:
        return self.definitions.setdefault(key, {})

    def add_item(self, node: str, key: str) -> None:
        self.items.setdefault("properties", {})[node] = ref(key)

    def add_step(self, node: str, key: str) -> None:
        self.step.setdefault("properties", {})[node] = ref(key)


class SchemaTreeBuilder:
    """Builds the schema tree for every type in a metadata index."""

    def __init__(
        self,
        index: MetadataIndex,
        config: GeneratorConfig | None = None,
        banned: Callable[[TypeInfo | None], bool] = NO_BANS,
    ):
        self.index = index
        self.config = config or GeneratorConfig()
        self.banned = banned
        self.catalog = TypeCatalog(index, banned, self.config.type_marker, self.config.in_marker)
        self.collector = PropertyCollector(index, banned, self.config.type_marker)

    def build(self) -> dict:
        """Return a freshly built root node; nothing is shared between calls."""
        session = BuildSession(self.config)
        entries = self.catalog.build()

        for key, descriptor in entries:
            self._wire_nodes(session, descriptor)
            self._build_definition(session, descriptor)

        if not self.config.kebab_case:
            normalize_tree(session.root, self.config.base_step_type)

        log.info("Built schema with %d definitions", len(session.definitions))
        return session.root

    def _wire_nodes(self, session: BuildSession, descriptor: TypeDescriptor) -> None:
        if descriptor.top_level:
            for node in descriptor.nodes:
                session.add_item(node, descriptor.key)
        elif self.index.extends_type(descriptor.type_info, self.config.base_step_type):
            for node in descriptor.nodes:
                session.add_step(node, descriptor.key)

    def _build_definition(self, session: BuildSession, descriptor: TypeDescriptor) -> None:
        definition = session.definition(descriptor.key)
        object_definition = definition

        if descriptor.inline:
            one_of = definition.setdefault("oneOf", [])
            one_of.append({"type": "string"})
            object_definition = {}
            one_of.append(object_definition)

        object_definition["type"] = "object"
        if not self.config.additional_properties:
            object_definition["additionalProperties"] = False

        properties = self.collector.collect(descriptor.info)
        properties.sort(key=lambda p: p.name)

        extends_array = False
        for prop in properties:
            if prop.name == EXTENDS and prop.type.startswith("object:"):
                definition.setdefault("anyOf", []).append(ref(after(prop.type)))
                continue
            if prop.name == EXTENDS and prop.type.startswith("array:"):
                definition["type"] = "array"
                definition.setdefault("items", {})["$ref"] = ref(after(prop.type))["$ref"]
                extends_array = True
                continue
            if prop.is_internal:
                continue

            self._set_property(object_definition, prop)

            if prop.required:
                name = prop.name if self.config.kebab_case else dash_to_camel_case(prop.name)
                required = definition.setdefault("required", [])
                if name not in required:
                    required.append(name)

        if extends_array:
            # an array definition carries no object shape
            for key in ("oneOf", "properties", "required", "additionalProperties"):
                definition.pop(key, None)

    def _set_property(self, object_definition: dict, prop: PropertyDescriptor) -> None:
        properties = object_definition.setdefault("properties", {})
        properties.setdefault(prop.name, {}).update(fragment(prop.type))


def build_schema(
    index: MetadataIndex,
    config: GeneratorConfig | None = None,
    banned: Callable[[TypeInfo | None], bool] = NO_BANS,
) -> dict:
    """Convenience wrapper: ``SchemaTreeBuilder(...).build()``."""
    return SchemaTreeBuilder(index, config, banned).build()
