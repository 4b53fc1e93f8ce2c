"""Schema synthesis: catalog, property collection, tree building, casing."""

from dslschema.schema.banned import BannedTypes
from dslschema.schema.builder import BuildSession, SchemaTreeBuilder, build_schema
from dslschema.schema.catalog import TypeCatalog, TypeDescriptor
from dslschema.schema.naming import dash_to_camel_case, normalize_tree
from dslschema.schema.properties import PropertyCollector, PropertyDescriptor

__all__ = [
    "BannedTypes",
    "BuildSession",
    "SchemaTreeBuilder",
    "build_schema",
    "TypeCatalog",
    "TypeDescriptor",
    "PropertyCollector",
    "PropertyDescriptor",
    "dash_to_camel_case",
    "normalize_tree",
]
