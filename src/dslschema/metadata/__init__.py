"""Type metadata sources: catalog files and annotated Java sources."""

from dslschema.metadata.index import MetadataIndex
from dslschema.metadata.model import TypeInfo

__all__ = [
    "MetadataIndex",
    "TypeInfo",
]
