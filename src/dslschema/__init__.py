"""dslschema: JSON schema synthesis for annotated DSL model types."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("dslschema")
except PackageNotFoundError:
    __version__ = "dev"
