"""Standardized CLI exit codes for dslschema.

Exit code scheme:

    0  SUCCESS        -- schema generated (or report printed)
    1  GENERAL_ERROR  -- unexpected failure, crash, unhandled exception
    2  USAGE_ERROR    -- invalid arguments, bad flags, unknown command (Click default)
    3  CATALOG_ERROR  -- metadata source missing or malformed
    4  CONFIG_ERROR   -- .dslschema.yaml is invalid
    5  WRITE_FAILURE  -- the schema file could not be written
    6  PARTIAL        -- completed, but the schema has dangling references

Build pipelines can tell "the inputs are broken" (3, 4) apart from
"the filesystem refused the write" (5).
"""

from __future__ import annotations

import click

# ---------------------------------------------------------------------------
# Exit code constants
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_ERROR: int = 1
EXIT_USAGE: int = 2
EXIT_CATALOG_ERROR: int = 3
EXIT_CONFIG_ERROR: int = 4
EXIT_WRITE_FAILURE: int = 5
EXIT_PARTIAL: int = 6

DESCRIPTIONS: dict[int, str] = {
    EXIT_SUCCESS: "success",
    EXIT_ERROR: "unexpected error",
    EXIT_USAGE: "invalid usage (bad arguments or flags)",
    EXIT_CATALOG_ERROR: "metadata source missing or malformed",
    EXIT_CONFIG_ERROR: "invalid configuration file",
    EXIT_WRITE_FAILURE: "schema file could not be written",
    EXIT_PARTIAL: "partial results (dangling references)",
}

# ---------------------------------------------------------------------------
# Custom exceptions (caught by Click's error handler)
# ---------------------------------------------------------------------------


class SchemaGenError(click.ClickException):
    """Base class for dslschema errors with exit codes."""

    def __init__(self, message: str, exit_code: int = EXIT_ERROR):
        super().__init__(message)
        self.exit_code = exit_code

    def format_message(self) -> str:
        return self.message


class CatalogError(SchemaGenError):
    """Raised when a metadata source cannot be read or is malformed."""

    def __init__(self, message: str = "No usable metadata source."):
        super().__init__(message, EXIT_CATALOG_ERROR)


class ConfigError(SchemaGenError):
    """Raised when the configuration file is invalid."""

    def __init__(self, message: str = "Invalid configuration."):
        super().__init__(message, EXIT_CONFIG_ERROR)


class WriteError(SchemaGenError):
    """Raised when the writer cannot create or update the schema file."""

    def __init__(self, message: str = "Could not write schema file."):
        super().__init__(message, EXIT_WRITE_FAILURE)
