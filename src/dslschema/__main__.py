"""Allow ``python -m dslschema``."""

from dslschema.cli import cli

if __name__ == "__main__":
    cli()
