"""Generate the JSON schema for a set of annotated model types."""

from __future__ import annotations

import logging

import click

from dslschema.commands.resolve import SOURCE_FORMATS, load_index, resolve_config
from dslschema.output.formatter import json_envelope, to_json
from dslschema.output.writer import render_schema, update_file
from dslschema.schema.banned import BannedTypes
from dslschema.schema.builder import SchemaTreeBuilder
from dslschema.schema.refs import build_reference_graph, find_dangling

log = logging.getLogger(__name__)


@click.command("generate")
@click.argument("sources", nargs=-1, type=click.Path(exists=True))
@click.option("--output", "-o", "output", default=None, help="Schema file to create or update.")
@click.option("--stdout", "to_stdout", is_flag=True, help="Print the schema instead of writing a file.")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(SOURCE_FORMATS),
    default="auto",
    show_default=True,
    help="How to read SOURCES.",
)
@click.option(
    "--kebab-case/--camel-case",
    "kebab_case",
    default=None,
    help="Property key casing (default: kebab-case).",
)
@click.option(
    "--additional-properties/--no-additional-properties",
    "additional_properties",
    default=None,
    help="Whether definitions tolerate unlisted properties (default: tolerate).",
)
@click.option("--base-step", "base_step_type", default=None, help="Canonical name of the step base type.")
@click.option("--ban", "banned", multiple=True, help="Glob of type names to exclude (repeatable).")
@click.pass_context
def generate(ctx, sources, output, to_stdout, fmt, kebab_case, additional_properties, base_step_type, banned):
    """Build the schema from SOURCES and write it idempotently.

    SOURCES are YAML/JSON catalog files, Java source files, or directories
    of Java sources.  The output file is only rewritten when its content
    changes.

    \b
      dslschema generate model/ -o schema/camel-yaml-dsl.json
      dslschema generate catalog.yaml --camel-case --stdout
    """
    json_mode = ctx.obj.get("json") if ctx.obj else False
    config = resolve_config(
        ctx.obj,
        kebab_case=kebab_case,
        additional_properties=additional_properties,
        base_step_type=base_step_type,
        output=output,
    )
    if banned:
        config = config.with_overrides(banned=tuple(config.banned) + tuple(banned))
    if not to_stdout and not config.output:
        raise click.UsageError("Missing --output (or 'output' in .dslschema.yaml), or pass --stdout.")

    index = load_index(sources, fmt)
    root = SchemaTreeBuilder(index, config, BannedTypes(config.banned)).build()
    content = render_schema(root)

    dangling = find_dangling(build_reference_graph(root))
    for entry in dangling:
        log.warning(
            "Unresolved reference to %s from %s", entry["target"], ", ".join(entry["referrers"])
        )

    if to_stdout:
        click.echo(content, nl=False)
        return

    written = update_file(config.output, content)
    definitions = root["items"]["definitions"]
    verdict = "written" if written else "unchanged"

    if json_mode:
        click.echo(
            to_json(
                json_envelope(
                    "generate",
                    summary={
                        "verdict": verdict,
                        "definitions": len(definitions),
                        "dangling_refs": len(dangling),
                    },
                    output=str(config.output),
                    dangling=dangling,
                )
            )
        )
        return

    click.echo(f"VERDICT: {verdict} {config.output}")
    click.echo(f"  {len(definitions)} definitions, {len(dangling)} dangling references")
