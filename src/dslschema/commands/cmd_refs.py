"""Report dangling references and reference cycles in the generated schema."""

from __future__ import annotations

import click

from dslschema.commands.resolve import SOURCE_FORMATS, load_index, resolve_config
from dslschema.exit_codes import EXIT_PARTIAL
from dslschema.output.formatter import json_envelope, section, to_json
from dslschema.schema.banned import BannedTypes
from dslschema.schema.builder import SchemaTreeBuilder
from dslschema.schema.refs import build_reference_graph, find_dangling, find_reference_cycles


@click.command("refs")
@click.argument("sources", nargs=-1, type=click.Path(exists=True))
@click.option("--format", "fmt", type=click.Choice(SOURCE_FORMATS), default="auto", show_default=True)
@click.option("--strict", is_flag=True, help="Exit with code 6 when references dangle.")
@click.pass_context
def refs(ctx, sources, fmt, strict):
    """Check the $ref graph: dangling targets and definition cycles.

    Dangling references are reported, not repaired.  Cycles are legal in
    the schema and listed for information only.
    """
    json_mode = ctx.obj.get("json") if ctx.obj else False
    config = resolve_config(ctx.obj)
    index = load_index(sources, fmt)
    root = SchemaTreeBuilder(index, config, BannedTypes(config.banned)).build()

    G = build_reference_graph(root)
    dangling = find_dangling(G)
    cycles = find_reference_cycles(G)
    verdict = "all references resolve" if not dangling else f"{len(dangling)} dangling references"

    if json_mode:
        click.echo(
            to_json(
                json_envelope(
                    "refs",
                    summary={
                        "verdict": verdict,
                        "definitions": G.number_of_nodes() - len(dangling) - 1,
                        "references": G.number_of_edges(),
                        "dangling_refs": len(dangling),
                        "cycles": len(cycles),
                    },
                    dangling=dangling,
                    cycles=cycles,
                )
            )
        )
    else:
        click.echo(f"VERDICT: {verdict}")
        if dangling:
            click.echo()
            lines = [f"  {d['target']}  <-  {', '.join(d['referrers'])}" for d in dangling]
            click.echo(section("DANGLING:", lines))
        if cycles:
            click.echo()
            lines = [f"  {', '.join(c)}" for c in cycles]
            click.echo(section("CYCLES:", lines, budget=20))

    if strict and dangling:
        ctx.exit(EXIT_PARTIAL)
