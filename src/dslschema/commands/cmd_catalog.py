"""List the catalog of schema-generating types."""

from __future__ import annotations

import click

from dslschema.commands.resolve import SOURCE_FORMATS, load_index, resolve_config
from dslschema.output.formatter import format_table, json_envelope, to_json
from dslschema.schema.banned import BannedTypes
from dslschema.schema.catalog import TypeCatalog


def describe_catalog(index, config) -> list[dict]:
    """One row per retained catalog key, with the slot it is wired into."""
    catalog = TypeCatalog(index, BannedTypes(config.banned), config.type_marker, config.in_marker)
    rows = []
    for key, descriptor in catalog.build():
        if descriptor.top_level:
            role = "item"
        elif index.extends_type(descriptor.type_info, config.base_step_type):
            role = "step"
        else:
            role = "-"
        rows.append({
            "key": key,
            "nodes": list(descriptor.nodes),
            "order": descriptor.order,
            "role": role,
            "inline": descriptor.inline,
            "declared_by": descriptor.info.name,
        })
    return rows


@click.command("catalog")
@click.argument("sources", nargs=-1, type=click.Path(exists=True))
@click.option("--format", "fmt", type=click.Choice(SOURCE_FORMATS), default="auto", show_default=True)
@click.option("--ban", "banned", multiple=True, help="Glob of type names to exclude (repeatable).")
@click.pass_context
def catalog(ctx, sources, fmt, banned):
    """Show catalog keys, node aliases, order and wiring role."""
    json_mode = ctx.obj.get("json") if ctx.obj else False
    config = resolve_config(ctx.obj)
    if banned:
        config = config.with_overrides(banned=tuple(config.banned) + tuple(banned))

    index = load_index(sources, fmt)
    rows = describe_catalog(index, config)
    counts = {role: sum(1 for r in rows if r["role"] == role) for role in ("item", "step", "-")}

    if json_mode:
        click.echo(
            to_json(
                json_envelope(
                    "catalog",
                    summary={
                        "verdict": f"{len(rows)} types",
                        "items": counts["item"],
                        "steps": counts["step"],
                    },
                    types=rows,
                )
            )
        )
        return

    click.echo(f"VERDICT: {len(rows)} types ({counts['item']} items, {counts['step']} steps)")
    click.echo()
    table = [
        [r["key"], ",".join(r["nodes"]) or "-", str(r["order"]), r["role"] + (" inline" if r["inline"] else "")]
        for r in rows
    ]
    click.echo(format_table(["key", "nodes", "order", "role"], table))
