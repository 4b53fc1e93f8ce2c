"""Click CLI entry point with lazy-loaded subcommands."""

import logging

import click

# Lazy-loading command group: imports command modules only when invoked.
# This keeps networkx and tree-sitter off the `--help` path.
_COMMANDS = {
    "generate": ("dslschema.commands.cmd_generate", "generate"),
    "catalog":  ("dslschema.commands.cmd_catalog",  "catalog"),
    "refs":     ("dslschema.commands.cmd_refs",     "refs"),
}


class LazyGroup(click.Group):
    """A Click group that lazy-loads command modules on first access."""

    def list_commands(self, ctx):
        return sorted(_COMMANDS.keys())

    def get_command(self, ctx, cmd_name):
        if cmd_name not in _COMMANDS:
            return None
        module_path, attr_name = _COMMANDS[cmd_name]
        import importlib
        mod = importlib.import_module(module_path)
        return getattr(mod, attr_name)


def _configure_logging(verbose: int) -> None:
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@click.group(cls=LazyGroup)
@click.version_option(package_name="dslschema")
@click.option('--json', 'json_mode', is_flag=True, help='Output in JSON format')
@click.option('--verbose', '-v', count=True, help='More logging (-v info, -vv debug)')
@click.option(
    '--config',
    'config_path',
    type=click.Path(exists=True),
    default=None,
    help='Config file (default: nearest .dslschema.yaml)',
)
@click.pass_context
def cli(ctx, json_mode, verbose, config_path):
    """dslschema: JSON schema synthesis for annotated DSL model types."""
    ctx.ensure_object(dict)
    ctx.obj['json'] = json_mode
    ctx.obj['config_path'] = config_path
    _configure_logging(verbose)
