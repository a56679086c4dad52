"""Main CLI entry point for Plume.

This module provides the main click group and lazy loading
of command modules to keep startup fast.
"""

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

# Console for rich output
console = Console()


class LazyGroup(click.Group):
    """A click Group whose subcommands are imported on first use.

    Each lazy subcommand maps to an ``"module:attribute"`` target, so
    ``plume --help`` and a single command only import what they need.
    """

    def __init__(self, *args, lazy_subcommands: dict[str, str] | None = None, **kwargs):
        """Initialize the lazy group.

        Args:
            lazy_subcommands: Mapping of command names to ``module:attribute`` targets.
        """
        super().__init__(*args, **kwargs)
        self.lazy_subcommands = dict(lazy_subcommands or {})

    def list_commands(self, ctx: click.Context) -> list[str]:
        return sorted({*super().list_commands(ctx), *self.lazy_subcommands})

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        target = self.lazy_subcommands.get(cmd_name)
        if target is None or cmd_name in self.commands:
            return super().get_command(ctx, cmd_name)
        command = self._resolve(cmd_name, target)
        self.add_command(command, cmd_name)
        return command

    @staticmethod
    def _resolve(cmd_name: str, target: str) -> click.Command:
        """Import ``module:attribute`` and check it is a click command."""
        import importlib

        module_path, _, attr_name = target.partition(":")
        command = getattr(importlib.import_module(module_path), attr_name, None)
        if not isinstance(command, click.Command):
            raise click.ClickException(f"'{cmd_name}' does not resolve to a command ({target})")
        return command


LAZY_SUBCOMMANDS = {
    # Daily writing
    "today": "plume.cli.entry:today",
    "entry": "plume.cli.entry:entry",
    # Tasks
    "todo": "plume.cli.todo:todo",
    # Browsing
    "calendar": "plume.cli.calendar:calendar_view",
    "heatmap": "plume.cli.calendar:heatmap",
    "explore": "plume.cli.explore:explore",
    "cloud": "plume.cli.explore:cloud",
    "search": "plume.cli.explore:search",
    # Backup
    "export": "plume.cli.data:export",
    "import": "plume.cli.data:import_data",
    "reset": "plume.cli.data:reset",
}


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def configure_logging(verbose: bool) -> None:
    """Route log records through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group(cls=LazyGroup, lazy_subcommands=LAZY_SUBCOMMANDS, context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="plume-journal")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Show debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Plume - a quiet place for daily gratitude, memories and notes.

    \b
    Quick Start:
      plume today                       # Today's entry, streak and tasks
      plume entry gratitude "Sunshine"  # Add a gratitude for today
      plume todo add "Call mom"         # Add a task for today
      plume explore --period month      # Stats for the last 30 days
    """
    configure_logging(verbose)
    ctx.ensure_object(dict)


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
