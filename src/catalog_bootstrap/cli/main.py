"""Main CLI entry point for Catalog Bootstrap.

Provides the ``catalog-bootstrap`` command group. The ``populate`` command
runs one catalog population pass against a runtime context built from the
configuration file and prints the resulting catalog.
"""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from catalog_bootstrap import __version__
from catalog_bootstrap.utils.log_filter import quiet_logger

console = Console()

INITIALIZATION_LOGGERS = ["CATALOG_INIT", "CONFIG", "catalog", "parsers", "resources"]


@click.group()
@click.version_option(version=__version__, prog_name="catalog-bootstrap")
def cli():
    """Catalog Bootstrap CLI - populate a runtime catalog from its configured sources.

    Use 'catalog-bootstrap COMMAND --help' for more information on a specific command.
    """


@cli.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Configuration file (default: ./config.yml if present)",
)
@click.option("--catalog-initial", "initial_uri", default=None, help="URI of the initial catalog")
@click.option("--catalog-reset", is_flag=True, help="Request a reset of persisted catalog items")
@click.option("--catalog-add", "additions_uri", default=None, help="URI of items to add after the initial load")
@click.option("--catalog-force", is_flag=True, help="Let added items replace existing ones with the same id")
@click.option("--quiet", "-q", is_flag=True, help="Only show warnings and errors from initialization")
@click.option("--verbose", "-v", is_flag=True, help="Show debug output from initialization")
def populate(config_path, initial_uri, catalog_reset, additions_uri, catalog_force, quiet, verbose):
    """Run one catalog population pass and show the result.

    \b
    Examples:
      catalog-bootstrap populate --catalog-initial file:///srv/catalog.bom
      catalog-bootstrap populate --config config.yml --catalog-add extra.bom --catalog-force
    """
    # Imported lazily so that --help stays fast
    from catalog_bootstrap.initialization import CatalogInitialization
    from catalog_bootstrap.runtime import RuntimeContext
    from catalog_bootstrap.utils.config import ConfigBuilder, get_config_builder

    if config_path is not None:
        config = get_config_builder(config_path, set_as_default=True)
    elif (Path.cwd() / "config.yml").exists():
        config = get_config_builder()
    else:
        config = ConfigBuilder.from_dict({})

    initialization = CatalogInitialization(
        initial_uri=initial_uri,
        reset=catalog_reset,
        additions_uri=additions_uri,
        force=catalog_force,
    )
    context = RuntimeContext(config, catalog_initialization=initialization)

    if verbose:
        for name in INITIALIZATION_LOGGERS:
            logging.getLogger(name).setLevel(logging.DEBUG)

    if quiet:
        with quiet_logger(INITIALIZATION_LOGGERS):
            catalog = initialization.populate_catalog(context)
    else:
        catalog = initialization.populate_catalog(context)

    _display_catalog(catalog, initialization.run_count)


def _display_catalog(catalog, run_count: int) -> None:
    stats = catalog.get_stats()

    console.print()
    console.print(f"[bold]Catalog[/bold] ({stats['items']} item(s), run count {run_count})")
    if stats["document_name"]:
        console.print(f"  Legacy document: {stats['document_name']}")

    if not stats["items"]:
        console.print("  [dim]Catalog is empty[/dim]")
        return

    table = Table(show_header=True, header_style="bold", expand=False)
    table.add_column("Id", style="cyan")
    table.add_column("Version")
    table.add_column("Type")
    table.add_column("Name")
    table.add_column("Source", style="dim")

    for item in catalog.list_items():
        table.add_row(
            item.symbolic_name,
            item.version,
            item.item_type.value,
            item.display_name or "",
            item.source or "",
        )
    console.print(table)


def main():
    """Entry point for the catalog-bootstrap CLI."""
    try:
        cli(standalone_mode=False)
    except click.exceptions.Abort:
        click.echo("\nAborted!", err=True)
        sys.exit(130)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except KeyboardInterrupt:
        click.echo("\nInterrupted", err=True)
        sys.exit(130)
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
