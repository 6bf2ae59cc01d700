"""CLI entry point for smemtop."""

import shutil
import sys
from dataclasses import replace
from pathlib import Path

import click

from smemtop import __version__
from smemtop.config import MIN_REFRESH_INTERVAL, Config
from smemtop.models import SortKey

SORT_HELP = "Once running, hit n, r, p, s, or u to sort by Name, RSS, PSS, Swap, or USS."


@click.command(epilog=SORT_HELP)
@click.version_option(__version__, prog_name="smemtop")
@click.option(
    "--sort",
    "sort_key",
    type=click.Choice([key.value for key in SortKey]),
    default=None,
    help="Start sorted by name, rss, pss, swap, or uss (default rss).",
)
@click.option(
    "--interval",
    type=click.FloatRange(min=MIN_REFRESH_INTERVAL),
    default=None,
    help="Seconds between refreshes (default 1.0).",
)
@click.option("--once", is_flag=True, help="Print the table once and exit.")
@click.option("--debug", is_flag=True, help="Log skipped processes and key events.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Read settings from this TOML file.",
)
def main(
    sort_key: str | None,
    interval: float | None,
    once: bool,
    debug: bool,
    config_path: Path | None,
) -> None:
    """Show per-process RSS, PSS, USS and swap, refreshed live."""
    from smemtop.logging import configure

    try:
        config = Config.load(config_path)
    except ValueError as e:
        raise click.UsageError(str(e)) from e
    if sort_key is not None:
        config = replace(config, sort_key=SortKey(sort_key))
    if interval is not None:
        config = replace(config, refresh_interval=interval)
    if debug:
        config = replace(config, log_level="debug")

    configure(config)

    if once:
        print_once(config)
        return

    if not sys.stdout.isatty():
        click.echo("smemtop: cannot initialize terminal UI (stdout is not a terminal)", err=True)
        sys.exit(1)

    from smemtop.app import SmemtopApp

    app = SmemtopApp(config)
    app.run()
    if app.return_code:
        sys.exit(app.return_code)


def print_once(config: Config) -> None:
    """Scan once and print the table as plain text."""
    from smemtop.collection import CollectionBuilder
    from smemtop.owners import OwnerCache
    from smemtop.presenter import format_table, render_lines
    from smemtop.smaps import Scraper

    builder = CollectionBuilder(Scraper(OwnerCache()))
    processes = builder.build(config.proc_root, config.sort_key)
    if builder.last_error is not None:
        click.echo(f"smemtop: cannot read {config.proc_root}: {builder.last_error}", err=True)

    width = shutil.get_terminal_size().columns
    for line in render_lines(format_table(processes, width)):
        click.echo(line)


if __name__ == "__main__":
    main()
