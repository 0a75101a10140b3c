"""pg-replslot-reader - inspect replication slots in a stopped data directory."""
from __future__ import annotations

from pathlib import Path

import click

from replslot_core.models import ScanReport

from .errors import UnsupportedServerVersion
from .export import write_report_parquet
from .pgversion import check_pg_version
from .render import render_json, render_text
from .scanner import scan_slots

__version__ = "0.1"

PROG_NAME = "pg-replslot-reader"


class ReaderCommand(click.Command):
    """Every command-line usage error is fatal with exit status 1."""

    def make_context(self, info_name, args, parent=None, **extra):
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except click.UsageError as e:
            e.exit_code = 1
            raise


def inspect_data_dir(data_dir: Path) -> ScanReport:
    """Run the version gate and the slot scan."""
    check_pg_version(data_dir)
    return scan_slots(data_dir)


@click.command(cls=ReaderCommand, context_settings={"help_option_names": ["-?", "--help"]})
@click.option(
    "-D",
    "--pgdata",
    type=click.Path(),
    envvar="PGDATA",
    help="PostgreSQL data directory to examine",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
    help="Report format",
)
@click.option(
    "--parquet",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write the report as a Parquet table",
)
@click.version_option(
    __version__, "-V", "--version", prog_name=PROG_NAME, message="%(prog)s %(version)s"
)
def main(pgdata: str | None, fmt: str, parquet: Path | None) -> None:
    """Display replication slots stored in a PostgreSQL data directory."""
    # An empty -D is as good as none; Path("") would mean the current directory.
    if not pgdata:
        click.echo("Please provide the PostgreSQL data directory location with -D/--pgdata")
        raise SystemExit(1)

    data_dir = Path(pgdata)
    if fmt == "text":
        click.echo(f"Checking directory {data_dir}...")

    try:
        report = inspect_data_dir(data_dir)
        if parquet is not None and not write_report_parquet(report, parquet):
            click.echo(f"No replication slots found; {parquet} not written", err=True)
    except UnsupportedServerVersion as e:
        # Nothing to do for pre-9.4 clusters; not a failure.
        click.echo(str(e))
        raise SystemExit(0)
    except Exception as e:
        # Fail closed with a single-line reason, no stack trace.
        click.echo(f"FATAL: {e}")
        raise SystemExit(1)

    click.echo(render_json(report) if fmt == "json" else render_text(report))


if __name__ == "__main__":
    main()
