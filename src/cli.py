"""CLI interface for folio."""

import json
import logging
from enum import StrEnum
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from folio.config import FolioConfig, load_config, merge_cli_overrides
from folio.content.frontmatter import dump_frontmatter, render_document
from folio.content.listing import duplicate_titles, sort_by_published
from folio.content.store import ContentStore
from folio.errors import ContentError, Severity

app = typer.Typer(
    name="folio",
    help="Check and list the Markdown content records of a static site.",
)

console = Console()
err_console = Console(stderr=True)

DirectoryArg = Annotated[
    Optional[Path],
    typer.Argument(
        help="Content directory. Defaults to content.directory from .folio.toml.",
        file_okay=False,
        dir_okay=True,
    ),
]
ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to a .folio.toml file."),
]


class SortOrder(StrEnum):
    """Record order for `folio list`."""

    PATH = "path"
    PUBLISHED = "published"


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from folio import __version__

        console.print(f"folio {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging."),
    ] = False,
) -> None:
    """Folio - validate and list Markdown content records."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _open_store(
    directory: Path | None,
    config_path: Path | None,
    **overrides: object,
) -> tuple[FolioConfig, ContentStore]:
    config = merge_cli_overrides(
        load_config(config_path),
        content_directory=directory,
        **overrides,
    )
    store = config.to_store()
    if not store.root.is_dir():
        console.print(f"[red]Error:[/red] Content directory not found: {store.root}")
        raise typer.Exit(2)
    return config, store


@app.command()
def check(
    directory: DirectoryArg = None,
    config_path: ConfigOption = None,
    strict: Annotated[
        Optional[bool],
        typer.Option("--strict/--no-strict", help="Treat warnings as failures."),
    ] = None,
    references: Annotated[
        Optional[bool],
        typer.Option(
            "--references/--no-references",
            help="Check image paths and project URLs.",
        ),
    ] = None,
) -> None:
    """Validate every record and report authoring defects.

    Exits with status 1 when any record fails to load, or when any
    warning is found under --strict.
    """
    config, store = _open_store(directory, config_path, strict=strict, references=references)
    report = store.scan()

    if report.diagnostics:
        table = Table(title="Diagnostics")
        table.add_column("Severity")
        table.add_column("Kind")
        table.add_column("File")
        table.add_column("Field")
        table.add_column("Message")
        for diag in report.diagnostics:
            color = "red" if diag.severity == Severity.ERROR else "yellow"
            table.add_row(
                f"[{color}]{diag.severity}[/{color}]",
                str(diag.kind),
                escape(diag.path),
                escape(diag.field),
                escape(diag.message),
            )
        console.print(table)

    for title, slugs in duplicate_titles(report.records).items():
        console.print(
            f"[blue]Note:[/blue] {len(slugs)} records share the title "
            f"{escape(repr(title))}: {escape(', '.join(slugs))}"
        )

    console.print(
        f"{report.scanned} file(s), {report.loaded} loaded "
        f"({report.drafts} draft(s)), {report.failed} failed, "
        f"{len(report.warnings)} warning(s)"
    )

    if not report.ok or (config.check.strict and report.warnings):
        raise typer.Exit(1)
    console.print("[green]All records OK[/green]")


@app.command("list")
def list_cmd(
    directory: DirectoryArg = None,
    config_path: ConfigOption = None,
    published_only: Annotated[
        bool,
        typer.Option("--published-only/--all", help="Hide draft records."),
    ] = False,
    sort: Annotated[
        SortOrder,
        typer.Option("--sort", "-s", help="Discovery path order, or newest published first."),
    ] = SortOrder.PATH,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Emit JSON instead of a table."),
    ] = False,
) -> None:
    """List valid records."""
    _, store = _open_store(directory, config_path)
    records = list(store.enumerate(published_only=published_only))
    if sort == SortOrder.PUBLISHED:
        records = sort_by_published(records)

    if json_output:
        payload = [r.model_dump(mode="json", exclude={"body"}) for r in records]
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    if not records:
        console.print("[yellow]No records found.[/yellow]")
        return

    table = Table()
    table.add_column("Slug", no_wrap=True)
    table.add_column("Published")
    table.add_column("Title")
    table.add_column("Draft")
    for record in records:
        table.add_row(
            escape(record.slug),
            record.published.isoformat() if record.published else "",
            escape(record.title or ""),
            "yes" if record.draft else "",
        )
    console.print(table)


@app.command()
def show(
    slug: Annotated[str, typer.Argument(help="Record slug, e.g. posts/my-post.")],
    directory: DirectoryArg = None,
    config_path: ConfigOption = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Emit JSON instead of YAML."),
    ] = False,
) -> None:
    """Show one record's metadata."""
    _, store = _open_store(directory, config_path)
    record = store.get(slug)
    if record is None:
        console.print(f"[red]Error:[/red] No valid record with slug: {slug}")
        raise typer.Exit(1)

    if json_output:
        typer.echo(json.dumps(record.model_dump(mode="json", exclude={"body"}), indent=2, ensure_ascii=False))
        return

    typer.echo(f"# {record.path}")
    typer.echo(dump_frontmatter(record.front_matter()), nl=False)


@app.command()
def fmt(
    directory: DirectoryArg = None,
    config_path: ConfigOption = None,
    check_only: Annotated[
        bool,
        typer.Option("--check", help="Only report files that would change."),
    ] = False,
) -> None:
    """Rewrite record headers in canonical key order and YAML style.

    Bodies are never touched.  Records that fail to load are reported
    and left alone.
    """
    _, store = _open_store(directory, config_path)
    changed = 0
    failed = 0

    for path in store.discover():
        try:
            record = store.load(path)
        except ContentError as exc:
            console.print(f"[red]Skipped:[/red] {escape(str(exc))}")
            failed += 1
            continue

        original = path.read_text(encoding="utf-8")
        if render_document(record.front_matter(), record.body) == original:
            continue

        changed += 1
        if check_only:
            console.print(f"would reformat {record.path}")
        else:
            store.write(record)
            console.print(f"reformatted {record.path}")

    verb = "would be reformatted" if check_only else "reformatted"
    console.print(f"{changed} file(s) {verb}, {failed} skipped")
    if check_only and changed:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
