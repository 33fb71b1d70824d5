"""CLI for ArtCatalog.

Commands:
    init [dir]                 - Create an empty catalog
    add-piece <description>    - Add a piece
    ingest <file> [--piece ID] - Store a media file, reusing identical content
    tag <piece> <name>         - Tag a piece, creating the tag if needed
    search <query>             - Search pieces and summarize spending
    show-piece <id>            - Show piece details
    tags                       - List tags with categories and usage
    migrate <source> <dest>    - Rewrite a catalog in the current schema
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from art_catalog.catalog import Catalog, read_catalog, write_catalog
from art_catalog.config import settings
from art_catalog.errors import QuerySyntaxError, SchemaError
from art_catalog.models import Blob, BlobType, Category, Piece, PieceId, Tag
from art_catalog.search import execute, parse_query, summarize

app = typer.Typer(
    name="art-catalog",
    help="ArtCatalog: catalog, tag and search collected art",
    no_args_is_help=True,
)
console = Console()

DirOption = Annotated[
    Path, typer.Option("--dir", "-d", help="Catalog directory", file_okay=False)
]


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show debug logging")
    ] = False,
) -> None:
    """Configure logging for every command."""
    package_logger = logging.getLogger("art_catalog")
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        package_logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))
    package_logger.setLevel(logging.DEBUG if verbose else settings.log_level.upper())


def _catalog_path(directory: Path) -> Path:
    return directory / settings.catalog_file


def _load(directory: Path) -> Catalog:
    path = _catalog_path(directory)
    if not path.exists():
        console.print(f"[red]Error:[/red] No catalog at {path}. Run 'art-catalog init' first.")
        raise typer.Exit(1)
    try:
        return read_catalog(path)
    except SchemaError as e:
        console.print(f"[red]Error:[/red] {path} is not a readable catalog: {escape(str(e))}")
        raise typer.Exit(1) from None


def _load_stored_bytes(catalog: Catalog, directory: Path, content_hash: int) -> None:
    """Read back the bytes of stored blobs whose hash collides with ``content_hash``."""
    for blob_id, blob in catalog.blobs.items():
        if blob.hash != content_hash or blob.data:
            continue
        storage = directory / blob.storage_name(blob_id)
        if storage.exists():
            blob.data = storage.read_bytes()


def _price(value: int | None) -> str:
    return "-" if value is None else f"${value}"


def _parse_date(value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return datetime.strptime(value, settings.query_date_format).date()
    except ValueError:
        console.print(
            f"[red]Error:[/red] Invalid date {value!r} "
            f"(expected {settings.query_date_format})"
        )
        raise typer.Exit(1) from None


@app.command()
def init(
    directory: Annotated[
        Path, typer.Argument(help="Catalog directory", file_okay=False)
    ] = Path("."),
) -> None:
    """Create an empty catalog."""
    path = _catalog_path(directory)
    if path.exists():
        console.print(f"[yellow]Catalog already exists at {path}[/yellow]")
        raise typer.Exit(1)
    write_catalog(path, Catalog())
    console.print(f"[green]Created empty catalog at {path}[/green]")


@app.command("add-piece")
def add_piece(
    description: Annotated[str, typer.Argument(help="Piece description")],
    base: Annotated[int | None, typer.Option(help="Base price")] = None,
    tip: Annotated[int | None, typer.Option(help="Tip")] = None,
    added: Annotated[
        str | None, typer.Option(help="Date added (MM/DD/YYYY, default today)")
    ] = None,
    external_id: Annotated[str | None, typer.Option(help="External identifier")] = None,
    directory: DirOption = Path("."),
) -> None:
    """Add a piece to the catalog."""
    catalog = _load(directory)
    piece = Piece(
        description=description,
        base_price=base,
        tip_price=tip,
        external_id=external_id,
        added=_parse_date(added) or date.today(),
    )
    piece_id = catalog.create_piece(piece)
    write_catalog(_catalog_path(directory), catalog)
    console.print(f"[green]Added piece {piece_id}[/green]")


@app.command()
def ingest(
    path: Annotated[
        Path, typer.Argument(help="Media file to store", exists=True, dir_okay=False)
    ],
    piece: Annotated[int | None, typer.Option(help="Attach to this piece")] = None,
    blob_type: Annotated[
        BlobType, typer.Option("--type", help="Blob type")
    ] = BlobType.CANON,
    directory: DirOption = Path("."),
) -> None:
    """Store a media file, reusing an existing blob with identical content."""
    catalog = _load(directory)
    if piece is not None and PieceId(piece) not in catalog.pieces:
        console.print(f"[red]Error:[/red] Piece not found: {piece}")
        raise typer.Exit(1)

    data = path.read_bytes()
    candidate = Blob.from_bytes(path.name, data, blob_type=blob_type)
    _load_stored_bytes(catalog, directory, candidate.hash)
    blob_id, created = catalog.insert_blob_deduplicated(candidate)
    if created:
        storage = directory / catalog.blobs[blob_id].storage_name(blob_id)
        storage.write_bytes(data)
        console.print(f"[green]Stored blob {blob_id}[/green] → {escape(storage.name)}")
    else:
        console.print(f"[yellow]SKIP[/yellow] identical content already stored as blob {blob_id}")

    if piece is not None and catalog.attach_blob(PieceId(piece), blob_id):
        console.print(f"  Attached to piece {piece}")
    write_catalog(_catalog_path(directory), catalog)


@app.command("tag")
def tag_piece(
    piece: Annotated[int, typer.Argument(help="Piece ID")],
    name: Annotated[str, typer.Argument(help="Tag name")],
    category: Annotated[
        str | None, typer.Option(help="Category for a newly created tag")
    ] = None,
    directory: DirOption = Path("."),
) -> None:
    """Tag a piece, creating the tag (and its category) if needed."""
    catalog = _load(directory)
    piece_id = PieceId(piece)
    if piece_id not in catalog.pieces:
        console.print(f"[red]Error:[/red] Piece not found: {piece}")
        raise typer.Exit(1)

    tag_id = catalog.find_tag_in_category(name, category) if category else catalog.find_tag(name)
    if tag_id is None:
        tag_id = catalog.create_tag(Tag(name=name))
        if category:
            category_id = next(
                (cid for cid, c in catalog.categories.items() if c.name == category), None
            )
            if category_id is None:
                category_id = catalog.create_category(Category(name=category))
            catalog.attach_category(tag_id, category_id)
        console.print(f"[blue]Created tag {tag_id}[/blue]")

    if catalog.attach_tag(piece_id, tag_id):
        console.print(f"[green]Tagged piece {piece} with {name}[/green]")
    else:
        console.print(f"[yellow]Piece {piece} already has tag {name}[/yellow]")
    write_catalog(_catalog_path(directory), catalog)


@app.command()
def search(
    query: Annotated[str, typer.Argument(help="Search query")],
    directory: DirOption = Path("."),
) -> None:
    """Search pieces, then summarize what the matches cost."""
    catalog = _load(directory)
    try:
        parsed = parse_query(query)
    except QuerySyntaxError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        console.print(f"  {query}", markup=False, highlight=False)
        console.print("  " + " " * e.position + "^", markup=False, highlight=False)
        raise typer.Exit(1) from None

    matches = list(execute(parsed, catalog))
    if not matches:
        console.print(f"[yellow]No pieces found matching '{query}'[/yellow]")
        return

    table = Table(title=f"Search Results: '{query}'")
    table.add_column("ID", justify="right")
    table.add_column("Description")
    table.add_column("Added")
    table.add_column("Base", justify="right")
    table.add_column("Tip", justify="right")
    for piece_id in matches:
        piece = catalog.pieces[piece_id]
        description = piece.description
        table.add_row(
            str(piece_id),
            escape(description[:40] + "..." if len(description) > 40 else description),
            piece.added.strftime(settings.query_date_format),
            _price(piece.base_price),
            _price(piece.tip_price),
        )
    console.print(table)

    summary = summarize(catalog, matches)
    console.print(Panel(
        "\n".join([
            f"[bold]Price Total:[/bold] ${summary.base_total}",
            f"[bold]Tips:[/bold] ${summary.tip_total}",
            f"[bold]Total Spent:[/bold] ${summary.total_spent}",
            f"[bold]Tip Percentage:[/bold] {summary.tip_percentage}%",
            f"[bold]Average Price:[/bold] ${summary.average_price}",
            f"[bold]Average Tip:[/bold] ${summary.average_tip}",
            f"[bold]Piece Count:[/bold] {summary.piece_count}",
            f"[bold]Blob Count:[/bold] {summary.blob_count}",
        ]),
        title="Summary",
    ))


@app.command("show-piece")
def show_piece(
    piece_id: Annotated[int, typer.Argument(help="Piece ID")],
    directory: DirOption = Path("."),
) -> None:
    """Show details for a specific piece."""
    catalog = _load(directory)
    contained = catalog.contained_piece(PieceId(piece_id))
    if contained is None:
        console.print(f"[red]Error:[/red] Piece not found: {piece_id}")
        raise typer.Exit(1)

    piece = contained.piece
    panel_content = []
    panel_content.append(f"[bold]ID:[/bold] {piece_id}")
    if piece.external_id:
        panel_content.append(f"[bold]External ID:[/bold] {piece.external_id}")
    panel_content.append(f"[bold]Description:[/bold] {escape(piece.description) or '-'}")
    panel_content.append(f"[bold]Added:[/bold] {piece.added.strftime(settings.query_date_format)}")
    panel_content.append(f"[bold]Base Price:[/bold] {_price(piece.base_price)}")
    panel_content.append(f"[bold]Tip:[/bold] {_price(piece.tip_price)}")
    panel_content.append(f"[bold]Total:[/bold] {_price(piece.total_price)}")
    console.print(Panel("\n".join(panel_content), title="Piece Details"))

    if contained.tags:
        table = Table(title="Tags")
        table.add_column("Name", style="cyan")
        table.add_column("Category")
        for tag, category in contained.tags:
            table.add_row(escape(tag.name), escape(category.name) if category else "-")
        console.print(table)

    blob_ids = list(catalog.blobs_for_piece(PieceId(piece_id)))
    if blob_ids:
        table = Table(title="Blobs")
        table.add_column("ID", justify="right")
        table.add_column("Type")
        table.add_column("Storage")
        for blob_id in blob_ids:
            blob = catalog.blobs[blob_id]
            table.add_row(str(blob_id), blob.blob_type.label, escape(catalog.storage_for(blob_id) or "-"))
        console.print(table)


@app.command()
def tags(directory: DirOption = Path(".")) -> None:
    """List tags with their category and usage count."""
    catalog = _load(directory)
    if not len(catalog.tags):
        console.print("[yellow]No tags found.[/yellow]")
        return

    table = Table(title="Tags")
    table.add_column("ID", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Category")
    table.add_column("Pieces", justify="right")
    for tag_id, tag in catalog.tags.items():
        category_id = catalog.category_for_tag(tag_id)
        table.add_row(
            str(tag_id),
            escape(tag.name),
            escape(catalog.categories[category_id].name) if category_id is not None else "-",
            str(sum(1 for _ in catalog.pieces_for_tag(tag_id))),
        )
    console.print(table)


@app.command()
def migrate(
    source: Annotated[Path, typer.Argument(help="Catalog file to read", exists=True, dir_okay=False)],
    dest: Annotated[Path, typer.Argument(help="Catalog file to write", dir_okay=False)],
) -> None:
    """Load a catalog of either schema generation and rewrite it as the current one."""
    try:
        catalog = read_catalog(source)
    except SchemaError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None
    write_catalog(dest, catalog)
    console.print(f"[green]Wrote {catalog!r} to {dest}[/green]")


if __name__ == "__main__":
    app()
