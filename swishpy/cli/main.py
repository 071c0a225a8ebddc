"""swish CLI - Main commands."""
import asyncio
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn
from rich.table import Table

from swishpy.core.exceptions import SwishException
from swishpy.core.links import is_share_link
from swishpy.core.logging import format_size
from swishpy.core.upload.models import ALLOWED_DURATIONS, MIN_DOWNLOADS, MAX_DOWNLOADS

app = typer.Typer(
    name="swish",
    help="SwissTransfer CLI: upload files and download share links",
    add_completion=False
)
console = Console()


def run_async(coro):
    """Run async function."""
    return asyncio.run(coro)


def validate_duration(value: int) -> int:
    if value not in ALLOWED_DURATIONS:
        raise typer.BadParameter(
            f"Duration must be {', '.join(map(str, ALLOWED_DURATIONS[:-1]))} or {ALLOWED_DURATIONS[-1]}"
        )
    return value


def validate_downloads(value: int) -> int:
    if not MIN_DOWNLOADS <= value <= MAX_DOWNLOADS:
        raise typer.BadParameter(
            f"Number of downloads must be between {MIN_DOWNLOADS} and {MAX_DOWNLOADS}"
        )
    return value


def validate_link(value: str) -> str:
    if not is_share_link(value):
        raise typer.BadParameter(f"Not a SwissTransfer link: {value}")
    return value


def _progress_bar() -> Progress:
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console
    )


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show INFO log messages"),
):
    """Upload files to SwissTransfer and download share links."""
    if verbose:
        from swishpy import setup_logging
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
        setup_logging(logging.INFO)


@app.command()
def upload(
    paths: List[Path] = typer.Argument(..., help="Files or folders to upload", exists=True),
    password: Optional[str] = typer.Option(None, "--password", "-p", help="Password protecting the download"),
    message: str = typer.Option("", "--message", "-m", help="Message shown on the download page"),
    downloads: int = typer.Option(
        MAX_DOWNLOADS, "--downloads", "-n", help="Maximum number of downloads (1-250)",
        callback=validate_downloads
    ),
    duration: int = typer.Option(
        30, "--duration", "-d", help="Days the transfer stays online (1, 7, 15 or 30)",
        callback=validate_duration
    ),
):
    """Upload files and print the share link."""
    from swishpy import SwishClient
    from swishpy.core.progress import TransferProgress
    from swishpy.core.upload.models import TransferParameters

    params = TransferParameters(
        duration=duration,
        password=password,
        message=message,
        number_of_downloads=downloads
    )

    async def do_upload():
        async with SwishClient() as swish:
            files = swish.collect_files(paths)
            total = sum(f.size for f in files)

            with _progress_bar() as progress:
                task = progress.add_task(f"Uploading {len(files)} file(s)", total=total or 1)

                def on_progress(p: TransferProgress):
                    progress.update(task, completed=p.transferred_bytes if total else p.completed_items)

                result = await swish.upload_files(files, params, progress_callback=on_progress)

            console.print(f"[green]Uploaded:[/green] {len(result.files)} file(s), {format_size(result.total_bytes)}")
            console.print(f"Download link: {result.link}")

    try:
        run_async(do_upload())
    except SwishException as e:
        console.print(f"[red]Upload failed: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def download(
    link: str = typer.Argument(..., help="Share link", callback=validate_link),
    password: Optional[str] = typer.Option(None, "--password", "-p", help="Link password"),
    output: Path = typer.Option(Path("."), "--output", "-o", help="Destination directory"),
):
    """Download every file behind a share link."""
    from swishpy import SwishClient
    from swishpy.core.progress import TransferProgress

    async def do_download():
        async with SwishClient() as swish:
            manifest = await swish.resolve(link, password)

            with _progress_bar() as progress:
                task = progress.add_task(
                    f"Downloading {len(manifest.files)} file(s)",
                    total=manifest.total_bytes or 1
                )

                def on_progress(p: TransferProgress):
                    progress.update(task, completed=p.transferred_bytes)

                paths = await swish.download_manifest(
                    manifest, password, output, progress_callback=on_progress
                )
                progress.update(task, completed=manifest.total_bytes or 1)

            for path in paths:
                console.print(f"[green]Downloaded:[/green] {path}")

    try:
        run_async(do_download())
    except SwishException as e:
        console.print(f"[red]Download failed: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def info(
    link: str = typer.Argument(..., help="Share link", callback=validate_link),
    password: Optional[str] = typer.Option(None, "--password", "-p", help="Link password"),
):
    """Show the files behind a share link."""
    from swishpy import SwishClient

    async def do_info():
        async with SwishClient() as swish:
            manifest = await swish.resolve(link, password)

        table = Table()
        table.add_column("Name")
        table.add_column("Size", justify="right")
        table.add_column("Type", style="cyan")
        table.add_column("Downloads", justify="right")
        table.add_column("Expires", style="dim")

        for remote_file in manifest.files:
            table.add_row(
                remote_file.name,
                format_size(remote_file.size),
                remote_file.mime_type or "-",
                str(remote_file.download_counter),
                remote_file.expired_date or "-"
            )

        console.print(table)
        console.print(
            f"{len(manifest.files)} file(s), {format_size(manifest.total_bytes)}"
            f"{', password protected' if manifest.needs_password else ''}"
        )

    try:
        run_async(do_info())
    except SwishException as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
