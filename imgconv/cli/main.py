"""
Command line interface
Converts images the way the form does and optionally submits them
"""

import asyncio
from pathlib import Path
from typing import Annotated, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from imgconv import __version__
from imgconv.config import settings
from imgconv.core.constants import LOSSLESS_FORMATS, TARGET_FORMATS
from imgconv.core.exceptions import ImageConverterError
from imgconv.models.files import FileInput, SelectedFile
from imgconv.services.form_service import FormPage, FormSection
from imgconv.services.submission_service import UploadClient
from imgconv.utils.logging import setup_logging

app = typer.Typer(
    name="imgconv",
    help="Validate, convert and submit images the way the image form does",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)

console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"imgconv {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            callback=_version_callback,
            is_eager=True,
            help="Show version",
        ),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", help="Enable verbose output")
    ] = False,
):
    """Image form converter"""
    setup_logging(
        log_level="DEBUG" if verbose else "WARNING",
        json_logs=False,
        enable_file_logging=False,
    )


@app.command()
def convert(
    files: Annotated[
        List[Path],
        typer.Argument(
            help="Image files to convert", exists=True, dir_okay=False, readable=True
        ),
    ],
    target_format: Annotated[
        str,
        typer.Option("-f", "--format", help=f"Target format ({', '.join(TARGET_FORMATS)})"),
    ] = settings.default_target_format,
    quality: Annotated[
        Optional[float],
        typer.Option(
            "-q", "--quality", min=0.0, max=1.0, help="Quality for lossy formats (0-1)"
        ),
    ] = None,
    accept: Annotated[
        Optional[str],
        typer.Option("--accept", help="Accept list, e.g. 'image/png, image/jpeg'"),
    ] = None,
    max_size: Annotated[
        Optional[int],
        typer.Option("--max-size", min=1, help="Maximum file size in bytes"),
    ] = None,
    output_dir: Annotated[
        Path,
        typer.Option("-o", "--output-dir", file_okay=False, help="Where converted files go"),
    ] = Path("."),
    upload: Annotated[
        Optional[str],
        typer.Option("--upload", help="Submit converted files to this upload URL"),
    ] = None,
):
    """
    Convert images and save or upload them

    Examples:
      imgconv convert photo.png -f webp -q 0.8
      imgconv convert a.jpg b.gif -f png -o converted/
      imgconv convert photo.jpg --upload http://127.0.0.1:8000/upload
    """
    target_format = target_format.lower()
    if target_format not in TARGET_FORMATS:
        console.print(
            f"[red]Error: unsupported format '{target_format}'. "
            f"Choose from {', '.join(TARGET_FORMATS)}[/red]"
        )
        raise typer.Exit(2)
    if quality is not None and target_format in LOSSLESS_FORMATS:
        console.print(
            f"[yellow]Quality is ignored for {target_format.upper()}[/yellow]"
        )
        quality = None

    exit_code = asyncio.run(
        _run_conversion(
            files, target_format, quality, accept, max_size, output_dir, upload
        )
    )
    raise typer.Exit(exit_code)


async def _run_conversion(
    files: List[Path],
    target_format: str,
    quality: Optional[float],
    accept: Optional[str],
    max_size: Optional[int],
    output_dir: Path,
    upload: Optional[str],
) -> int:
    sections = [
        FormSection(
            FileInput(
                name=f"image{index}",
                accept=accept or settings.default_accept,
                max_filesize=max_size or settings.max_file_size,
            ),
            target_format=target_format,
            quality=quality,
        )
        for index, _ in enumerate(files, start=1)
    ]
    page = FormPage(sections)
    await page.initialize()

    for path, section in zip(files, sections):
        try:
            await section.select(SelectedFile.from_path(path))
        except ImageConverterError:
            # The section already holds the failure message
            pass

    _print_summary(files, sections)
    all_converted = all(section.ready for section in sections)

    if not page.submit_enabled:
        console.print("[red]No files were converted[/red]")
        return 1

    if upload:
        async with UploadClient(url=upload) as client:
            messages = await page.submit(client)
        if messages is None:
            console.print("[red]Error uploading file(s).[/red]")
            return 1
        for message in messages:
            colour = "green" if message.kind == "success" else "red"
            console.print(f"[{colour}]{message.message}[/{colour}]")
        failed = any(message.kind == "error" for message in messages)
    else:
        output_dir.mkdir(parents=True, exist_ok=True)
        for section in sections:
            if not section.ready:
                continue
            for attached in section.file_input.files:
                destination = output_dir / attached.name
                destination.write_bytes(attached.data)
                console.print(f"Saved [cyan]{destination}[/cyan]")
        failed = False

    return 1 if failed or not all_converted else 0


def _print_summary(files: List[Path], sections: List[FormSection]) -> None:
    table = Table(title="Conversion Results")
    table.add_column("File", style="cyan")
    table.add_column("Original")
    table.add_column("Converted")
    table.add_column("Result")

    for path, section in zip(files, sections):
        if section.ready:
            original = f"{section.original.label} ({section.original.size_text})"
            converted = f"{section.converted.label} ({section.converted.size_text})"
            outcome = f"[green]{section.file_input.files[0].name}[/green]"
        else:
            original = section.original.label or "-"
            converted = "-"
            outcome = f"[red]{section.message or 'Not converted'}[/red]"
        table.add_row(path.name, original, converted, outcome)

    console.print(table)


@app.command()
def serve(
    host: Annotated[str, typer.Option("--host", help="Interface to bind")] = settings.api_host,
    port: Annotated[int, typer.Option("--port", help="Port to listen on")] = settings.api_port,
):
    """Run the upload endpoint"""
    import uvicorn

    uvicorn.run(
        "imgconv.main:app",
        host=host,
        port=port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    app()
