"""Main entry point for pdf-pixel-diff CLI."""

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from pdf_pixel_diff import __version__

console = Console()
app = typer.Typer(
    help="Visual regression testing for PDF documents.",
    no_args_is_help=True,
)


def parse_mask(spec: str):
    """Parse ``PAGE:X0,Y0,X1,Y1[:COLOR]`` into a Mask.

    >>> parse_mask("0:10,10,50,20:transparent").color
    'transparent'
    """
    from pdf_pixel_diff.compare import Mask

    parts = spec.split(":")
    if len(parts) not in (2, 3):
        raise typer.BadParameter(f"Expected PAGE:X0,Y0,X1,Y1[:COLOR], got {spec!r}")

    coords = parts[1].split(",")
    if len(coords) != 4:
        raise typer.BadParameter(f"Expected four coordinates in {spec!r}")

    try:
        page_number = int(parts[0])
        x0, y0, x1, y1 = (float(c) for c in coords)
    except ValueError as exc:
        raise typer.BadParameter(f"Invalid number in mask {spec!r}") from exc

    color = parts[2] if len(parts) == 3 else None
    return Mask(page_number=page_number, x0=x0, y0=y0, x1=x1, y1=y1, color=color)


def load_masks_file(path: Path) -> list:
    """Load masks from a JSON list of mask objects."""
    from pdf_pixel_diff.compare import Mask

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise typer.BadParameter(f"Cannot read masks file {path}: {exc}") from exc

    if not isinstance(data, list):
        raise typer.BadParameter(f"Masks file {path} must contain a JSON list")

    try:
        return [Mask.from_dict(item) for item in data]
    except (KeyError, TypeError, ValueError) as exc:
        raise typer.BadParameter(f"Invalid mask in {path}: {exc}") from exc


def _setup_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _build_compare_options(
    threshold: Optional[float],
    include_aa: Optional[bool],
    combine: Optional[bool],
    exclude_page: Optional[List[int]],
    mask: Optional[List[str]],
    masks_file: Optional[Path],
):
    from pdf_pixel_diff.compare import CompareOptions
    from pdf_pixel_diff.config import get_config

    config = get_config()

    masks = [parse_mask(spec) for spec in mask or []]
    if masks_file is not None:
        masks = load_masks_file(masks_file) + masks

    return CompareOptions(
        threshold=threshold if threshold is not None else config["threshold"],
        include_aa=include_aa if include_aa is not None else config["include_aa"],
        combine_images=combine if combine is not None else config["combine_images"],
        excluded_pages=list(exclude_page or []),
        masks=masks,
    )


def print_result(result, difference_dir: Optional[Path] = None) -> None:
    """Print a verdict summary and a per-page table."""
    if result.passed:
        console.print(f"[green]✓ {result.message}[/green]")
    else:
        console.print(f"[red]✗ {result.message}[/red]")

    error = getattr(result, "error", None)
    if error is not None:
        console.print(f"[red]Error:[/red] {error}")

    if result.pages:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Page", justify="right")
        table.add_column("Status")
        table.add_column("Diff pixels", justify="right")
        table.add_column("Diff image", style="dim")
        for outcome in result.pages:
            status = "[green]same[/green]" if outcome.equal else "[red]different[/red]"
            table.add_row(
                str(outcome.page),
                status,
                str(outcome.diff_pixels),
                str(outcome.diff_image_path or ""),
            )
        console.print(table)

    if result.excluded_pages:
        excluded = ", ".join(str(p) for p in result.excluded_pages)
        console.print(f"[dim]Excluded pages: {excluded}[/dim]")
    if result.different_pages:
        different = ", ".join(str(p) for p in result.different_pages)
        console.print(f"[yellow]Different pages:[/yellow] {different}")
    if difference_dir is not None and result.different_pages:
        console.print(f"[dim]Diff images:[/dim] [cyan]{difference_dir}[/cyan]")


# =============================================================================
# CLI Commands
# =============================================================================

@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show pdf-pixel-diff version and exit",
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging",
    ),
) -> None:
    """Compare PDF documents page by page."""
    if version:
        console.print(__version__)
        raise typer.Exit(0)
    _setup_logging(verbose)


@app.command("compare")
def cmd_compare(
    baseline: Path = typer.Argument(..., help="Baseline PDF"),
    actual: Path = typer.Argument(..., help="Actual PDF"),
    result_dir: Optional[Path] = typer.Option(
        None, "--result-dir", "-o", help="Directory for rendered pages and diffs"
    ),
    dpi: Optional[int] = typer.Option(None, "--dpi", "-d", help="DPI for rasterization"),
    threshold: Optional[float] = typer.Option(
        None, "--threshold", "-t", min=0.0, max=1.0, help="Pixel color sensitivity (0-1)"
    ),
    include_aa: Optional[bool] = typer.Option(
        None, "--include-aa/--ignore-aa", help="Count anti-aliased pixels as differences"
    ),
    combine: Optional[bool] = typer.Option(
        None, "--combine/--no-combine", help="Write baseline | actual | difference images"
    ),
    exclude_page: Optional[List[int]] = typer.Option(
        None, "--exclude-page", "-x", help="Page number to skip (repeatable)"
    ),
    mask: Optional[List[str]] = typer.Option(
        None, "--mask", "-m", help="Mask PAGE:X0,Y0,X1,Y1[:black|transparent] (repeatable)"
    ),
    masks_file: Optional[Path] = typer.Option(
        None, "--masks-file", help="JSON file with a list of masks"
    ),
) -> None:
    """Render two PDFs and compare them page by page."""
    from pdf_pixel_diff.api import Options, RenderOptions, compare_files
    from pdf_pixel_diff.config import get_config
    from pdf_pixel_diff.directory import default_results_dir
    from pdf_pixel_diff.errors import RenderInitError
    from pdf_pixel_diff.render import PdfRenderer

    config = get_config()
    compare_options = _build_compare_options(
        threshold, include_aa, combine, exclude_page, mask, masks_file
    )

    if result_dir is None and config["result_dir"]:
        result_dir = Path(config["result_dir"])
    if result_dir is None:
        result_dir = default_results_dir()

    render_options = RenderOptions(dpi=dpi if dpi is not None else config["dpi"])
    try:
        renderer = PdfRenderer(dpi=render_options.dpi)
    except RenderInitError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)

    options = Options(result_dir=result_dir, render=render_options, compare=compare_options)

    with console.status(f"[cyan]Comparing {baseline.name} and {actual.name}...", spinner="dots"):
        result = compare_files(baseline, actual, options, renderer=renderer)

    print_result(result, difference_dir=result_dir / "difference")

    if not result.passed:
        raise typer.Exit(1)


@app.command("images")
def cmd_images(
    baseline_dir: Path = typer.Argument(..., help="Directory of baseline page images"),
    actual_dir: Path = typer.Argument(..., help="Directory of actual page images"),
    output_dir: Path = typer.Argument(..., help="Directory for diff images"),
    threshold: Optional[float] = typer.Option(
        None, "--threshold", "-t", min=0.0, max=1.0, help="Pixel color sensitivity (0-1)"
    ),
    include_aa: Optional[bool] = typer.Option(
        None, "--include-aa/--ignore-aa", help="Count anti-aliased pixels as differences"
    ),
    combine: Optional[bool] = typer.Option(
        None, "--combine/--no-combine", help="Write baseline | actual | difference images"
    ),
    exclude_page: Optional[List[int]] = typer.Option(
        None, "--exclude-page", "-x", help="Page number to skip (repeatable)"
    ),
    mask: Optional[List[str]] = typer.Option(
        None, "--mask", "-m", help="Mask PAGE:X0,Y0,X1,Y1[:black|transparent] (repeatable)"
    ),
    masks_file: Optional[Path] = typer.Option(
        None, "--masks-file", help="JSON file with a list of masks"
    ),
) -> None:
    """Compare two directories of already rendered page images."""
    from pdf_pixel_diff.compare import compare_all_page_images
    from pdf_pixel_diff.directory import list_files
    from pdf_pixel_diff.errors import PixelDiffError

    for path in (baseline_dir, actual_dir):
        if not path.is_dir():
            console.print(f"[red]Directory not found:[/red] {path}")
            raise typer.Exit(1)

    compare_options = _build_compare_options(
        threshold, include_aa, combine, exclude_page, mask, masks_file
    )

    output_dir.mkdir(parents=True, exist_ok=True)
    try:
        result = compare_all_page_images(
            len(list_files(baseline_dir)),
            len(list_files(actual_dir)),
            baseline_dir,
            actual_dir,
            output_dir,
            compare_options,
        )
    except PixelDiffError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1)

    print_result(result, difference_dir=output_dir)

    if not result.passed:
        raise typer.Exit(1)


# Config subcommand group
config_app = typer.Typer(help="Manage default settings")
app.add_typer(config_app, name="config")


@config_app.callback(invoke_without_command=True)
def config_callback(ctx: typer.Context) -> None:
    """Show or manage default settings."""
    if ctx.invoked_subcommand is None:
        from pdf_pixel_diff.config import get_config, get_config_file

        config = get_config()
        console.print()
        console.print(f"[dim]Config file:[/dim] {get_config_file()}")
        for key, value in config.items():
            console.print(f"  [bold]{key}[/bold]: {value}")
        console.print()


@config_app.command("set")
def cmd_config_set(
    key: str = typer.Argument(..., help="Setting name"),
    value: str = typer.Argument(..., help="New value"),
) -> None:
    """Set a default setting."""
    from pdf_pixel_diff.config import DEFAULT_CONFIG, set_config_value

    try:
        config = set_config_value(key, value)
    except KeyError:
        known = ", ".join(DEFAULT_CONFIG)
        console.print(f"[red]Unknown setting:[/red] {key} [dim](known: {known})[/dim]")
        raise typer.Exit(1)
    except ValueError as exc:
        console.print(f"[red]Invalid value for {key}:[/red] {exc}")
        raise typer.Exit(1)

    console.print(f"[green]Done![/green] {key} = {config[key]}")


@config_app.command("reset")
def cmd_config_reset() -> None:
    """Restore default settings."""
    from pdf_pixel_diff.config import reset_config

    reset_config()
    console.print("[green]Settings restored to defaults.[/green]")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
