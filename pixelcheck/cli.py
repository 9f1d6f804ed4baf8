"""CLI entry point for pixelcheck."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from pixelcheck.errors import ComparisonError
from pixelcheck.models.comparison import ComparisonResult, Severity
from pixelcheck.models.config import ComparisonConfig
from pixelcheck.pipeline import ComparisonPipeline
from pixelcheck.reporter.json_report import generate_json_report

console = Console()

SEVERITY_STYLES = {
    Severity.NONE: "green",
    Severity.LOW: "yellow",
    Severity.MEDIUM: "dark_orange",
    Severity.HIGH: "red",
}


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def load_config(path: str) -> ComparisonConfig:
    if Path(path).exists():
        return ComparisonConfig.load(path)
    return ComparisonConfig()


async def _run_compare(
    config: ComparisonConfig, design: bytes, url: str,
    username: str | None, password: str | None,
    width: int | None, height: int | None,
) -> ComparisonResult:
    pipeline = ComparisonPipeline(config)
    async with pipeline.store:
        return await pipeline.compare(design, url, username=username, password=password,
                                      width=width, height=height)


def print_result(result: ComparisonResult) -> None:
    stats = result.stats
    table = Table(title="Comparison Summary")
    table.add_column("Metric", style="bold")
    table.add_column("Value")
    table.add_row("Result ID", result.id)
    table.add_row("Compared at", f"{stats.viewport.width}x{stats.viewport.height}")
    table.add_row("Full page", "yes" if stats.is_full_page else "no")
    table.add_row("Total pixels", f"{stats.total_pixels:,}")
    table.add_row("Mismatched", f"{stats.mismatched_pixels:,}")
    table.add_row("Match", f"[green]{stats.match_percentage:.2f}%[/green]")
    table.add_row("Diff", f"[red]{stats.diff_percentage:.2f}%[/red]")
    console.print(table)

    regions = Table(title="Regions (worst first)")
    regions.add_column("Position", style="bold")
    regions.add_column("Box")
    regions.add_column("Diff pixels", justify="right")
    regions.add_column("Diff %", justify="right")
    regions.add_column("Severity")
    for r in result.regions:
        style = SEVERITY_STYLES[r.severity]
        regions.add_row(
            r.position,
            f"{r.x},{r.y} {r.width}x{r.height}",
            f"{r.diff_pixels:,}",
            f"{r.diff_percent:.1f}",
            f"[{style}]{r.severity.value}[/{style}]",
        )
    console.print(regions)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Compare a design mock against a live page."""
    setup_logging(verbose)


@cli.command()
@click.option("--url", "-u", required=True, help="Page URL to render")
@click.option("--design", "-d", required=True, type=click.Path(exists=True, dir_okay=False),
              help="Reference design image (PNG, JPEG or WebP)")
@click.option("--width", "-W", type=int, default=None, help="Viewport width")
@click.option("--height", "-H", type=int, default=None, help="Viewport height")
@click.option("--username", default=None, help="HTTP basic-auth username")
@click.option("--password", default=None, help="HTTP basic-auth password")
@click.option("--output-dir", "-o", default=None, help="Report directory")
@click.option("--config", "-c", default="pixelcheck.json", help="Config file path")
def compare(
    url: str, design: str, width: int | None, height: int | None,
    username: str | None, password: str | None, output_dir: str | None, config: str,
) -> None:
    """Render URL and compare it with a design image."""
    cfg = load_config(config)
    design_bytes = Path(design).read_bytes()

    try:
        result = asyncio.run(_run_compare(cfg, design_bytes, url, username, password,
                                          width, height))
    except ComparisonError as e:
        console.print(f"[red]{e.message}[/red]")
        sys.exit(1)

    print_result(result)
    report_path = generate_json_report(result, Path(output_dir or cfg.output_dir))
    console.print(f"  JSON report: [blue]{report_path}[/blue]")


@cli.command()
@click.option("--config", "-c", default="pixelcheck.json", help="Config file path")
def init(config: str) -> None:
    """Create a default configuration file."""
    config_path = Path(config)
    if config_path.exists():
        if not click.confirm(f"{config_path} already exists. Overwrite?"):
            return

    ComparisonConfig().save(config_path)
    console.print(f"[green]Created {config_path}[/green]")
    console.print("\nYou can now run:")
    console.print("  [blue]pixelcheck compare --url https://example.com --design mock.png[/blue]")


if __name__ == "__main__":
    cli()
