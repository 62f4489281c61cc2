#!/usr/bin/env python3
"""
PageScout - Page inspection for documentation crawlers

Main entry point for the CLI.

Usage:
    python main.py inspect https://docs.example.com/guide
    python main.py inspect https://docs.example.com/guide --config pagescout.yaml --output page.json
    python main.py parse-sitemap sitemap.md
"""

import asyncio
import json
import logging
import sys
from pathlib import Path

import click
import structlog
from rich.console import Console
from rich.table import Table
from rich.progress import Progress, SpinnerColumn, TextColumn

from pagescout import __version__
from pagescout.config import load_config
from pagescout.core import PageInspector, PageInspection
from pagescout.exceptions import ConfigError
from pagescout.sitemap import parse_sitemap_file


console = Console()


def configure_logging(verbose: bool):
    """Set structlog's level filter for the CLI run"""
    level = logging.DEBUG if verbose else logging.WARNING
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(level))


def write_json(data, output: str):
    """Write results to a JSON file, creating parent directories"""
    output_path = Path(output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)

    console.print(f"\n[green]Results saved to:[/green] {output_path}")


@click.group()
@click.version_option(version=__version__, prog_name="PageScout")
def cli():
    """
    PageScout - Page inspection for documentation crawlers

    Reveals hidden content, classifies links and images, and re-parses sitemaps.
    """
    pass


@cli.command()
@click.argument('url')
@click.option('--config', 'config_path', type=click.Path(), help='YAML configuration file')
@click.option('--headless/--no-headless', default=None, help='Run browser in headless mode')
@click.option('--output', type=click.Path(), help='Save results to JSON file')
@click.option('--verbose', is_flag=True, help='Show debug logging')
def inspect(url: str, config_path: str, headless: bool, output: str, verbose: bool):
    """
    Inspect a single page.

    Runs status detection, the tab/accordion/carousel reveal pass, link
    classification and content image selection.

    Example:
        python main.py inspect https://docs.example.com/guide
    """
    configure_logging(verbose)

    try:
        config = load_config(config_path)
    except ConfigError as e:
        console.print(f"[bold red]Configuration error:[/bold red] {e}")
        sys.exit(2)

    if headless is not None:
        config.browser.headless = headless

    console.print(f"\n[green]Target:[/green] {url}")
    console.print(f"[green]Headless:[/green] {config.browser.headless}\n")

    try:
        inspection = asyncio.run(run_inspection(url, config))
    except KeyboardInterrupt:
        console.print("\n\n[yellow]Inspection interrupted by user[/yellow]")
        sys.exit(1)

    display_inspection(inspection)

    if output:
        write_json(inspection.to_dict(), output)


async def run_inspection(url: str, config) -> PageInspection:
    """Run one inspection with a progress spinner"""
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("[cyan]Inspecting page...", total=None)

        async with PageInspector(config) as inspector:
            inspection = await inspector.inspect(url)

        progress.update(task, description="[green]Inspection complete!")

    return inspection


def display_inspection(inspection: PageInspection):
    """Print an inspection summary"""
    status = inspection.status
    status_style = "green" if status.accessible else "red"

    console.print("=" * 80)
    console.print(f"[bold]{inspection.links.page_title}[/bold]")
    console.print(f"  URL: {inspection.url}")
    console.print(f"  Status: [{status_style}]{status.status_code}[/{status_style}]"
                  + (f" ({status.error})" if status.error else ""))
    console.print(f"  Tabs: {inspection.reveal.tabs_extracted}/{inspection.reveal.tabs_found} extracted")
    console.print(f"  Accordions expanded: {inspection.reveal.accordions_expanded}")
    console.print(f"  Carousel clicks: {inspection.reveal.carousel_clicks}")
    console.print()

    if inspection.links.links:
        table = Table(title=f"Content Links ({len(inspection.links.links)})")
        table.add_column("URL", style="cyan")
        table.add_column("Text", style="white")
        table.add_column("File", style="yellow")

        for link in inspection.links.links:
            table.add_row(link.href, link.text[:60], link.file_type or "")

        console.print(table)

    if inspection.images:
        table = Table(title=f"Content Images ({len(inspection.images)})")
        table.add_column("Slug", style="cyan")
        table.add_column("Size", style="white")
        table.add_column("Same origin", style="green")

        for image in inspection.images:
            table.add_row(
                image.context_slug,
                f"{image.width:.0f}x{image.height:.0f}",
                "yes" if image.can_download_same_origin else "no",
            )

        console.print(table)


@cli.command('parse-sitemap')
@click.argument('sitemap_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--output', type=click.Path(), help='Save entries to JSON file')
def parse_sitemap_command(sitemap_file: str, output: str):
    """
    List the URLs recorded in a sitemap document.

    Example:
        python main.py parse-sitemap sitemap.md
    """
    entries = parse_sitemap_file(sitemap_file)

    if not entries:
        console.print("[yellow]No machine-readable entries found[/yellow]")
    else:
        table = Table(title=f"Sitemap Entries ({len(entries)})")
        table.add_column("Depth", style="cyan", no_wrap=True)
        table.add_column("Kind", style="yellow")
        table.add_column("URL", style="white")

        for entry in entries:
            depth = "-" if entry.depth is None else str(entry.depth)
            table.add_row(depth, entry.kind, entry.url)

        console.print(table)

    if output:
        write_json([entry.to_dict() for entry in entries], output)


@cli.command()
def version():
    """Show version information and capabilities"""
    console.print(f"\n[bold cyan]PageScout v{__version__}[/bold cyan]\n")

    table = Table(title="Module Status")
    table.add_column("Module", style="cyan", no_wrap=True)
    table.add_column("Status", style="green")
    table.add_column("Notes", style="yellow")

    table.add_row("Link Classifier", "[green]✓ Complete[/green]", "Internal / content / file links")
    table.add_row("Link Manager", "[green]✓ Complete[/green]", "Order-stable deduplication")
    table.add_row("Content Revealer", "[green]✓ Complete[/green]", "Tabs, accordions, carousels")
    table.add_row("Image Selector", "[green]✓ Complete[/green]", "Decorative image filtering")
    table.add_row("Sitemap Parser", "[green]✓ Complete[/green]", "Machine-readable section")
    table.add_row("Page Status", "[green]✓ Complete[/green]", "Soft error detection")

    console.print(table)
    console.print()


if __name__ == '__main__':
    cli()
