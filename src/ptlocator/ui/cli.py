"""
ptlocator - Command-Line Interface
Detects MBR/GPT partition tables in disk images and prints what it finds.

Dependencies:
    pip install click rich
"""

import json
import sys
from pathlib import Path

import click
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .. import __version__
from ..app import DiskReport, PartitionLocatorApp
from ..core import DiskLayoutVariant, PartitionLocatorError
from ..utils import format_size, hexlify, partition_type_name

console = Console()

LOG_LEVELS = {0: None, 1: "INFO", 2: "DEBUG"}


def render_mbr(report: DiskReport) -> None:
    """Print the four MBR partition slots"""
    table = Table(title="MBR Partition Table", box=box.ROUNDED)
    table.add_column("#", style="cyan bold", justify="right")
    table.add_column("Boot Flag", style="white")
    table.add_column("Type", style="yellow")
    table.add_column("Start LBA", style="white", justify="right")
    table.add_column("Total Sectors", style="white", justify="right")
    table.add_column("Size", style="dim", justify="right")

    for i, p in enumerate(report.legacy_table.partitions, start=1):
        boot = f"0x{p.boot_flag:02X}"
        if p.is_bootable:
            boot += " [green](active)[/green]"
        table.add_row(
            str(i),
            boot,
            f"0x{p.partition_type:02X} {partition_type_name(p.partition_type)}",
            str(p.start_lba),
            str(p.total_sectors),
            format_size(p.size_bytes),
        )

    console.print(table)


def render_gpt(report: DiskReport) -> None:
    """Print the GPT header fields"""
    h = report.gpt_header
    table = Table(title="GPT Header Information", show_header=False, box=box.ROUNDED)
    table.add_column("Field", style="cyan bold")
    table.add_column("Value", style="white")

    table.add_row("Signature", h.signature.decode('ascii', errors='replace'))
    table.add_row("Revision", h.revision_str)
    table.add_row("Header Size", str(h.header_size))
    table.add_row("Current LBA", str(h.current_lba))
    table.add_row("Backup LBA", str(h.backup_lba))
    table.add_row("Usable LBAs", f"{h.first_usable_lba} - {h.last_usable_lba}")
    table.add_row("Disk GUID", hexlify(h.disk_guid))
    table.add_row("Partition Entry LBA", str(h.partition_entry_lba))
    table.add_row("Number Of Partitions", str(h.number_of_partitions))
    table.add_row("Partition Entry Size", str(h.partition_entry_size))

    console.print(table)


@click.group()
def cli():
    """ptlocator - MBR/GPT partition table locator"""


@cli.command()
def version():
    """Show version information"""
    version_info = Table(show_header=False, box=box.ROUNDED)
    version_info.add_column(style="cyan bold")
    version_info.add_column(style="white")

    version_info.add_row("Application", "ptlocator")
    version_info.add_row("Version", __version__)
    version_info.add_row("Python", f"{sys.version.split()[0]}")

    console.print(Panel(version_info, title="[bold blue]Version Information[/bold blue]", border_style="blue"))


@cli.command()
@click.argument('image_path', type=click.Path(dir_okay=False))
@click.option('--json', 'as_json', is_flag=True, help='Print the report as JSON')
@click.option('--strict', is_flag=True,
              help='Reject GPT headers without the "EFI PART" signature')
@click.option('--config', 'config_path', type=click.Path(dir_okay=False),
              help='Path to JSON configuration file')
@click.option('--verbose', '-v', count=True, help='Increase log verbosity (-v, -vv)')
def analyze(image_path, as_json, strict, config_path, verbose):
    """Detect and decode the partition table of a disk image"""
    overrides = {
        "log_level": LOG_LEVELS.get(min(verbose, 2)),
        "verify_gpt_signature": True if strict else None,
    }

    try:
        app = PartitionLocatorApp(
            config_path=Path(config_path) if config_path else None,
            overrides=overrides,
        )
        report = app.analyze(image_path)
    except PartitionLocatorError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        return

    if report.variant == DiskLayoutVariant.UNRECOGNIZED:
        console.print("[yellow]Unknown disk format or missing valid boot signature.[/yellow]")
        return

    if report.variant == DiskLayoutVariant.PROTECTED_GPT:
        console.print("[bold cyan]Detected GPT disk[/bold cyan] (protective MBR)\n")
    else:
        console.print("[bold cyan]Detected MBR disk[/bold cyan]\n")

    if report.error:
        console.print(f"[bold red]Error:[/bold red] {escape(report.error)}")
        return

    if report.legacy_table is not None:
        render_mbr(report)
    elif report.gpt_header is not None:
        render_gpt(report)


def main():
    """Main CLI entry point"""
    cli()


if __name__ == "__main__":
    main()
