"""
Rich renderables for the forgecast console: error panels, inspection
results, the validated settings and the sync summary.
"""

from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from forgecast.models.config import PodcastConfig
from forgecast.models.media import MediaMetadata
from forgecast.utils.formatting import format_size

SUGGESTIONS: dict[str, list[str]] = {
    "ConfigurationError": [
        "Check the values in forgecast.ini.",
        "Run `forgecast validate` to see the effective settings.",
    ],
    "AnalysisError": [
        "Make sure the file is a playable audio or video container.",
        "Re-export the file if it was truncated or corrupted.",
    ],
    "TagWriteError": [
        "Check that the media file is writable.",
        "Make sure no other program has the file open.",
    ],
    "DirectoryError": [
        "Check permissions on the output directory.",
    ],
    "DownloadError": [
        "Check the media URL and your internet connection.",
        "The remote host might be temporarily unavailable.",
    ],
    "FrontMatterError": [
        "The file must start with a '---' delimited YAML block.",
    ],
}
DEFAULT_SUGGESTIONS = ["Run the command with -vv for detailed logs."]


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Wraps an error and the matching hints in a red panel."""
    error_type = type(error).__name__
    hints = SUGGESTIONS.get(error_type, DEFAULT_SUGGESTIONS)

    parts = [
        Text.assemble((f"{error_type}: ", "bold red"), str(error)),
        Text(),
        Text("Suggestions", style="bold yellow"),
        Text("\n".join(f"• {hint}" for hint in hints)),
    ]
    if context:
        parts += [Text(), Text(f"Context: {context}", style="dim")]

    return Panel(
        Group(*parts),
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_media_table(console: Console, metadata: MediaMetadata) -> None:
    """Displays the result of a media inspection."""
    table = Table(box=box.SIMPLE, show_header=True, header_style="bold cyan")
    table.add_column("Property")
    table.add_column("Value")
    table.add_row("Size", f"{metadata.size:,} bytes ({format_size(metadata.size)})")
    table.add_row("Type", metadata.type)
    table.add_row("Duration", metadata.duration)
    console.print(table)


def print_validation_table(config: PodcastConfig, config_file: Path) -> None:
    """Displays a summary of the current settings."""
    console = Console()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column()

    table.add_row("Config File:", f"[dim]{config_file}[/dim]")
    table.add_row("Site Name:", config.site_name)
    table.add_row("Site Base URL:", config.site_base_url or "[yellow](not set)[/yellow]")
    table.add_row("Content Dir:", config.source_dir)
    table.add_row("Output Dir:", config.output_dir)
    table.add_row("Tag Cache:", f"[dim]{config.cache_path}[/dim]")
    table.add_row("Theme:", config.theme or "[dim](none)[/dim]")
    table.add_row("Download Attempts:", str(config.download_attempts))

    console.print(
        Panel(
            table,
            title="[bold green]✓ Validated Settings[/bold green]",
            border_style="green",
        )
    )


def print_sync_summary(console: Console, results: list[dict[str, Any]]) -> None:
    """Displays one row per content item processed by `sync`."""
    table = Table(
        title="Podcast Media",
        box=box.ROUNDED,
        header_style="bold magenta",
        show_lines=False,
    )
    table.add_column("Content File", style="cyan")
    table.add_column("Status")
    table.add_column("Enclosure")
    table.add_column("Size", justify="right")

    status_styles = {
        "published": "[green]✓ published[/green]",
        "remote": "[blue]→ remote[/blue]",
        "missing": "[yellow]○ missing[/yellow]",
        "failed": "[red]✗ failed[/red]",
    }
    for row in results:
        table.add_row(
            row["file"],
            status_styles.get(row["status"], row["status"]),
            row.get("url", ""),
            format_size(row["length"]) if row.get("length") else "",
        )
    console.print(table)

    counts = {status: 0 for status in status_styles}
    for row in results:
        counts[row["status"]] = counts.get(row["status"], 0) + 1
    console.print(
        f"[bold]{len(results)}[/bold] items: "
        + ", ".join(f"{count} {status}" for status, count in counts.items() if count)
    )
