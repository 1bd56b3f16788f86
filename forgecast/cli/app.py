"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
import os
import shutil
import tempfile
from importlib import resources
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TextColumn,
    TransferSpeedColumn,
)

from forgecast import __version__
from forgecast.core.feature import PodcastFeature
from forgecast.exceptions import ForgecastError, FrontMatterError
from forgecast.media.downloader import Downloader
from forgecast.media.inspector import MediaInspector
from forgecast.models.config import PodcastConfig
from forgecast.storage.config_manager import (
    CONFIG_FILE_NAME,
    ConfigManager,
    resolve_project_path,
)
from forgecast.utils.fallback import MEDIA_REFERENCE
from forgecast.utils.frontmatter import join_front_matter, split_front_matter
from forgecast.utils.path import is_remote_url, normalize_reference

from .formatters import print_media_table, print_sync_summary, print_validation_table

console = Console()

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("forgecast")

app = typer.Typer(
    name="forgecast",
    help=(
        "Podcast media publishing for static sites. Use 'forgecast <command>"
        " --help' for more info."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)

BADGE_TEMPLATE = "_podcast_badges.html.twig"

# -v shows per-item progress, -vv adds debug detail and tracebacks.
VERBOSITY_LEVELS = ("WARNING", "INFO", "DEBUG")


def _load_config(ctx: typer.Context) -> tuple[PodcastConfig, Path]:
    config_file: Path = ctx.obj["config_file"]
    return ConfigManager(config_file).load_config(), config_file


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    config_file: Path = typer.Option(
        Path(CONFIG_FILE_NAME),
        "--config",
        "-c",
        help="Path to the project configuration file.",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-v for progress, -vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
):
    """forgecast podcast tools"""
    if version:
        console.print(f"[bold]forgecast[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    logging.getLogger("forgecast").setLevel(VERBOSITY_LEVELS[min(verbose, 2)])

    ctx.obj = {"config_file": config_file}

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


def _locate_local_media(reference: str, config: PodcastConfig) -> Path | None:
    """Looks for a local media file in the content tree, the publish tree, then as given."""
    relative = normalize_reference(reference)
    candidates = [
        resolve_project_path(config, config.source_dir) / relative,
        resolve_project_path(config, config.output_dir) / relative,
        Path(reference),
    ]
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    log.error(
        "[red]✗ Local media file not found.[/red] Checked: "
        + ", ".join(str(c) for c in candidates)
    )
    return None


def _download_to_temp(url: str, attempts: int) -> Path:
    """Downloads a remote media file to a temporary file and returns its path."""
    fd, temp_name = tempfile.mkstemp(prefix="forgecast_media_")
    os.close(fd)

    async def _download():
        with Progress(
            TextColumn("[bold blue]Downloading"),
            BarColumn(bar_width=40),
            DownloadColumn(),
            "•",
            TransferSpeedColumn(),
            console=console,
        ) as progress:
            task_id = progress.add_task("download", total=None)
            await Downloader(max_attempts=attempts).download_file(
                url, temp_name, progress=progress, task_id=task_id
            )

    try:
        asyncio.run(_download())
    except BaseException:
        Path(temp_name).unlink(missing_ok=True)
        raise
    return Path(temp_name)


@app.command()
def inspect(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="Path to the markdown content file."),
):
    """Inspect the media referenced in a file's front matter and record its metadata."""
    if not file.is_file():
        console.print(f"[red]✗ File not found: {file}[/red]")
        raise typer.Exit(code=1)

    try:
        config, _ = _load_config(ctx)
        front_matter, body = split_front_matter(file.read_text(encoding="utf-8"))
    except (ForgecastError, OSError) as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1) from e

    reference = MEDIA_REFERENCE.resolve(front_matter)
    if not reference:
        console.print("[red]✗ No 'audio_file' or 'video_file' found in front matter.[/red]")
        raise typer.Exit(code=1)
    reference = str(reference)

    console.print(f"[bold cyan]Inspecting media:[/bold cyan] {reference}")

    temp_file: Path | None = None
    try:
        if is_remote_url(reference):
            console.print("[dim]Remote file detected.[/dim]")
            temp_file = _download_to_temp(reference, config.download_attempts)
            inspect_path = temp_file
        else:
            inspect_path = _locate_local_media(reference, config)
            if inspect_path is None:
                raise typer.Exit(code=1)

        metadata = MediaInspector().inspect(str(inspect_path))
        console.print("[green]✓ Analysis complete:[/green]")
        print_media_table(console, metadata)

        front_matter["audio_size"] = metadata.size
        front_matter["audio_type"] = metadata.type
        front_matter["itunes_duration"] = metadata.duration

        backup = file.with_name(file.name + ".bak")
        shutil.copy2(file, backup)
        file.write_text(join_front_matter(front_matter, body), encoding="utf-8")
        console.print(f"[green]✓ Updated {file}[/green] [dim](backup: {backup})[/dim]")
    except ForgecastError as e:
        console.print(f"[red]✗ Analysis failed: {e}[/red]")
        raise typer.Exit(code=1) from e
    finally:
        if temp_file is not None:
            temp_file.unlink(missing_ok=True)


@app.command()
def setup(ctx: typer.Context):
    """Initialize the podcast cache and install the badge template."""
    config, config_file = _load_config(ctx)
    console.print("[bold cyan]Setting up podcast support...[/bold cyan]")

    cache_path = resolve_project_path(config, config.cache_path)
    if cache_path.parent.is_dir():
        console.print("[green]✓[/green] Cache directory exists.")
    else:
        try:
            cache_path.parent.mkdir(parents=True, exist_ok=True)
            console.print(
                f"[green]✓[/green] Created cache directory [dim]{cache_path.parent}[/dim]"
            )
        except OSError as e:
            console.print(f"[red]✗ Failed to create cache directory: {e}[/red]")
            raise typer.Exit(code=1) from e

    if cache_path.is_file():
        console.print("[green]✓[/green] State file exists.")
    else:
        cache_path.write_text("{}", encoding="utf-8")
        console.print("[green]✓[/green] Initialized empty state file.")

    if not config_file.is_file():
        ConfigManager(config_file).save_new_config(config.model_dump())
        console.print(f"[green]✓[/green] Wrote default configuration to {config_file}")

    _install_templates(config)


def _install_templates(config: PodcastConfig) -> None:
    if not config.theme:
        console.print(
            "[yellow]⚠️  No theme configured. Skipping template installation.[/yellow]"
        )
        return

    theme_dir = Path(config.config_path) / "templates" / config.theme
    if not theme_dir.is_dir():
        console.print(
            f"[yellow]⚠️  Theme directory templates/{config.theme} does not exist. "
            "Skipping.[/yellow]"
        )
        return

    destination = theme_dir / BADGE_TEMPLATE
    if destination.exists():
        console.print(
            f"[dim]ℹ Badge template already exists at "
            f"templates/{config.theme}/{BADGE_TEMPLATE}[/dim]"
        )
        return

    source = resources.files("forgecast.resources").joinpath(BADGE_TEMPLATE)
    try:
        destination.write_text(source.read_text(encoding="utf-8"), encoding="utf-8")
    except OSError as e:
        console.print(f"[red]✗ Failed to copy template to {destination}: {e}[/red]")
        return
    console.print(
        f"[green]✓[/green] Installed badge template to "
        f"templates/{config.theme}/{BADGE_TEMPLATE}"
    )


def _sync_file(feature: PodcastFeature, content_file: Path) -> dict[str, Any] | None:
    row: dict[str, Any] = {"file": str(content_file.relative_to(feature.source_dir))}
    try:
        front_matter, _ = split_front_matter(content_file.read_text(encoding="utf-8"))
    except FrontMatterError as e:
        log.debug(f"Skipping '{content_file}': {e}")
        return None
    except (OSError, UnicodeDecodeError) as e:
        log.error(f"  [red]✗ Could not read:[/] {row['file']} ({e})")
        row["status"] = "failed"
        return row

    reference = MEDIA_REFERENCE.resolve(front_matter)
    if not reference:
        return None

    try:
        enclosure = feature.media_service.process_media(
            front_matter, feature.source_dir, feature.output_dir
        )
    except Exception as e:
        log.error(
            f"  [red]✗ Failed:[/] {row['file']} ({e})",
            exc_info=log.getEffectiveLevel() == logging.DEBUG,
        )
        row["status"] = "failed"
        return row

    if enclosure is None:
        row["status"] = "missing"
    else:
        row["status"] = "remote" if is_remote_url(enclosure.url) else "published"
        row["url"] = enclosure.url
        row["length"] = enclosure.length
    return row


@app.command()
def sync(ctx: typer.Context):
    """Tag and publish the media of every content file that declares one."""
    try:
        config, _ = _load_config(ctx)
    except ForgecastError as e:
        console.print(f"[bold red]Error: {e}[/bold red]")
        raise typer.Exit(code=1) from e

    feature = PodcastFeature(config)
    if not feature.source_dir.is_dir():
        console.print(f"[red]✗ Content directory not found: {feature.source_dir}[/red]")
        raise typer.Exit(code=1)

    results = []
    for content_file in sorted(feature.source_dir.rglob("*.md")):
        row = _sync_file(feature, content_file)
        if row is not None:
            results.append(row)

    if not results:
        console.print("[yellow]No content files declare podcast media.[/yellow]")
        return

    print_sync_summary(console, results)
    if any(row["status"] == "failed" for row in results):
        raise typer.Exit(code=1)


@app.command()
def validate(ctx: typer.Context):
    """Validate the current configuration."""
    try:
        config, config_file = _load_config(ctx)
        print_validation_table(config, config_file)
    except ForgecastError as e:
        console.print(f"[red]✗ Configuration is invalid: {e}[/red]")
        raise typer.Exit(code=1) from e
