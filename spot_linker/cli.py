"""
Command-line interface for spot-linker.

This module implements the CLI using Click, linking Spotify tracks to
YouTube videos from the terminal.
rich-click is used for the output colors.

Commands:
    spot-link --track <title> --artist <artists>    Link a single track
    spot-link --file <tracks.yaml|tracks.json>      Link a list of tracks

Options:
    --duration <3:53|233713>    Track length (m:ss or milliseconds)
    --config <path>             Alternative config.yaml
    --json                      Print outcomes as JSON
    --verbose                   Show debug output on the console

Usage:
    # Link one track
    spot-link --track "Shape of You" --artist "Ed Sheeran" --duration 3:53

    # Link a whole list and keep the output for scripts
    spot-link --file tracks.yaml --json > links.json

Track Files:
    A YAML or JSON file holding either a list of track mappings or a
    mapping with a "tracks" list:

        tracks:
          - title: "Shape of You"
            artists: "Ed Sheeran"
            duration_ms: 233713
          - name: "Stay"
            artist: ["The Kid LAROI", "Justin Bieber"]

Configuration:
    config.yaml in the current directory is used when present; otherwise
    the built-in defaults apply.
"""

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Optional

import rich_click as click
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

# Configure rich-click for better help formatting
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = ""
click.rich_click.MAX_WIDTH = 100
click.rich_click.OPTION_GROUPS = {
    "cli": [
        {
            "name": "Input Sources",
            "options": ["--track", "--artist", "--duration", "--file"],
        },
        {
            "name": "Output Options",
            "options": ["--json", "--verbose"],
        },
        {
            "name": "Advanced Options",
            "options": ["--config"],
        },
        {
            "name": "Info",
            "options": ["--version", "--help"],
        },
    ],
}

from spot_linker import __version__
from spot_linker.core import (
    Config,
    ConfigError,
    MatchCache,
    SpotLinkerError,
    get_logger,
    load_config,
    setup_logging,
    shutdown_logging,
)
from spot_linker.core.progress import MatchingProgressBar
from spot_linker.spotify.models import TrackDescriptor
from spot_linker.youtube import (
    BatchResponse,
    LinkService,
    YouTubeMatcher,
    YouTubeSearcher,
)
from spot_linker.youtube.models import Confidence, parse_duration_timestamp

logger = get_logger(__name__)


CONFIDENCE_STYLES = {
    Confidence.HIGH: "green",
    Confidence.MEDIUM: "yellow",
    Confidence.LOW: "dark_orange",
}


@click.command()
@click.option(
    "--track",
    type=str,
    default=None,
    metavar="<title>",
    help="Track title"
)
@click.option(
    "--artist",
    type=str,
    default=None,
    metavar="<artists>",
    help="Track artists, comma separated"
)
@click.option(
    "--duration",
    type=str,
    default=None,
    metavar="<3:53|233713>",
    help="Track duration as m:ss or milliseconds"
)
@click.option(
    "--file", "track_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    metavar="<tracks.yaml>",
    help="YAML or JSON file with a list of tracks"
)
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    metavar="<config.yaml>",
    help="Path to config.yaml"
)
@click.option(
    "--json", "as_json",
    is_flag=True,
    help="Print outcomes as JSON"
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Show debug output on the console"
)
@click.option(
    "--version",
    is_flag=True,
    help="Show version and exit."
)
@click.pass_context
def cli(
    ctx: click.Context,
    track: Optional[str],
    artist: Optional[str],
    duration: Optional[str],
    track_file: Optional[Path],
    config_path: Optional[Path],
    as_json: bool,
    verbose: bool,
    version: bool
) -> None:
    """
    spot-linker: Link Spotify tracks to YouTube videos.

    Searches YouTube for every track, scores the candidates and prints
    the best link with a confidence label (high, medium, low).

    \b
    BASIC USAGE:
        spot-link --track "Shape of You" --artist "Ed Sheeran"
        spot-link --track "Shape of You" --artist "Ed Sheeran" --duration 3:53
        spot-link --file tracks.yaml

    \b
    OUTPUT:
        spot-link --file tracks.yaml --json    # Machine-readable outcomes
    """
    if version:
        click.echo(f"spot-linker {__version__}")
        ctx.exit(0)

    if not track and not artist and not track_file:
        click.echo(ctx.get_help())
        ctx.exit(0)

    if track_file and (track or artist or duration):
        raise click.UsageError("Cannot use --file together with --track/--artist/--duration")

    if not track_file and not (track and artist):
        raise click.UsageError("--track and --artist must be used together")

    if track_file:
        tracks = _read_track_file(track_file)
    else:
        tracks = [TrackDescriptor(
            title=track.strip(),
            artists=artist.strip(),
            duration_ms=_parse_duration_option(duration),
        )]

    _run(tracks, config_path=config_path, as_json=as_json, verbose=verbose)


def _run(
    tracks: list[TrackDescriptor],
    config_path: Path | None,
    as_json: bool,
    verbose: bool
) -> None:
    """
    Execute the linking workflow.

    Behavior:
        1. Load configuration
        2. Set up logging
        3. Build searcher, matcher, cache and service
        4. Link all tracks (bounded batches, bounded concurrency)
        5. Print the outcomes

    Raises:
        SystemExit: On fatal errors (with appropriate exit code).
    """
    try:
        config = load_config(config_path)

        setup_logging(config.output.log_directory, verbose=verbose)
        logger.info(f"spot-linker starting ({len(tracks)} tracks)")

        service = _build_service(config)

        if as_json:
            response = asyncio.run(service.link_tracks(tracks))
        else:
            with MatchingProgressBar(total=len(tracks)) as progress:
                response = asyncio.run(service.link_tracks(tracks, progress_bar=progress))

        if as_json:
            click.echo(json.dumps(response.to_dict(), indent=2, ensure_ascii=False))
        else:
            _print_results(response)

        logger.info("spot-linker completed successfully")

    except ConfigError as e:
        click.echo(f"Configuration error: {e.message}", err=True)
        sys.exit(1)

    except SpotLinkerError as e:
        Console(stderr=True).print(f"[red]Error: {escape(e.message)}[/red]")
        logger.error(f"Error: {e.message}", exc_info=True)
        sys.exit(1)

    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        logger.info("Interrupted by user")
        sys.exit(130)

    finally:
        shutdown_logging()


def _build_service(config: Config) -> LinkService:
    """Wire the production searcher, matcher and cache from configuration."""
    searcher = YouTubeSearcher(
        language=config.search.language,
        limit=config.search.limit
    )
    matcher = YouTubeMatcher(
        searcher,
        concurrency=config.matching.concurrency,
        max_candidates=config.matching.max_candidates
    )
    cache = MatchCache(ttl_seconds=config.cache.ttl_seconds)
    return LinkService(matcher, cache, max_batch_size=config.matching.max_batch_size)


def _parse_duration_option(value: str | None) -> int | None:
    """
    Parse --duration into milliseconds.

    "3:53" is read as minutes:seconds, a bare number as milliseconds.

    Raises:
        click.BadParameter: If the value is neither, or is zero.
    """
    if value is None:
        return None

    value = value.strip()
    if value.isdigit():
        duration_ms = int(value)
    else:
        seconds = parse_duration_timestamp(value)
        if seconds is None:
            raise click.BadParameter(
                f"'{value}' is not m:ss or milliseconds", param_hint="--duration"
            )
        duration_ms = seconds * 1000

    if duration_ms == 0:
        raise click.BadParameter("duration must be greater than zero", param_hint="--duration")
    return duration_ms


def _read_track_file(path: Path) -> list[TrackDescriptor]:
    """
    Read a YAML or JSON track list.

    Raises:
        click.BadParameter: If the file cannot be parsed or has the wrong shape.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                data: Any = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise click.BadParameter(f"Cannot parse {path}: {e}", param_hint="--file") from e

    if isinstance(data, dict):
        data = data.get("tracks")

    if not isinstance(data, list) or not data:
        raise click.BadParameter(
            f"{path} must contain a non-empty list of tracks", param_hint="--file"
        )

    tracks = []
    for position, entry in enumerate(data, 1):
        if not isinstance(entry, dict):
            raise click.BadParameter(
                f"Track #{position} in {path} is not a mapping", param_hint="--file"
            )
        try:
            tracks.append(TrackDescriptor.from_dict(entry))
        except ValueError as e:
            raise click.BadParameter(f"Track #{position}: {e}", param_hint="--file") from e

    return tracks


def _print_results(response: BatchResponse) -> None:
    """Print outcomes as a table, followed by cache and search counts."""
    table = Table(title="YouTube links", show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Track")
    table.add_column("Confidence")
    table.add_column("Score", justify="right")
    table.add_column("YouTube")

    for position, result in enumerate(response.results, 1):
        outcome = result.outcome
        if outcome.confidence is not None:
            style = CONFIDENCE_STYLES[outcome.confidence]
            confidence = f"[{style}]{outcome.confidence.value}[/{style}]"
            link = f"{escape(outcome.matched_title)}\n[dim]{escape(outcome.youtube_url)}[/dim]"
        else:
            confidence = "[red]-[/red]"
            link = f"[red]{outcome.reason.value}[/red]"
        score = f"{outcome.score:.1f}" if outcome.score is not None else "-"
        table.add_row(str(position), escape(result.track.display_name), confidence, score, link)

    console = Console()
    console.print(table)
    console.print(
        f"{response.cached} cached, {response.searched} searched"
    )


def main() -> None:
    """
    Entry point for the CLI.

    This function is called when running `spot-link` from the command line.
    """
    cli()


if __name__ == "__main__":
    main()
