"""
Command-line interface for spot-tube.

Runs one playlist-to-downloads pass and exits:

    1. Load configuration (environment, .env, optional config.yaml)
    2. Fetch the playlist's tracks from Spotify
    3. Obtain a YouTube OAuth token (cached, or interactive on first run)
    4. Search YouTube for each track
    5. Download each found video with the external downloader

Usage:
    spot-tube
    spot-tube --config path/to/config.yaml

Exit codes:
    0    Success
    1    Configuration error (or unexpected error)
    2    Credential / authorization error
    3    Spotify error
    4    Download error
    5    Other spot-tube error
    130  Interrupted by user

This module is the only place that terminates the process; every
component below it raises.
"""

import sys
from pathlib import Path
from typing import Optional

import rich_click as click

click.rich_click.USE_RICH_MARKUP = True
click.rich_click.MAX_WIDTH = 100

from spot_tube import __version__
from spot_tube.auth import AuthorizationFlow, CredentialStore, TokenBootstrapper
from spot_tube.core import (
    AuthorizationError,
    Config,
    ConfigError,
    CredentialError,
    DownloadError,
    SpotifyError,
    SpotTubeError,
    get_logger,
    load_config,
    setup_logging,
    shutdown_logging,
)
from spot_tube.download import SubprocessDownloader
from spot_tube.pipeline import PipelineStats, run_pipeline
from spot_tube.spotify import SpotifyClient, Track
from spot_tube.youtube import VideoSearcher

logger = get_logger(__name__)


@click.command()
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    metavar="<config.yaml>",
    help="Path to config.yaml (default: ./config.yaml if present)"
)
@click.option(
    "--version",
    is_flag=True,
    help="Show version and exit."
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], version: bool) -> None:
    """
    spot-tube: Download a Spotify playlist's tracks from YouTube.

    Reads the playlist configured by SPOTIFY_PLAYLIST_ID, finds the top
    YouTube video for each track and downloads it with yt-dlp.

    \b
    REQUIRED ENVIRONMENT (or .env):
        SPOTIFY_CLIENT_ID, SPOTIFY_CLIENT_SECRET, YOUTUBE_CREDENTIALS_JSON

    On the first run a YouTube consent URL is printed; open it, approve,
    and paste back the URL you were redirected to.
    """
    if version:
        click.echo(f"spot-tube {__version__}")
        ctx.exit(0)

    _run(config_path)


def _run(config_path: Path | None) -> None:
    """
    Execute the full pass, mapping errors to exit codes.

    Raises:
        SystemExit: On fatal errors (with the exit code listed above).
    """
    try:
        config = load_config(config_path)

        setup_logging(config.output.log_directory)
        logger.info("spot-tube starting")

        tracks = _fetch_tracks(config)
        searcher = _build_searcher(config)
        downloader = SubprocessDownloader(config.download.command, config.download.directory)

        stats = run_pipeline(tracks, searcher, downloader)
        _print_final_stats(stats)

        click.echo("YouTube downloads completed successfully!")
        logger.info("spot-tube completed successfully")

    except ConfigError as e:
        click.echo(f"Configuration error: {e.message}", err=True)
        sys.exit(1)

    except (CredentialError, AuthorizationError) as e:
        click.echo(f"Authorization error: {e.message}", err=True)
        logger.error(f"Authorization error: {e.message}", exc_info=True)
        sys.exit(2)

    except SpotifyError as e:
        click.echo(f"Error retrieving Spotify playlist: {e.message}", err=True)
        if e.is_auth_error:
            click.echo("Check SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET", err=True)
        logger.error(f"Spotify error: {e.message}", exc_info=True)
        sys.exit(3)

    except DownloadError as e:
        click.echo(e.message, err=True)
        logger.error(f"Download error for {e.details.get('url', '?')}")
        sys.exit(4)

    except SpotTubeError as e:
        click.echo(f"Error: {e.message}", err=True)
        logger.error(f"Error: {e.message}", exc_info=True)
        sys.exit(5)

    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        logger.info("Interrupted by user")
        sys.exit(130)

    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        logger.exception("Unexpected error")
        sys.exit(1)

    finally:
        shutdown_logging()


def _fetch_tracks(config: Config) -> list[Track]:
    """Fetch the configured playlist via the client-credentials grant."""
    client = SpotifyClient.from_credentials(
        client_id=config.spotify.client_id,
        client_secret=config.spotify.client_secret
    )
    logger.info(f"Fetching Spotify playlist {config.spotify.playlist_id}")
    tracks = client.playlist_tracks(config.spotify.playlist_id)
    logger.info(f"Tracks to process: {len(tracks)}")
    return tracks


def _build_searcher(config: Config) -> VideoSearcher:
    """Bootstrap the YouTube token and build the search client from it."""
    flow = AuthorizationFlow(config.youtube)
    store = CredentialStore(config.youtube.token_file)
    token = TokenBootstrapper(store, flow).obtain()
    return VideoSearcher.from_credentials(flow.to_credentials(token))


def _print_final_stats(stats: PipelineStats) -> None:
    logger.info("=" * 60)
    logger.info("FINAL STATISTICS")
    logger.info("=" * 60)
    logger.info(f"Tracks:            {stats.tracks}")
    logger.info(f"Found on YouTube:  {stats.found}")
    logger.info(f"Search failed:     {stats.search_failed}")
    logger.info(f"Downloaded:        {stats.downloaded}")
    logger.info("=" * 60)


def main() -> None:
    """Entry point for the spot-tube console script."""
    cli()


if __name__ == "__main__":
    main()
