"""
spot-tube: Download a Spotify playlist's tracks from YouTube.

One run performs a single pass:

    1. Fetch the playlist's tracks from Spotify (client-credentials grant)
    2. Obtain a YouTube OAuth token: reuse the cached token.json, or run
       the authorization-code flow once and cache the result
    3. Search YouTube for "<title> <artist>" and keep the top video
       (failed searches are logged and skipped)
    4. Run the external downloader (yt-dlp) for each video, stopping at
       the first failure

Modules:
    core/       - Configuration, exceptions, logging, progress bars
    auth/       - Token cache and OAuth bootstrap
    spotify/    - Spotify client and Track model
    youtube/    - YouTube search
    download/   - External downloader invocation
    pipeline.py - Search and download passes
    cli.py      - Command-line interface

Python API:
    from spot_tube.core import load_config, setup_logging
    from spot_tube.auth import AuthorizationFlow, CredentialStore, TokenBootstrapper
    from spot_tube.spotify import SpotifyClient
    from spot_tube.youtube import VideoSearcher
    from spot_tube.download import SubprocessDownloader
    from spot_tube.pipeline import run_pipeline

    config = load_config()
    setup_logging(config.output.log_directory)

    tracks = SpotifyClient.from_credentials(
        config.spotify.client_id, config.spotify.client_secret
    ).playlist_tracks(config.spotify.playlist_id)

    flow = AuthorizationFlow(config.youtube)
    token = TokenBootstrapper(CredentialStore(config.youtube.token_file), flow).obtain()
    searcher = VideoSearcher.from_credentials(flow.to_credentials(token))

    downloader = SubprocessDownloader(config.download.command, config.download.directory)
    run_pipeline(tracks, searcher, downloader)
"""

__version__ = "0.1.0"
__author__ = "spot-tube"
__license__ = "MIT"
