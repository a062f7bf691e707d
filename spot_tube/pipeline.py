"""
Playlist-to-downloads pipeline for spot-tube.

Two strictly sequential passes over the playlist:

    SEARCH: one YouTube search per track, in playlist order. A failed
        search is logged (and written to the search failure report) and
        the track is dropped. The pass never aborts.

    DOWNLOAD: one downloader run per found video, in the same order.
        The first failed run aborts the pass with DownloadError carrying
        the captured output; later videos are not attempted.
"""

from dataclasses import dataclass, field
from typing import Protocol, Sequence

from spot_tube.core.exceptions import DownloadError, YouTubeError
from spot_tube.core.logger import get_logger, log_search_failure
from spot_tube.core.progress import DownloadProgressBar, SearchProgressBar
from spot_tube.download.downloader import Downloader
from spot_tube.spotify.models import Track
from spot_tube.youtube.search import watch_url

logger = get_logger(__name__)


class Searcher(Protocol):
    def search(self, query: str) -> str:
        ...


@dataclass
class PipelineStats:
    """Counters reported at the end of a run."""
    tracks: int = 0
    found: int = 0
    search_failed: int = 0
    downloaded: int = 0
    failed_tracks: list[Track] = field(default_factory=list)


def collect_video_ids(
    tracks: Sequence[Track],
    searcher: Searcher,
    stats: PipelineStats | None = None,
    show_progress: bool = True
) -> list[str]:
    """
    Search every track and return the found video IDs in playlist order.

    Args:
        tracks: Tracks in playlist order.
        searcher: Object with search(query) -> video_id.
        stats: Optional counters to update.
        show_progress: Whether to render a progress bar.

    Returns:
        One video ID per successfully searched track.
    """
    stats = stats if stats is not None else PipelineStats()
    stats.tracks = len(tracks)
    video_ids: list[str] = []

    progress = SearchProgressBar(total=len(tracks)) if show_progress else None
    if progress:
        progress.start()
    try:
        for track in tracks:
            query = track.search_query
            try:
                video_id = searcher.search(query)
            except YouTubeError as e:
                log_search_failure(logger, track.title, track.artist, query, e.message)
                stats.search_failed += 1
                stats.failed_tracks.append(track)
                if progress:
                    progress.update(found=False)
                continue

            video_ids.append(video_id)
            stats.found += 1
            if progress:
                progress.update(found=True)
    finally:
        if progress:
            progress.stop()

    return video_ids


def download_videos(
    video_ids: Sequence[str],
    downloader: Downloader,
    stats: PipelineStats | None = None,
    show_progress: bool = True
) -> None:
    """
    Download each video in order, stopping at the first failure.

    Raises:
        DownloadError: On the first non-zero downloader exit. details
                       carry 'url', 'returncode' and 'output'.
    """
    stats = stats if stats is not None else PipelineStats()

    progress = DownloadProgressBar(total=len(video_ids)) if show_progress else None
    if progress:
        progress.start()
    try:
        for video_id in video_ids:
            url = watch_url(video_id)
            logger.debug(f"Downloading {url}")
            result = downloader.download(url)
            if not result.ok:
                raise DownloadError(
                    f"Failed to download video: exit status {result.returncode}\n{result.output}",
                    details={
                        "url": url,
                        "returncode": result.returncode,
                        "output": result.output,
                    }
                )
            stats.downloaded += 1
            if progress:
                progress.update()
    finally:
        if progress:
            progress.stop()


def run_pipeline(
    tracks: Sequence[Track],
    searcher: Searcher,
    downloader: Downloader,
    show_progress: bool = True
) -> PipelineStats:
    """
    Search all tracks, then download all found videos.

    Raises:
        DownloadError: If any download fails (remaining downloads skipped).
    """
    stats = PipelineStats()

    logger.info(f"Searching YouTube for {len(tracks)} tracks")
    video_ids = collect_video_ids(tracks, searcher, stats=stats, show_progress=show_progress)
    logger.info(f"Found {stats.found} videos ({stats.search_failed} searches failed)")

    download_videos(video_ids, downloader, stats=stats, show_progress=show_progress)
    logger.info(f"Downloaded {stats.downloaded} videos")

    return stats
