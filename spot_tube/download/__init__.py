"""
Download module for spot-tube.

    - downloader: SubprocessDownloader (external process per video), DownloadResult
"""

from spot_tube.download.downloader import (
    Downloader,
    DownloadResult,
    SubprocessDownloader,
)

__all__ = [
    "Downloader",
    "DownloadResult",
    "SubprocessDownloader",
]
