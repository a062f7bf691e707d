"""
External downloader invocation for spot-tube.

Each video is downloaded by running an external command (yt-dlp by
default) with the watch URL as its last argument. stdout and stderr are
combined and captured; the output is only used for error reporting.

The pipeline depends on the download(url) -> DownloadResult shape, not
on this class, so tests can pass any object with that method.

Usage:
    downloader = SubprocessDownloader(("yt-dlp",), Path("~/Music"))
    result = downloader.download("https://www.youtube.com/watch?v=dQw4w9WgXcQ")
    if not result.ok:
        print(result.output)
"""

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Sequence

from spot_tube.core.exceptions import DownloadError
from spot_tube.core.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class DownloadResult:
    """
    Outcome of one downloader run.

    Attributes:
        url: Watch URL that was downloaded.
        returncode: Process exit status.
        output: Combined stdout and stderr.
    """
    url: str
    returncode: int
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class Downloader(Protocol):
    def download(self, url: str) -> DownloadResult:
        ...


class SubprocessDownloader:
    """
    Runs the configured downloader command once per URL.

    Attributes:
        command: Executable and leading arguments.
        directory: Working directory for the process (files land here).
    """

    def __init__(self, command: Sequence[str], directory: Path) -> None:
        self.command = tuple(command)
        self.directory = Path(directory)

    def download(self, url: str) -> DownloadResult:
        """
        Run the downloader for url and wait for it to finish.

        A non-zero exit is reported through the result, not raised.

        Raises:
            DownloadError: If the executable cannot be started at all.
        """
        self.directory.mkdir(parents=True, exist_ok=True)
        cmd = [*self.command, url]
        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            completed = subprocess.run(
                cmd,
                cwd=self.directory,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
            )
        except OSError as e:
            raise DownloadError(
                f"Failed to start downloader '{self.command[0]}': {e}",
                details={"url": url, "command": list(self.command), "original_error": str(e)}
            ) from e

        return DownloadResult(url=url, returncode=completed.returncode, output=completed.stdout or "")
