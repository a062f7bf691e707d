"""
Rich progress bars for the two passes of a run.

    Searching    ✓ 41  ✗ 2    ━━━━━━━━━━━━━━━━━━━━━━━━   43/60  0:00:12
    Downloading  ✓ 17         ━━━━━━━━━━━━━━━━━━━━━━━━   17/41  0:03:40

Fetching the playlist is a single paginated call and gets no bar.

Usage:
    with SearchProgressBar(total=len(tracks)) as bar:
        for track in tracks:
            bar.update(found=search(track))
"""

from typing import Optional

from rich import get_console
from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)
from rich.theme import Theme


BAR_THEME = Theme({
    "bar.back": "grey23",
    "bar.complete": "magenta",
    "bar.finished": "green",
    "bar.pulse": "magenta",
})


def _build_progress(console: Console) -> Progress:
    return Progress(
        TextColumn("{task.description:<12}"),
        TextColumn("{task.fields[status]}"),
        BarColumn(bar_width=None),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        expand=False,
    )


class PassProgressBar:
    """
    One Rich task tracking a fixed number of steps.

    Subclasses keep their own counters and render them through
    status_text(). The theme is pushed on start() and popped on stop(),
    so a bar that is never started leaves the console untouched.
    """

    description = ""

    def __init__(self, total: int, console: Optional[Console] = None):
        self.total = total
        self.console = console or get_console()
        self.progress = _build_progress(self.console)
        self._task: Optional[TaskID] = None

    def __enter__(self) -> "PassProgressBar":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

    def start(self) -> None:
        if self._task is not None:
            return
        self.console.push_theme(BAR_THEME)
        self.progress.start()
        self._task = self.progress.add_task(
            self.description, total=self.total, status=self.status_text()
        )

    def stop(self) -> None:
        if self._task is None:
            return
        self.progress.stop()
        self.console.pop_theme()
        self._task = None

    def status_text(self) -> str:
        return ""

    def _advance(self) -> None:
        if self._task is not None:
            self.progress.update(self._task, advance=1, status=self.status_text())


class SearchProgressBar(PassProgressBar):
    """Counts found and failed searches."""

    description = "Searching"

    def __init__(self, total: int, console: Optional[Console] = None):
        self.found = 0
        self.failed = 0
        super().__init__(total, console=console)

    def status_text(self) -> str:
        return f"[green]✓ {self.found}[/]  [red]✗ {self.failed}[/]"

    def update(self, found: bool) -> None:
        if found:
            self.found += 1
        else:
            self.failed += 1
        self._advance()


class DownloadProgressBar(PassProgressBar):
    # the pass aborts on the first failure, so only successes are counted
    description = "Downloading"

    def __init__(self, total: int, console: Optional[Console] = None):
        self.downloaded = 0
        super().__init__(total, console=console)

    def status_text(self) -> str:
        return f"[green]✓ {self.downloaded}[/]"

    def update(self) -> None:
        self.downloaded += 1
        self._advance()
