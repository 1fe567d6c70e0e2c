"""
Progress bar for a lyrics fetching run, drawn with Rich.

The bar shows one line with the per-result counts next to it:

    Lyrics   ✓ 80  ✗ 15  ♪ 3  ⊘ 12   ━━━━━━━━━━━━━━━━━━━━  110/120  91%

Usage:
    from lyrics_fetch.core.progress import LyricsProgressBar

    with LyricsProgressBar(total=len(entries)) as progress:
        for entry in entries:
            progress.update(processor.process(entry, stats))
"""

from rich import get_console
from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskID,
    TaskProgressColumn,
    TextColumn,
)
from rich.table import Column

# Per-file results understood by LyricsProgressBar.update()
RESULT_FETCHED = "fetched"
RESULT_INSTRUMENTAL = "instrumental"
RESULT_SKIPPED = "skipped"
RESULT_FAILED = "failed"

# Display order, symbol and color of each count
_MARKERS = (
    ("fetched", "✓", "green"),
    ("failed", "✗", "red"),
    ("instrumental", "♪", "cyan"),
    ("skipped", "⊘", "yellow"),
)


def _fixed_width(width: int) -> Column:
    return Column(width=width, no_wrap=True, overflow="ellipsis")


class LyricsProgressBar:
    """
    Progress bar fed with one RESULT_* value per processed file.

    An instrumental file also counts as fetched, since an empty lyrics
    file is written for it. Instrumental and skipped counts are hidden
    while they are zero.

    Attributes:
        total: Number of files expected. May be changed before start().
        counts: Files seen so far, by marker name.
    """

    def __init__(
        self,
        total: int,
        description: str = "Lyrics",
        console: Console | None = None
    ) -> None:
        self.total = total
        self.description = description
        self.counts = {name: 0 for name, _, _ in _MARKERS}
        self._progress = Progress(
            TextColumn("{task.description}", table_column=_fixed_width(12)),
            TextColumn("{task.fields[status]}", table_column=_fixed_width(32)),
            BarColumn(bar_width=40, complete_style="magenta", finished_style="green"),
            MofNCompleteColumn(),
            TaskProgressColumn(),
            console=console or get_console(),
        )
        self._task: TaskID | None = None

    def __enter__(self) -> "LyricsProgressBar":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

    @property
    def completed(self) -> int:
        return self.counts["fetched"] + self.counts["failed"] + self.counts["skipped"]

    def start(self) -> None:
        if self._task is not None:
            return
        self._progress.start()
        self._task = self._progress.add_task(
            self.description, total=self.total, status=self.status_text()
        )

    def stop(self) -> None:
        if self._task is None:
            return
        self._progress.stop()
        self._task = None

    def status_text(self) -> str:
        """Rich markup for the counts, e.g. "[green]✓ 3[/green]  [red]✗ 1[/red]"."""
        parts = []
        for name, symbol, color in _MARKERS:
            count = self.counts[name]
            if count or name in ("fetched", "failed"):
                parts.append(f"[{color}]{symbol} {count}[/{color}]")
        return "  ".join(parts)

    def update(self, result: str) -> None:
        """
        Record one processed file.

        Raises:
            ValueError: If result is not one of the RESULT_* values.
        """
        if result == RESULT_INSTRUMENTAL:
            self.counts["fetched"] += 1
            self.counts["instrumental"] += 1
        elif result in (RESULT_FETCHED, RESULT_FAILED, RESULT_SKIPPED):
            self.counts[result] += 1
        else:
            raise ValueError(f"unknown progress result: {result!r}")

        if self._task is not None:
            self._progress.update(
                self._task, completed=self.completed, status=self.status_text()
            )
