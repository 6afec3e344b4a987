"""Rich progress display driven by pipeline events."""

from __future__ import annotations

from types import TracebackType

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)


class ProgressReporter:
    """Translate ``(event, payload)`` callbacks into progress bars.

    Known events:
    - ``site:start {chapters}``: opens the chapters bar
    - ``chapter:start {chapter}``: opens a spinner for the chapter's pages
    - ``page:written {link}``: advances the pages spinner
    - ``chapter:done {chapter, pages}``: closes the pages spinner, advances chapters
    - ``site:finalized {pages}``: closes everything
    Unknown events are ignored.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=console,
            transient=False,
        )
        self._tasks: dict[str, TaskID] = {}
        self._totals: dict[str, int] = {}

    def __enter__(self) -> ProgressReporter:
        self.progress.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.progress.stop()

    def add_step(self, description: str, total: int | None = None) -> TaskID:
        return self.progress.add_task(description, total=total)

    def finish_task(self, task_id: TaskID) -> None:
        task = next((t for t in self.progress.tasks if t.id == task_id), None)
        if task is not None and task.total is not None:
            self.progress.update(task_id, completed=task.total)
        self.progress.remove_task(task_id)

    def _open(self, key: str, description: str, total: int | None) -> None:
        if key in self._tasks:
            self._close(key)
        self._tasks[key] = self.add_step(description, total=total)
        if total is not None:
            self._totals[key] = total

    def _close(self, key: str) -> None:
        task_id = self._tasks.pop(key, None)
        if task_id is not None:
            self.finish_task(task_id)
        self._totals.pop(key, None)

    def _advance(self, key: str) -> None:
        task_id = self._tasks.get(key)
        if task_id is not None:
            self.progress.advance(task_id)

    def emit(self, event: str, payload: dict[str, int | str]) -> None:
        if event == "site:start":
            self._open("chapters", "Chapters", int(payload.get("chapters", 0)))
        elif event == "chapter:start":
            self._open("pages", f"Pages of {payload.get('chapter', '')}", None)
        elif event == "page:written":
            self._advance("pages")
        elif event == "chapter:done":
            self._close("pages")
            self._advance("chapters")
        elif event == "site:finalized":
            for key in list(self._tasks):
                self._close(key)


__all__ = ["ProgressReporter"]
