"""Named, cancellable periodic tasks on the running asyncio loop.

Each timer line fires its callback without waiting for the previous run, so
a slow async callback may overlap the next tick. Whether a line is armed is
decided by the caller from the current data shape via ``ensure``; a line is
only torn down and rebuilt when its ``key`` changes.
"""

from __future__ import annotations

import asyncio
import inspect
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional

from rich.console import Console

from ..utils.sanitize import sanitize_error

console = Console()

Callback = Callable[[], Any]


@dataclass
class PeriodicTask:
    name: str
    interval_ms: int
    callback: Callback
    key: Any = None
    ticks: int = 0
    loop_task: Optional[asyncio.Task] = None
    runs: set = field(default_factory=set)


class Scheduler:
    """Owns every timer and background task of a dashboard."""

    def __init__(self):
        self._tasks: dict[str, PeriodicTask] = {}
        self._oneshots: set[asyncio.Task] = set()

    def arm(
        self,
        name: str,
        interval_ms: int,
        callback: Callback,
        immediate: bool = False,
        key: Any = None,
    ) -> PeriodicTask:
        """(Re)start a timer line, cancelling any previous line of that name."""
        self.disarm(name)
        entry = PeriodicTask(name=name, interval_ms=interval_ms, callback=callback, key=key)
        entry.loop_task = asyncio.get_running_loop().create_task(
            self._run(entry, immediate), name=f"ticketboard:{name}"
        )
        self._tasks[name] = entry
        return entry

    def ensure(
        self,
        name: str,
        wanted: bool,
        interval_ms: int,
        callback: Callback,
        key: Any = None,
    ) -> bool:
        """Make the armed state of ``name`` match ``wanted``. Returns True if re-armed."""
        if not wanted:
            self.disarm(name)
            return False
        current = self._tasks.get(name)
        if current is not None and current.key == key and self.is_armed(name):
            return False
        self.arm(name, interval_ms, callback, key=key)
        return True

    def disarm(self, name: str) -> None:
        entry = self._tasks.pop(name, None)
        if entry is not None and entry.loop_task is not None:
            entry.loop_task.cancel()

    def is_armed(self, name: str) -> bool:
        entry = self._tasks.get(name)
        return entry is not None and entry.loop_task is not None and not entry.loop_task.done()

    def armed(self) -> list[str]:
        return sorted(name for name in self._tasks if self.is_armed(name))

    def ticks(self, name: str) -> int:
        entry = self._tasks.get(name)
        return entry.ticks if entry else 0

    def spawn(self, name: str, coro: Awaitable) -> asyncio.Task:
        """Run a one-off coroutine that is cancelled on shutdown."""
        task = asyncio.ensure_future(coro)
        self._oneshots.add(task)
        task.add_done_callback(self._oneshots.discard)
        task.add_done_callback(lambda t: _report(name, t))
        return task

    async def shutdown(self) -> None:
        """Cancel every timer line, in-flight run and one-off task."""
        pending: list[asyncio.Task] = []
        for name in list(self._tasks):
            entry = self._tasks[name]
            pending.extend(entry.runs)
            if entry.loop_task is not None:
                pending.append(entry.loop_task)
            self.disarm(name)
        pending.extend(self._oneshots)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._oneshots.clear()

    async def _run(self, entry: PeriodicTask, immediate: bool) -> None:
        if immediate:
            self._fire(entry)
        while True:
            await asyncio.sleep(entry.interval_ms / 1000)
            self._fire(entry)

    def _fire(self, entry: PeriodicTask) -> None:
        entry.ticks += 1
        try:
            result = entry.callback()
        except Exception as e:
            console.print(f"  [red]ERROR[/red] {entry.name}: {sanitize_error(str(e))}")
            return
        if inspect.isawaitable(result):
            run = asyncio.ensure_future(result)
            entry.runs.add(run)
            run.add_done_callback(entry.runs.discard)
            run.add_done_callback(lambda t: _report(entry.name, t))


def _report(name: str, task: asyncio.Task) -> None:
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        console.print(f"  [red]ERROR[/red] {name}: {sanitize_error(str(error))}")
