"""Watch mode: recompile changed sources and report each update."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Set, Tuple

from rich.console import Console
from rich.markup import escape
from watchfiles import Change, awatch

from zikojsx.compiler.build import ArtifactBuilder
from zikojsx.config import CompilerOptions

console = Console()


@dataclass(frozen=True)
class UpdateEvent:
    """One recompiled (or removed) source file."""

    file: Path
    timestamp: float
    removed: bool = False


UpdateCallback = Callable[[UpdateEvent], None]


def handle_changes(
    builder: ArtifactBuilder, changes: Iterable[Tuple[Change, str]]
) -> List[UpdateEvent]:
    """Apply one batch of file changes and return what was updated."""
    events: List[UpdateEvent] = []
    seen: Set[Path] = set()

    for change_type, file_path in sorted(changes, key=lambda c: c[1]):
        path = Path(file_path)
        if not builder.options.matches(path) or path in seen:
            continue
        seen.add(path)

        if change_type == Change.deleted or not path.exists():
            if builder.remove(path):
                events.append(UpdateEvent(file=path, timestamp=time.time(), removed=True))
            continue

        summary = builder.compile_one(path)
        for error in summary.errors:
            console.print(f"[bold red]Error[/] {escape(str(error))}")
        if summary.compiled:
            events.append(UpdateEvent(file=path, timestamp=time.time()))

    return events


async def watch_project(
    src_dir: Path,
    out_dir: Path,
    options: Optional[CompilerOptions] = None,
    on_update: Optional[UpdateCallback] = None,
    stop_event: Optional[asyncio.Event] = None,
) -> None:
    """Build ``src_dir`` once, then rebuild files as they change."""
    builder = ArtifactBuilder(src_dir, out_dir, options)
    summary = builder.build()
    for error in summary.errors:
        console.print(f"[bold red]Error[/] {escape(str(error))}")
    console.print(
        f"[bold cyan]zikojsx[/]: Watching [bold]{builder.src_dir}[/] for changes..."
    )

    async for changes in awatch(builder.src_dir, stop_event=stop_event):
        for event in handle_changes(builder, changes):
            action = "removed" if event.removed else "updated"
            console.print(f"[bold green]zikojsx[/]: {action} {event.file}")
            if on_update is not None:
                on_update(event)
