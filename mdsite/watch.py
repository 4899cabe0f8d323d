from __future__ import annotations

import sys
import time
from pathlib import Path
from typing import Callable

from .errors import BuildError

DEBOUNCE_SECONDS = 5.0
POLL_INTERVAL = 0.5


def snapshot(content_dir: Path) -> dict[str, float]:
    state: dict[str, float] = {}
    if not content_dir.is_dir():
        return state
    for path in content_dir.iterdir():
        try:
            state[path.as_posix()] = path.lstat().st_mtime
        except FileNotFoundError:
            continue
        if path.is_dir() and not path.is_symlink():
            for entry in path.iterdir():
                try:
                    state[entry.as_posix()] = entry.lstat().st_mtime
                except FileNotFoundError:
                    continue
    return state


def watch(
    content_dir: Path,
    rebuild: Callable[[], object],
    debounce: float = DEBOUNCE_SECONDS,
    interval: float = POLL_INTERVAL,
    max_rebuilds: int | None = None,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    print(f"Watching: {content_dir}")
    previous = snapshot(content_dir)
    last_change = clock()
    pending = False
    rebuilds = 0
    while max_rebuilds is None or rebuilds < max_rebuilds:
        current = snapshot(content_dir)
        if current != previous:
            previous = current
            last_change = clock()
            pending = True
        if pending and clock() - last_change >= debounce:
            print("\n--- Rebuilding ---")
            try:
                rebuild()
            except BuildError as exc:
                print(f"Error: {exc}", file=sys.stderr)
            pending = False
            rebuilds += 1
            previous = snapshot(content_dir)
        sleep(interval)
    return rebuilds
