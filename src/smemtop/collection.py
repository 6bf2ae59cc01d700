"""Process collection building and sorting."""

import os
import re
from pathlib import Path

import structlog

from smemtop.models import DEFAULT_SORT_KEY, ProcessSnapshot, SortKey
from smemtop.smaps import Scraper, ScrapeError, read_cmdline

log = structlog.get_logger()

PID_RE = re.compile(r"[0-9]+")


def is_pid(name: str) -> bool:
    """Check whether a /proc entry name is a process id (ASCII digits only)."""
    return PID_RE.fullmatch(name) is not None


def sort_processes(
    processes: list[ProcessSnapshot], sort_key: SortKey = DEFAULT_SORT_KEY
) -> list[ProcessSnapshot]:
    """
    Sort processes by the given key.

    Name sorts ascending, every memory field sorts descending (largest first).
    The sort is stable, so ties keep enumeration order.
    """
    key_func = {
        SortKey.NAME: lambda p: p.name,
        SortKey.RSS: lambda p: p.rss,
        SortKey.PSS: lambda p: p.pss,
        SortKey.USS: lambda p: p.uss,
        SortKey.SWAP: lambda p: p.swap,
    }
    return sorted(processes, key=key_func[sort_key], reverse=sort_key is not SortKey.NAME)


class CollectionBuilder:
    """
    Scans a process root and builds a sorted list of ProcessSnapshot.

    Processes that vanish mid-scan, deny access, or have no command line are
    left out silently. Every call rebuilds the collection from scratch.
    """

    def __init__(self, scraper: Scraper) -> None:
        self._scraper = scraper
        self.last_error: OSError | None = None

    def build(
        self, proc_root: Path | str, sort_key: SortKey = DEFAULT_SORT_KEY
    ) -> list[ProcessSnapshot]:
        """Scan proc_root and return the processes sorted by sort_key."""
        root = Path(proc_root)
        try:
            names = os.listdir(root)
        except OSError as e:
            self.last_error = e
            log.warning("proc_root_unreadable", proc_root=str(root), error=str(e))
            return []
        self.last_error = None

        processes: list[ProcessSnapshot] = []
        for name in names:
            if not is_pid(name):
                continue
            proc_dir = root / name

            # Kernel threads and zombies have no arguments and are not reported
            command = read_cmdline(proc_dir)
            if not command:
                continue

            try:
                processes.append(self._scraper.populate(proc_dir, command))
            except ScrapeError as e:
                log.debug("process_skipped", pid=name, reason=str(e))

        return sort_processes(processes, sort_key)
