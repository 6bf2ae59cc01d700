"""Per-process scraping of /proc/<pid>/smaps, stat and cmdline.

Each mapping in smaps is followed by accounting lines of the form::

    Rss:                 592 kB
    Pss:                  87 kB
    Private_Clean:         0 kB
    Private_Dirty:        12 kB
    SwapPss:               0 kB

The Scraper sums the fields of interest over every mapping.
"""

import os
import re
from pathlib import Path

from smemtop.models import ProcessSnapshot
from smemtop.owners import OwnerCache

# First parenthesized token of /proc/<pid>/stat holds the short process name
NAME_RE = re.compile(r"\((.*?)\)")


class ScrapeError(Exception):
    """A process could not be scraped and should be left out of this scan."""


def field_kb(line: str, field: str) -> int:
    """
    Return the kB value of a smaps line if it carries the given field, else 0.

    The parse is lossy on purpose: a missing or non-numeric value counts as 0
    so that one odd line never aborts aggregation.
    """
    parts = line.split()
    if len(parts) < 2 or parts[0] != f"{field}:":
        return 0
    try:
        return int(parts[1])
    except ValueError:
        return 0


def read_cmdline(proc_dir: Path) -> str:
    """
    Return the process arguments joined by single spaces.

    Arguments are NUL separated; trailing separators are dropped. Kernel threads,
    zombies and unreadable entries give an empty string.
    """
    try:
        raw = (proc_dir / "cmdline").read_bytes()
    except OSError:
        return ""
    return raw.decode("utf-8", errors="replace").rstrip("\0").replace("\0", " ")


def read_name(proc_dir: Path) -> str:
    """Return the short process name from the stat file, or "" if unavailable."""
    try:
        stat = (proc_dir / "stat").read_text(encoding="utf-8", errors="replace")
    except OSError:
        return ""
    match = NAME_RE.search(stat)
    return match.group(1) if match else ""


class Scraper:
    """Builds a ProcessSnapshot for one /proc/<pid> directory."""

    def __init__(self, owners: OwnerCache) -> None:
        self._owners = owners

    @property
    def owners(self) -> OwnerCache:
        """The shared owner cache."""
        return self._owners

    def populate(self, proc_dir: Path, command: str) -> ProcessSnapshot:
        """
        Scrape a process directory into a snapshot.

        Args:
            proc_dir: The /proc/<pid> directory.
            command: The already-read, non-empty command line.

        Raises:
            ScrapeError: If the pid is invalid, smaps cannot be read, or the
                owner cannot be resolved. The caller skips the process.
        """
        try:
            pid = int(proc_dir.name)
        except ValueError as e:
            raise ScrapeError(f"not a process directory: {proc_dir}") from e
        if pid <= 0:
            raise ScrapeError(f"invalid pid {pid}")

        rss, pss, uss, swap_pss, swap = self._scrape_smaps(proc_dir)
        owner = self._resolve_owner(proc_dir)

        return ProcessSnapshot(
            pid=pid,
            name=read_name(proc_dir),
            owner=owner,
            command=command,
            rss=rss,
            pss=pss,
            uss=uss,
            swap=swap if swap_pss is None else swap_pss,
        )

    def _scrape_smaps(self, proc_dir: Path) -> tuple[int, int, int, int | None, int]:
        """Sum Rss, Pss, USS, SwapPss (None if absent) and Swap over all mappings."""
        rss = pss = uss = swap = 0
        swap_pss: int | None = None
        try:
            with open(proc_dir / "smaps", encoding="utf-8", errors="replace") as fh:
                for line in fh:
                    rss += field_kb(line, "Rss")
                    pss += field_kb(line, "Pss")
                    uss += field_kb(line, "Private_Clean")
                    uss += field_kb(line, "Private_Dirty")
                    swap += field_kb(line, "Swap")
                    if line.startswith("SwapPss:"):
                        swap_pss = (swap_pss or 0) + field_kb(line, "SwapPss")
        except OSError as e:
            # Process exited or access denied between listing and reading
            raise ScrapeError(f"cannot read smaps for {proc_dir.name}: {e}") from e
        return rss, pss, uss, swap_pss, swap

    def _resolve_owner(self, proc_dir: Path) -> str:
        try:
            uid = os.stat(proc_dir).st_uid
            return self._owners.resolve(uid)
        except (OSError, KeyError) as e:
            raise ScrapeError(f"cannot resolve owner of {proc_dir.name}: {e}") from e
