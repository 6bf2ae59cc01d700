"""Refresh loop state machine for smemtop.

The Controller consumes a stream of typed events and keeps the state needed to
redraw the table. It never touches the terminal, so it can be driven directly
in tests; the Textual app only translates timers, keys and resizes into events.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import structlog

from smemtop.collection import CollectionBuilder
from smemtop.models import DEFAULT_SORT_KEY, ProcessSnapshot, SortKey
from smemtop.presenter import format_table

log = structlog.get_logger()

SORT_KEYS = {
    "n": SortKey.NAME,
    "r": SortKey.RSS,
    "p": SortKey.PSS,
    "u": SortKey.USS,
    "s": SortKey.SWAP,
}
QUIT_KEYS = frozenset({"q", "ctrl+c"})


@dataclass(slots=True, frozen=True)
class Tick:
    """Refresh timer fired."""


@dataclass(slots=True, frozen=True)
class KeyPress:
    """A key was pressed."""

    key: str


@dataclass(slots=True, frozen=True)
class Resize:
    """The terminal changed size."""

    width: int
    height: int


@dataclass(slots=True, frozen=True)
class Quit:
    """Stop the loop."""


Event = Tick | KeyPress | Resize | Quit


class State(Enum):
    """Controller lifecycle."""

    RUNNING = "running"
    STOPPED = "stopped"


class Controller:
    """Owns the sort key, the last collection and grid, and the terminal size."""

    def __init__(
        self,
        builder: CollectionBuilder,
        proc_root: Path | str = "/proc",
        sort_key: SortKey = DEFAULT_SORT_KEY,
        size: tuple[int, int] = (80, 24),
    ) -> None:
        """
        Initialize the Controller and perform the first scan.

        Args:
            builder: Collection builder used for every rescan.
            proc_root: Directory holding one entry per process.
            sort_key: Initial sort key.
            size: Initial terminal (width, height).
        """
        self._builder = builder
        self._proc_root = Path(proc_root)
        self._sort_key = sort_key
        self._size = size
        self._state = State.RUNNING
        self._processes: list[ProcessSnapshot] = []
        self._grid: list[list[str]] = []
        self._refresh()

    @property
    def state(self) -> State:
        """Current lifecycle state."""
        return self._state

    @property
    def sort_key(self) -> SortKey:
        """Active sort key."""
        return self._sort_key

    @property
    def size(self) -> tuple[int, int]:
        """Terminal (width, height) the grid is laid out for."""
        return self._size

    @property
    def processes(self) -> list[ProcessSnapshot]:
        """Collection from the last scan."""
        return self._processes

    @property
    def grid(self) -> list[list[str]]:
        """Grid rendered from the last scan at the current size."""
        return self._grid

    @property
    def last_error(self) -> OSError | None:
        """Error from the last scan if the process root could not be listed."""
        return self._builder.last_error

    def dispatch(self, event: Event) -> State:
        """Apply one event and return the resulting state."""
        if self._state is State.STOPPED:
            return self._state

        if isinstance(event, Tick):
            self._refresh()
        elif isinstance(event, Quit):
            self._stop()
        elif isinstance(event, Resize):
            self._size = (event.width, event.height)
            self._relayout()
        elif isinstance(event, KeyPress):
            if event.key in QUIT_KEYS:
                self._stop()
            elif event.key in SORT_KEYS:
                self._sort_key = SORT_KEYS[event.key]
                log.debug("sort_key_changed", sort_key=self._sort_key.value)
                self._refresh()
        return self._state

    def _refresh(self) -> None:
        """Rescan with the current sort key and reformat."""
        self._processes = self._builder.build(self._proc_root, self._sort_key)
        self._relayout()

    def _relayout(self) -> None:
        self._grid = format_table(self._processes, self._size[0])

    def _stop(self) -> None:
        self._state = State.STOPPED
        log.debug("controller_stopped")
