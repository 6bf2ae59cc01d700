"""smemtop - Main Textual application."""

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.widgets import DataTable, Footer, Static

from smemtop.collection import CollectionBuilder
from smemtop.config import Config
from smemtop.controller import Controller, Event, KeyPress, Quit, Resize, State, Tick
from smemtop.owners import OwnerCache
from smemtop.presenter import column_widths
from smemtop.smaps import Scraper
from smemtop.system import SystemMemory, read_system_memory


def format_bytes(size: float) -> str:
    """Format bytes as human-readable string."""
    for unit in ["B", "K", "M", "G", "T"]:
        if size < 1024:
            return f"{size:.1f}{unit}" if unit != "B" else f"{int(size)}{unit}"
        size = size / 1024
    return f"{size:.1f}P"


def usage_bar(percent: float, color: str) -> str:
    """Render a 20 cell usage bar in Rich markup."""
    bar_len = min(int(percent / 5), 20)
    return f"[{color}]█[/{color}]" * bar_len + "[dim]░[/dim]" * (20 - bar_len)


class HeaderStats(Static):
    """Header widget showing system memory, swap and the active sort key."""

    DEFAULT_CSS = """
    HeaderStats {
        height: auto;
        padding: 0 1;
        background: $surface;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        """Initialize HeaderStats."""
        super().__init__(*args, **kwargs)
        self._memory: SystemMemory | None = None
        self._sort_label: str = ""

    def update_stats(self, memory: SystemMemory, sort_label: str) -> None:
        """Update the statistics shown in the header."""
        self._memory = memory
        self._sort_label = sort_label
        self.update(self.render_stats())

    def render_stats(self) -> str:
        """Build the header text."""
        mem = self._memory
        if mem is None:
            return "Loading memory info..."
        # Use escaped brackets for the bar containers
        return (
            f"Mem\\[{usage_bar(mem.memory_percent, 'cyan')}] "
            f"{format_bytes(mem.memory_used)}/{format_bytes(mem.memory_total)}   "
            f"Swp\\[{usage_bar(mem.swap_percent, 'yellow')}] "
            f"{format_bytes(mem.swap_used)}/{format_bytes(mem.swap_total)}   "
            f"Sort: [bold]{self._sort_label}[/bold]"
        )


class ProcessTable(Container):
    """Container for the process data table."""

    DEFAULT_CSS = """
    ProcessTable {
        height: 1fr;
    }
    """

    def compose(self) -> ComposeResult:
        """Compose the process table."""
        yield DataTable(id="process-table", show_header=False, cursor_type="row")

    def show_grid(self, grid: list[list[str]], width: int) -> None:
        """Replace the table contents with a formatted grid, keeping the cursor row."""
        table = self.query_one("#process-table", DataTable)
        cursor_row = table.cursor_row
        table.clear(columns=True)
        for index, col_width in enumerate(column_widths(width)):
            table.add_column(str(index), key=str(index), width=col_width)
        table.add_rows(grid)
        if table.row_count:
            table.move_cursor(row=min(cursor_row, table.row_count - 1), animate=False)


class SmemtopApp(App):
    """Main smemtop application."""

    TITLE = "smemtop"
    SUB_TITLE = "Per-process memory monitor"

    CSS = """
    Screen {
        layout: vertical;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        Binding("ctrl+c", "quit", "Quit", show=False, priority=True),
        ("n", "sort('n')", "Name"),
        ("r", "sort('r')", "RSS"),
        ("p", "sort('p')", "PSS"),
        ("u", "sort('u')", "USS"),
        ("s", "sort('s')", "Swap"),
    ]

    def __init__(
        self, config: Config | None = None, builder: CollectionBuilder | None = None
    ) -> None:
        """
        Initialize the SmemtopApp.

        Args:
            config: Settings; defaults are used when omitted.
            builder: Collection builder; one with a fresh OwnerCache by default.
        """
        super().__init__()
        self._settings = config or Config()
        self._builder = builder or CollectionBuilder(Scraper(OwnerCache()))
        self._controller: Controller | None = None
        self._scan_failed = False

    @property
    def controller(self) -> Controller | None:
        """The refresh controller, available once the app is mounted."""
        return self._controller

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield HeaderStats(id="header-stats")
        yield ProcessTable()
        yield Footer()

    def on_mount(self) -> None:
        """Run the first scan and start the refresh timer."""
        self._controller = Controller(
            self._builder,
            proc_root=self._settings.proc_root,
            sort_key=self._settings.sort_key,
            size=(self.size.width, self.size.height),
        )
        self._redraw()
        self.set_interval(self._settings.refresh_interval, self._tick)

    def _tick(self) -> None:
        self._dispatch(Tick())

    def on_resize(self, event: events.Resize) -> None:
        """Re-lay the current table for the new terminal size."""
        self._dispatch(Resize(event.size.width, event.size.height))

    def action_sort(self, key: str) -> None:
        """Handle sort bindings."""
        self._dispatch(KeyPress(key))

    def action_quit(self) -> None:
        """Handle quit action."""
        self._dispatch(Quit())

    def _dispatch(self, event: Event) -> None:
        if self._controller is None:
            return
        if self._controller.dispatch(event) is State.STOPPED:
            self.exit()
            return
        self._redraw()

    def _redraw(self) -> None:
        """Draw the controller's grid and refresh the header."""
        controller = self._controller
        if controller is None:
            return
        self.query_one(ProcessTable).show_grid(controller.grid, controller.size[0])
        self.query_one("#header-stats", HeaderStats).update_stats(
            read_system_memory(), controller.sort_key.value.upper()
        )
        failed = controller.last_error is not None
        if failed and not self._scan_failed:
            self.notify(f"Cannot read {self._settings.proc_root}", severity="error")
        self._scan_failed = failed
