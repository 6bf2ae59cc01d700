"""Table formatting for smemtop."""

from smemtop.models import ProcessSnapshot

HEADER = ["PID", "Name", "User", "Swap", "USS", "PSS", "RSS", "Command"]

# Widths of every column but Command, which takes what is left
FIXED_WIDTHS = [6, 18, 10, 8, 8, 8, 8]
FIXED_TOTAL = sum(FIXED_WIDTHS)


def command_width(width: int) -> int:
    """Space left for the Command column in a terminal of the given width."""
    return max(width - FIXED_TOTAL, 0)


def column_widths(width: int) -> list[int]:
    """Widths of all eight columns for a terminal of the given width."""
    return [*FIXED_WIDTHS, command_width(width)]


def format_table(processes: list[ProcessSnapshot], width: int) -> list[list[str]]:
    """
    Format processes as a grid of text cells.

    The grid starts with a header row and an underline row, followed by one
    row per process. Command is clipped to the space the terminal leaves.
    """
    clip = command_width(width)
    grid = [list(HEADER), ["-" * len(title) for title in HEADER]]
    for proc in processes:
        grid.append(
            [
                str(proc.pid),
                proc.name,
                proc.owner,
                str(proc.swap),
                str(proc.uss),
                str(proc.pss),
                str(proc.rss),
                proc.command[:clip],
            ]
        )
    return grid


def render_lines(grid: list[list[str]]) -> list[str]:
    """Lay a grid out as plain text lines, numbers right-aligned."""
    lines = []
    for row in grid:
        pid, name, user, *numbers, command = row
        cells = [
            f"{pid:>{FIXED_WIDTHS[0] - 1}}",
            f"{name[:FIXED_WIDTHS[1] - 1]:<{FIXED_WIDTHS[1] - 1}}",
            f"{user[:FIXED_WIDTHS[2] - 1]:<{FIXED_WIDTHS[2] - 1}}",
            *(f"{number:>{FIXED_WIDTHS[3] - 1}}" for number in numbers),
            command,
        ]
        lines.append(" ".join(cells).rstrip())
    return lines
