"""System-wide memory summary for the smemtop header."""

from dataclasses import dataclass

import psutil


@dataclass(slots=True, frozen=True)
class SystemMemory:
    """Snapshot of overall memory and swap use, in bytes."""

    memory_total: int
    memory_used: int
    memory_percent: float
    swap_total: int
    swap_used: int
    swap_percent: float


def read_system_memory() -> SystemMemory:
    """Collect memory and swap totals through psutil."""
    mem = psutil.virtual_memory()
    swap = psutil.swap_memory()
    return SystemMemory(
        memory_total=mem.total,
        memory_used=mem.used,
        memory_percent=mem.percent,
        swap_total=swap.total,
        swap_used=swap.used,
        swap_percent=swap.percent,
    )
