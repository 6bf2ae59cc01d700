"""Data models for smemtop."""

from dataclasses import dataclass
from enum import Enum


class SortKey(Enum):
    """Sort keys for the process table."""

    NAME = "name"
    RSS = "rss"
    PSS = "pss"
    USS = "uss"
    SWAP = "swap"


DEFAULT_SORT_KEY = SortKey.RSS


@dataclass(slots=True, frozen=True)
class ProcessSnapshot:
    """Immutable snapshot of one process' memory use."""

    pid: int
    name: str
    owner: str
    command: str
    rss: int  # kB
    pss: int  # kB
    uss: int  # kB, Private_Clean + Private_Dirty
    swap: int  # kB, SwapPss (or Swap on older kernels)
