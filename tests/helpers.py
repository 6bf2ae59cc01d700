"""Test helpers shared by the smemtop test modules."""

from pathlib import Path

from smemtop.models import ProcessSnapshot

SMAPS_BASIC = """\
00400000-004b8000 r-xp 00000000 fd:00 11143998     /usr/bin/bash
Size:                736 kB
Rss:                 100 kB
Pss:                  80 kB
Shared_Clean:         50 kB
Private_Clean:        20 kB
Private_Dirty:        30 kB
Swap:                  9 kB
SwapPss:               5 kB
"""


def make_smaps(rss: int = 0, pss: int = 0, clean: int = 0, dirty: int = 0, swap: int = 0) -> str:
    """Build a one-mapping smaps blob with the given kB values."""
    return (
        "7f0000000000-7f0000001000 rw-p 00000000 00:00 0\n"
        f"Rss:            {rss} kB\n"
        f"Pss:            {pss} kB\n"
        f"Private_Clean:  {clean} kB\n"
        f"Private_Dirty:  {dirty} kB\n"
        f"SwapPss:        {swap} kB\n"
    )


class FakeProc:
    """Writes /proc-like process directories under a temporary root."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def add(
        self,
        pid: int | str,
        name: str = "proc",
        cmdline: bytes = b"/bin/proc\0",
        smaps: str | None = SMAPS_BASIC,
    ) -> Path:
        proc_dir = self.root / str(pid)
        proc_dir.mkdir()
        (proc_dir / "stat").write_text(f"{pid} ({name}) S 1 1 1 0 -1 4194304")
        (proc_dir / "cmdline").write_bytes(cmdline)
        if smaps is not None:
            (proc_dir / "smaps").write_text(smaps)
        return proc_dir


class CountingResolver:
    """Owner resolver that records every uid it is asked for."""

    def __init__(self, names: dict[int, str] | None = None, default: str | None = "tester") -> None:
        self.names = names or {}
        self.default = default
        self.calls: list[int] = []

    def __call__(self, uid: int) -> str:
        self.calls.append(uid)
        if uid in self.names:
            return self.names[uid]
        if self.default is None:
            raise KeyError(f"getpwuid(): uid not found: {uid}")
        return self.default


def make_snapshot(**overrides) -> ProcessSnapshot:
    """Create a ProcessSnapshot for testing, overriding any field."""
    fields = dict(
        pid=123,
        name="bash",
        owner="tester",
        command="bash -l",
        rss=100,
        pss=80,
        uss=50,
        swap=5,
    )
    fields.update(overrides)
    return ProcessSnapshot(**fields)
