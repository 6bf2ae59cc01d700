"""Tests for collection building and sorting."""

import pytest

from smemtop.collection import CollectionBuilder, is_pid, sort_processes
from smemtop.models import SortKey
from smemtop.owners import OwnerCache
from smemtop.smaps import Scraper

from helpers import CountingResolver, make_smaps, make_snapshot


@pytest.mark.parametrize("name", ["1", "12", "0", "4194304"])
def test_is_pid_accepts_digits(name):
    assert is_pid(name)


@pytest.mark.parametrize("name", ["12a", "-1", "", "self", " 12", "+3", "1.5", "１２"])
def test_is_pid_rejects_others(name):
    assert not is_pid(name)


class TestSortProcesses:
    """Tests for sort_processes."""

    def setup_method(self):
        self.processes = [
            make_snapshot(pid=1, name="zsh", rss=10, pss=300, uss=5, swap=0),
            make_snapshot(pid=2, name="bash", rss=30, pss=100, uss=50, swap=7),
            make_snapshot(pid=3, name="init", rss=20, pss=200, uss=1, swap=3),
        ]

    def pids(self, key):
        return [p.pid for p in sort_processes(self.processes, key)]

    def test_name_ascending(self):
        assert self.pids(SortKey.NAME) == [2, 3, 1]

    def test_rss_descending(self):
        assert self.pids(SortKey.RSS) == [2, 3, 1]

    def test_pss_descending(self):
        assert self.pids(SortKey.PSS) == [1, 3, 2]

    def test_uss_descending(self):
        assert self.pids(SortKey.USS) == [2, 1, 3]

    def test_swap_descending(self):
        assert self.pids(SortKey.SWAP) == [2, 3, 1]

    def test_default_is_rss(self):
        assert [p.pid for p in sort_processes(self.processes)] == self.pids(SortKey.RSS)

    def test_ties_are_stable(self):
        processes = [make_snapshot(pid=pid, rss=10) for pid in (5, 3, 9)]
        assert [p.pid for p in sort_processes(processes, SortKey.RSS)] == [5, 3, 9]

    def test_input_not_mutated(self):
        before = list(self.processes)
        sort_processes(self.processes, SortKey.NAME)
        assert self.processes == before


class TestCollectionBuilder:
    """Tests for CollectionBuilder.build."""

    def test_end_to_end_row(self, fake_proc, builder):
        fake_proc.add(123, name="bash", cmdline=b"bash\0-l\0")

        processes = builder.build(fake_proc.root)

        assert len(processes) == 1
        proc = processes[0]
        assert proc.pid == 123
        assert proc.name == "bash"
        assert proc.owner == "tester"
        assert (proc.swap, proc.uss, proc.pss, proc.rss) == (5, 50, 80, 100)
        assert proc.command == "bash -l"

    def test_non_pid_entries_ignored(self, fake_proc, builder):
        fake_proc.add(1)
        fake_proc.add("self")
        fake_proc.add("12a")
        (fake_proc.root / "meminfo").write_text("MemTotal: 1 kB\n")

        assert [p.pid for p in builder.build(fake_proc.root)] == [1]

    def test_empty_cmdline_excluded_before_scrape(self, fake_proc, resolver, builder):
        fake_proc.add(2, name="kthreadd", cmdline=b"", smaps=make_smaps(rss=999999))

        assert builder.build(fake_proc.root) == []
        # Excluded before population, so no owner lookup happened
        assert resolver.calls == []

    def test_vanished_process_skipped(self, fake_proc, builder):
        fake_proc.add(10)
        fake_proc.add(11, smaps=None)

        assert [p.pid for p in builder.build(fake_proc.root)] == [10]

    def test_owner_failure_skips_process(self, fake_proc):
        fake_proc.add(10)
        builder = CollectionBuilder(Scraper(OwnerCache(CountingResolver(default=None))))

        assert builder.build(fake_proc.root) == []

    def test_sorted_by_key(self, fake_proc, builder):
        fake_proc.add(1, name="b", smaps=make_smaps(rss=10, pss=30))
        fake_proc.add(2, name="a", smaps=make_smaps(rss=30, pss=10))
        fake_proc.add(3, name="c", smaps=make_smaps(rss=20, pss=20))

        assert [p.pid for p in builder.build(fake_proc.root)] == [2, 3, 1]
        assert [p.pid for p in builder.build(fake_proc.root, SortKey.PSS)] == [1, 3, 2]
        assert [p.pid for p in builder.build(fake_proc.root, SortKey.NAME)] == [2, 1, 3]

    def test_build_is_idempotent(self, fake_proc, builder):
        for pid in range(1, 6):
            fake_proc.add(pid, name=f"p{pid}", smaps=make_smaps(rss=pid * 7 % 5, pss=pid))

        assert builder.build(fake_proc.root) == builder.build(fake_proc.root)

    def test_owner_cache_shared_across_builds(self, fake_proc, resolver, builder):
        fake_proc.add(1)
        fake_proc.add(2)

        builder.build(fake_proc.root)
        builder.build(fake_proc.root)

        assert len(resolver.calls) == 1

    def test_unreadable_root_gives_empty_collection(self, tmp_path, builder):
        missing = tmp_path / "no-such-proc"

        assert builder.build(missing) == []
        assert isinstance(builder.last_error, OSError)

    def test_last_error_cleared_on_success(self, tmp_path, fake_proc, builder):
        builder.build(tmp_path / "missing")
        builder.build(fake_proc.root)

        assert builder.last_error is None
