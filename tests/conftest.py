"""Shared test fixtures for smemtop."""

from pathlib import Path

import pytest

from smemtop.collection import CollectionBuilder
from smemtop.owners import OwnerCache
from smemtop.smaps import Scraper

from helpers import CountingResolver, FakeProc


@pytest.fixture
def fake_proc(tmp_path: Path) -> FakeProc:
    """An empty fake process root."""
    root = tmp_path / "proc"
    root.mkdir()
    return FakeProc(root)


@pytest.fixture
def resolver() -> CountingResolver:
    return CountingResolver()


@pytest.fixture
def builder(resolver: CountingResolver) -> CollectionBuilder:
    """A CollectionBuilder whose owner lookups never touch the user database."""
    return CollectionBuilder(Scraper(OwnerCache(resolver)))
