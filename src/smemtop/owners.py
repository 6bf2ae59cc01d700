"""Owner (uid -> user name) resolution for smemtop."""

import pwd
from collections.abc import Callable


def lookup_username(uid: int) -> str:
    """Resolve a uid through the system user database.

    Raises:
        KeyError: If the uid has no passwd entry.
    """
    return pwd.getpwuid(uid).pw_name


class OwnerCache:
    """
    Insertion-only cache from numeric owner id to user name.

    One instance is shared by every scrape for the lifetime of the program.
    Entries are never evicted, so each uid hits the user database at most once.
    """

    def __init__(self, resolver: Callable[[int], str] = lookup_username) -> None:
        """
        Initialize the OwnerCache.

        Args:
            resolver: Called with a uid on a cache miss. Must raise KeyError
                when the uid cannot be resolved.
        """
        self._resolver = resolver
        self._names: dict[int, str] = {}

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, uid: object) -> bool:
        return uid in self._names

    def lookup(self, uid: int) -> str | None:
        """Return the cached name for uid, or None on a miss."""
        return self._names.get(uid)

    def insert(self, uid: int, name: str) -> None:
        """Store a resolved name. Existing entries are kept as they are."""
        self._names.setdefault(uid, name)

    def resolve(self, uid: int) -> str:
        """
        Return the user name for uid, resolving and caching it on a miss.

        Raises:
            KeyError: If the uid is not cached and cannot be resolved.
        """
        name = self.lookup(uid)
        if name is None:
            name = self._resolver(uid)
            self.insert(uid, name)
        return name
