import os
import threading
from contextlib import contextmanager
from typing import Dict, List

class PathLocks:
    """
    One lock per resolved file path, so a decode -> blur -> encode pass or a
    restore never interleaves with another write to the same file.
    An entry lives only while someone holds or waits for it.
    """

    def __init__(self):
        self._guard = threading.Lock()
        # key -> [lock, number of holders and waiters]
        self._locks: Dict[str, List] = {}

    def active(self) -> int:
        """Number of paths currently held or waited on."""
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, path):
        key = os.path.realpath(os.fspath(path))
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = [threading.Lock(), 0]
            entry[1] += 1

        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]
