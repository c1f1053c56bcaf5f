from __future__ import annotations

from abc import ABC, abstractmethod


class FileReader(ABC):
    @abstractmethod
    def read(self, path: str) -> bytes:
        """Return the contents of ``path``.

        Raises :class:`OSError` when the file cannot be read and
        :class:`ValueError` when ``path`` cannot name a file (e.g. a NUL byte).
        """


class LocalFileReader(FileReader):
    def read(self, path: str) -> bytes:
        with open(path, "rb") as fh:
            return fh.read()
