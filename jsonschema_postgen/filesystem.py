"""
Minimal virtual filesystem abstraction used by the batch flattener. A
filesystem only needs to enumerate and read files. Write-back is an optional
capability, detected at runtime by checking for WritableSchemaFS.
"""

# Standard
from typing import Dict, Iterator, Optional
import abc
import os
import stat

# First Party
import alog

log = alog.use_channel("VFS")

## Globals #####################################################################

DEFAULT_FILE_MODE = 0o644


## Interface ###################################################################


class SchemaFS(abc.ABC):
    """Read-only view of a tree of files addressed by forward-slash paths"""

    @abc.abstractmethod
    def walk(self) -> Iterator[str]:
        """Yield the relative path of every file, recursively, in lexical
        order within each directory
        """

    @abc.abstractmethod
    def read_bytes(self, path: str) -> bytes:
        """Read the full content of the file at path"""

    @abc.abstractmethod
    def stat_mode(self, path: str) -> int:
        """Get the permission bits of the file at path"""


class WritableSchemaFS(SchemaFS):
    """A SchemaFS that also supports writing files back"""

    @abc.abstractmethod
    def write_bytes(self, path: str, data: bytes, mode: int) -> None:
        """Replace the content of the file at path and apply mode"""


## Implementations #############################################################


class DirFS(SchemaFS):
    """Read-only filesystem rooted at an on-disk directory"""

    def __init__(self, root: str):
        self.root = root

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.root!r})"

    def walk(self) -> Iterator[str]:
        yield from self._walk_dir("")

    def read_bytes(self, path: str) -> bytes:
        with open(self._full_path(path), "rb") as handle:
            return handle.read()

    def stat_mode(self, path: str) -> int:
        return stat.S_IMODE(os.stat(self._full_path(path)).st_mode)

    def _full_path(self, path: str) -> str:
        return os.path.join(self.root, *path.split("/"))

    def _walk_dir(self, rel_dir: str) -> Iterator[str]:
        abs_dir = self._full_path(rel_dir) if rel_dir else self.root
        for entry in sorted(os.scandir(abs_dir), key=lambda entry: entry.name):
            rel_path = f"{rel_dir}/{entry.name}" if rel_dir else entry.name
            if entry.is_dir(follow_symlinks=False):
                yield from self._walk_dir(rel_path)
            else:
                yield rel_path


class WritableDirFS(DirFS, WritableSchemaFS):
    """On-disk filesystem that writes updates back in place"""

    def write_bytes(self, path: str, data: bytes, mode: int) -> None:
        full_path = self._full_path(path)
        with open(full_path, "wb") as handle:
            handle.write(data)
        os.chmod(full_path, mode)


class MemoryFS(WritableSchemaFS):
    """In-memory filesystem, mostly useful for embedding and tests"""

    def __init__(
        self,
        files: Optional[Dict[str, bytes]] = None,
        modes: Optional[Dict[str, int]] = None,
    ):
        self.files = dict(files or {})
        self.modes = dict(modes or {})

    def walk(self) -> Iterator[str]:
        # Sorting segment lists gives the same order as a per-directory walk
        yield from sorted(self.files, key=lambda path: path.split("/"))

    def read_bytes(self, path: str) -> bytes:
        try:
            return self.files[path]
        except KeyError:
            raise FileNotFoundError(path)

    def stat_mode(self, path: str) -> int:
        if path not in self.files:
            raise FileNotFoundError(path)
        return self.modes.get(path, DEFAULT_FILE_MODE)

    def write_bytes(self, path: str, data: bytes, mode: int) -> None:
        log.debug4("Writing %d bytes to memory path %s", len(data), path)
        self.files[path] = data
        self.modes[path] = mode
