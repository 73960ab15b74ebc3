"""File descriptors — the open-file table and the per-process fd table.

In Unix, programs never touch inodes directly.  They hold a small
integer (the file descriptor) that indexes a per-process table; each
slot points at an **open file description** holding the cursors, and
that in turn points at the inode.

    fd 3  ──►  OpenFileDescription(read=0, write=5)  ──►  Inode #1

Key concepts:

- **File descriptor (fd)**: index into the fd table.  Slots 0, 1, 2 are
  reserved for stdin, stdout and stderr and are never handed out.
- **Open file description (OFD)**: read and write cursors plus the mode
  the file was opened with, bound to exactly one inode.
- **Fd table**: the user area of our single process.  It has a fixed
  number of slots; allocation always picks the lowest free one.
"""

from __future__ import annotations

from dataclasses import dataclass

from py_cvfs.fs.inode import Inode, Permission

FIRST_FD = 3

DEFAULT_PROCESS_NAME = "Myexe"


@dataclass
class OpenFileDescription:
    """Track an open file's cursors and mode.

    Not frozen: both offsets advance as data is read and written.
    """

    inode: Inode
    mode: Permission
    read_offset: int = 0
    write_offset: int = 0

    @property
    def inode_number(self) -> int:
        """Return the number of the bound inode."""
        return self.inode.inode_number


class FdTable:
    """Fixed-size table mapping fd numbers to open file descriptions."""

    def __init__(self, size: int, *, process_name: str = DEFAULT_PROCESS_NAME) -> None:
        """Create a table with ``size`` empty slots.

        Raises:
            ValueError: If the table leaves no room past the reserved slots.

        """
        if size <= FIRST_FD:
            msg = f"Fd table needs more than {FIRST_FD} slots, got {size}"
            raise ValueError(msg)
        self._slots: list[OpenFileDescription | None] = [None] * size
        self._process_name = process_name

    @property
    def process_name(self) -> str:
        """Return the name of the process owning this table."""
        return self._process_name

    @property
    def size(self) -> int:
        """Return the number of slots, reserved ones included."""
        return len(self._slots)

    def in_range(self, fd: int) -> bool:
        """Return True if ``fd`` is a valid index into the table."""
        return isinstance(fd, int) and 0 <= fd < len(self._slots)

    def find_free(self) -> int | None:
        """Return the lowest free fd at or above FIRST_FD, or None if full."""
        for fd in range(FIRST_FD, len(self._slots)):
            if self._slots[fd] is None:
                return fd
        return None

    def install(self, fd: int, ofd: OpenFileDescription) -> None:
        """Place an open file description into an empty slot.

        Raises:
            ValueError: If the slot is reserved, out of range or occupied.

        """
        if not FIRST_FD <= fd < len(self._slots) or self._slots[fd] is not None:
            msg = f"Cannot install into fd {fd}"
            raise ValueError(msg)
        self._slots[fd] = ofd

    def lookup(self, fd: int) -> OpenFileDescription | None:
        """Return the description at ``fd``, or None if the slot is empty."""
        if not self.in_range(fd):
            return None
        return self._slots[fd]

    def release(self, fd: int) -> OpenFileDescription:
        """Clear a slot and return what it held.

        Raises:
            ValueError: If the slot is empty.

        """
        ofd = self.lookup(fd)
        if ofd is None:
            msg = f"Bad file descriptor: {fd}"
            raise ValueError(msg)
        self._slots[fd] = None
        return ofd

    def find_by_name(self, name: str) -> int | None:
        """Return the first occupied fd whose inode is called ``name``."""
        for fd, ofd in enumerate(self._slots):
            if ofd is not None and ofd.inode.file_name == name:
                return fd
        return None

    def list_fds(self) -> dict[int, OpenFileDescription]:
        """Return a snapshot of every occupied slot."""
        return {fd: ofd for fd, ofd in enumerate(self._slots) if ofd is not None}

    def clear(self) -> None:
        """Empty every slot."""
        self._slots = [None] * len(self._slots)
