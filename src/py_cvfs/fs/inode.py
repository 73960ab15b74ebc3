"""Inodes, the super block, and the fixed-size inode table.

Classic Unix keeps a list of inodes on disk (the DILB, Disk Inode List
Block) and a super block that counts how many of them are still free.
Our simulation keeps both in memory:

- **SuperBlock**: total and free inode counts.
- **Inode**: one potential file.  A free inode has no name and no data
  buffer; a regular inode owns a ``bytearray`` of ``size_limit`` bytes.
- **InodeTable**: every inode is created at boot and lives until
  shutdown.  Slots are reset and reused, never destroyed.

The table is a plain list indexed by ``inode_number - 1`` so lookup by
number is O(1) and iteration is always in inode order.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import IntEnum, IntFlag


class FileType(IntEnum):
    """The state of an inode slot."""

    FREE = 0
    REGULAR = 1
    SPECIAL = 2  # reserved, never produced


class Permission(IntFlag):
    """Three-bit permission mask.

    Only READ, WRITE and READ | WRITE are accepted when creating a file.
    EXECUTE is reserved.
    """

    NONE = 0
    READ = 1
    WRITE = 2
    EXECUTE = 4


VALID_CREATE_PERMISSIONS: frozenset[int] = frozenset(
    {Permission.READ, Permission.WRITE, Permission.READ | Permission.WRITE}
)


@dataclass
class SuperBlock:
    """Track how many inodes exist and how many are free."""

    total_inodes: int
    free_inodes: int

    @property
    def used_inodes(self) -> int:
        """Return the number of inodes holding a regular file."""
        return self.total_inodes - self.free_inodes


@dataclass(frozen=True)
class InodeInfo:
    """Read-only snapshot of an inode's metadata (returned by stat)."""

    inode_number: int
    file_name: str
    file_type: FileType
    size_limit: int
    actual_size: int
    reference_count: int
    permission: Permission


@dataclass
class Inode:
    """The metadata record for one file slot.

    ``buffer`` is not None exactly when ``file_type`` is REGULAR.  Only
    ``allocate`` and ``release`` change that, so the two can never drift.
    """

    inode_number: int
    file_name: str = ""
    file_type: FileType = FileType.FREE
    size_limit: int = 0
    actual_size: int = 0
    reference_count: int = 0
    permission: Permission = Permission.NONE
    buffer: bytearray | None = None

    @property
    def is_free(self) -> bool:
        """Return True if the slot holds no file."""
        return self.file_type is FileType.FREE

    @property
    def is_regular(self) -> bool:
        """Return True if the slot holds a regular file."""
        return self.file_type is FileType.REGULAR

    def allocate(self, name: str, permission: Permission, *, size_limit: int) -> None:
        """Turn a free slot into a regular file with a fresh, zeroed buffer.

        Raises:
            RuntimeError: If the inode is already in use.

        """
        if not self.is_free:
            msg = f"Inode {self.inode_number} is already in use"
            raise RuntimeError(msg)
        self.file_name = name
        self.size_limit = size_limit
        self.actual_size = 0
        self.file_type = FileType.REGULAR
        self.reference_count = 1
        self.permission = permission
        self.buffer = bytearray(size_limit)

    def release(self) -> None:
        """Drop the data buffer and reset every field to the free state."""
        self.buffer = None
        self.file_name = ""
        self.file_type = FileType.FREE
        self.size_limit = 0
        self.actual_size = 0
        self.reference_count = 0
        self.permission = Permission.NONE

    def to_info(self) -> InodeInfo:
        """Create a read-only snapshot of this inode."""
        return InodeInfo(
            inode_number=self.inode_number,
            file_name=self.file_name,
            file_type=self.file_type,
            size_limit=self.size_limit,
            actual_size=self.actual_size,
            reference_count=self.reference_count,
            permission=self.permission,
        )


class InodeTable:
    """Fixed-size array of inodes numbered ``1..size``."""

    def __init__(self, size: int) -> None:
        """Pre-allocate ``size`` free inodes."""
        self._inodes: list[Inode] = [Inode(inode_number=n) for n in range(1, size + 1)]

    def __len__(self) -> int:
        """Return the number of inode slots."""
        return len(self._inodes)

    def __iter__(self) -> Iterator[Inode]:
        """Iterate over every slot in inode-number order."""
        return iter(self._inodes)

    def find_free(self) -> Inode | None:
        """Return the lowest-numbered free inode, or None."""
        return next((inode for inode in self._inodes if inode.is_free), None)

    def find_regular(self, name: str) -> Inode | None:
        """Return the regular inode called ``name``, or None."""
        return next(
            (inode for inode in self._inodes if inode.is_regular and inode.file_name == name),
            None,
        )

    def release_all(self) -> None:
        """Reset every slot to free (used on shutdown)."""
        for inode in self._inodes:
            inode.release()
