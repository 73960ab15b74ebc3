"""The virtual file system — inode bookkeeping under a fixed capacity.

A ``FileSystem`` owns three structures that must always agree:

- the **super block**, counting free inodes;
- the **inode table**, one slot per possible file;
- the **fd table**, mapping descriptors to open file descriptions.

Every public operation checks all of its preconditions first and only
then mutates, so a rejected call leaves all three structures exactly as
they were.  Rejections are raised as ``VfsError`` subclasses; the
system-call layer turns them into error codes.

There is no ``open`` or ``close``: ``create_file`` hands back a
descriptor that stays live until ``unlink_file`` tears the file down.

Why fixed sizes?
    The point of the model is to watch resources run out.  Five inodes
    and a fifty-byte file limit make exhaustion easy to reach by hand.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, NamedTuple

from py_cvfs.fs.errors import (
    FileAlreadyExistsError,
    FileNotExistError,
    InsufficientDataError,
    InsufficientSpaceError,
    InvalidParameterError,
    MaxFilesOpenError,
    NoFreeInodesError,
    PermissionDeniedError,
)
from py_cvfs.fs.fd import DEFAULT_PROCESS_NAME, FIRST_FD, FdTable, OpenFileDescription
from py_cvfs.fs.inode import (
    VALID_CREATE_PERMISSIONS,
    InodeInfo,
    InodeTable,
    Permission,
    SuperBlock,
)
from py_cvfs.logging import LogLevel

if TYPE_CHECKING:
    from collections.abc import Buffer, Iterator

    from py_cvfs.logging import Logger

MAX_FILE_SIZE = 50
MAX_OPEN_FILES = 20
MAX_INODES = 5

_LOG_SOURCE = "vfs"


@dataclass(frozen=True)
class FsLimits:
    """The three capacities a caller and the file system agree on."""

    max_inodes: int = MAX_INODES
    max_open_files: int = MAX_OPEN_FILES
    max_file_size: int = MAX_FILE_SIZE

    def __post_init__(self) -> None:
        """Reject capacities the model cannot work with."""
        if self.max_inodes < 1:
            msg = f"max_inodes must be at least 1, got {self.max_inodes}"
            raise ValueError(msg)
        if self.max_file_size < 1:
            msg = f"max_file_size must be at least 1, got {self.max_file_size}"
            raise ValueError(msg)
        if self.max_open_files <= FIRST_FD:
            msg = f"max_open_files must exceed {FIRST_FD}, got {self.max_open_files}"
            raise ValueError(msg)


class FileListing(NamedTuple):
    """One line of ``ls``: inode number, name and bytes stored."""

    inode_number: int
    file_name: str
    actual_size: int


class FileSystem:
    """In-memory file system context with a fixed number of inodes.

    Constructing the object is the boot sequence: the super block is
    filled, every inode is created free, and the fd table starts empty.
    """

    def __init__(
        self,
        *,
        limits: FsLimits | None = None,
        process_name: str = DEFAULT_PROCESS_NAME,
        logger: Logger | None = None,
    ) -> None:
        """Create a freshly booted file system.

        Args:
            limits: Capacities; defaults to five inodes, twenty fds, fifty bytes.
            process_name: Name recorded in the user area.
            logger: Optional log buffer for file events.

        """
        self._limits = limits if limits is not None else FsLimits()
        self._superblock = SuperBlock(
            total_inodes=self._limits.max_inodes,
            free_inodes=self._limits.max_inodes,
        )
        self._inodes = InodeTable(self._limits.max_inodes)
        self._fd_table = FdTable(self._limits.max_open_files, process_name=process_name)
        self._logger = logger

    # -- Read-only views -------------------------------------------------------

    @property
    def limits(self) -> FsLimits:
        """Return the capacities this file system was built with."""
        return self._limits

    @property
    def superblock(self) -> SuperBlock:
        """Return a copy of the super block counters."""
        return replace(self._superblock)

    @property
    def inodes(self) -> tuple[InodeInfo, ...]:
        """Return snapshots of every inode slot in inode order."""
        return tuple(inode.to_info() for inode in self._inodes)

    @property
    def fd_table(self) -> FdTable:
        """Return the descriptor table of the session."""
        return self._fd_table

    # -- Core operations -------------------------------------------------------

    def file_exists(self, name: str) -> bool:
        """Check whether a regular file called ``name`` exists."""
        return self._inodes.find_regular(name) is not None

    def create_file(self, name: str, permission: int) -> int:
        """Create a regular file and return its descriptor.

        Args:
            name: The file name (non-empty).
            permission: 1 (read), 2 (write) or 3 (read + write).

        Returns:
            The descriptor bound to the new file (always >= 3).

        Raises:
            InvalidParameterError: Empty name or unsupported permission.
            NoFreeInodesError: Every inode is in use.
            FileAlreadyExistsError: The name is taken.
            MaxFilesOpenError: The fd table is full.

        """
        if not isinstance(name, str) or not name:
            msg = "File name must be a non-empty string"
            raise InvalidParameterError(msg)
        if not _is_count(permission) or permission not in VALID_CREATE_PERMISSIONS:
            msg = f"Invalid permission: {permission}"
            raise InvalidParameterError(msg)
        if self._superblock.free_inodes == 0:
            msg = "No free inodes"
            raise NoFreeInodesError(msg)
        if self.file_exists(name):
            msg = f"File already exists: {name}"
            raise FileAlreadyExistsError(msg)

        inode = self._inodes.find_free()
        if inode is None:
            msg = "No free inodes"
            raise NoFreeInodesError(msg)

        fd = self._fd_table.find_free()
        if fd is None:
            msg = "Max opened files limit reached"
            raise MaxFilesOpenError(msg)

        mode = Permission(permission)
        inode.allocate(name, mode, size_limit=self._limits.max_file_size)
        self._fd_table.install(fd, OpenFileDescription(inode=inode, mode=mode))
        self._superblock.free_inodes -= 1

        self._log(
            LogLevel.INFO,
            f"created {name} (inode {inode.inode_number}, mode {mode.value})",
            fd=fd,
        )
        return fd

    def write_file(self, fd: int, data: Buffer | str, size: int | None = None) -> int:
        """Append bytes at the descriptor's write offset.

        Args:
            fd: Descriptor returned by ``create_file``.
            data: Source bytes (text is encoded as UTF-8).
            size: How many leading bytes of ``data`` to write; defaults to all.

        Returns:
            The number of bytes written.

        Raises:
            InvalidParameterError: Bad fd index or size.
            FileNotExistError: The fd slot is empty.
            PermissionDeniedError: The file is not writable.
            InsufficientSpaceError: The write would pass the size limit.

        """
        if not self._fd_table.in_range(fd):
            msg = f"Descriptor out of range: {fd}"
            raise InvalidParameterError(msg)
        source = _as_bytes_view(data)
        count = len(source) if size is None else size
        if not _is_count(count) or not 0 <= count <= len(source):
            msg = f"Invalid write size: {count!r}"
            raise InvalidParameterError(msg)
        ofd = self._require_open(fd)
        inode = ofd.inode
        if not inode.permission & Permission.WRITE:
            msg = f"Unable to write as there is no permission: {inode.file_name}"
            raise PermissionDeniedError(msg)
        if inode.size_limit - ofd.write_offset < count:
            msg = f"Unable to write as there is no space: {inode.file_name}"
            raise InsufficientSpaceError(msg)

        assert inode.buffer is not None  # noqa: S101
        start = ofd.write_offset
        inode.buffer[start : start + count] = source[:count]
        ofd.write_offset += count
        inode.actual_size += count

        self._log(LogLevel.DEBUG, f"wrote {count} bytes to {inode.file_name}", fd=fd)
        return count

    def read_file(self, fd: int, destination: Buffer, size: int) -> int:
        """Copy bytes from the descriptor's read offset into ``destination``.

        The bound is the file's fixed size limit, not the bytes written so
        far: reading past the last write returns the buffer's zero fill.

        Args:
            fd: Descriptor returned by ``create_file``.
            destination: A writable buffer of at least ``size`` bytes.
            size: Number of bytes to read (positive).

        Returns:
            The number of bytes read.

        Raises:
            InvalidParameterError: Bad fd index, size or destination.
            FileNotExistError: The fd slot is empty.
            PermissionDeniedError: The file is not readable.
            InsufficientDataError: The read would pass the size limit.

        """
        if not self._fd_table.in_range(fd):
            msg = f"Descriptor out of range: {fd}"
            raise InvalidParameterError(msg)
        if destination is None:
            msg = "Destination buffer is required"
            raise InvalidParameterError(msg)
        target = _as_bytes_view(destination)
        if target.readonly:
            msg = "Destination buffer is read-only"
            raise InvalidParameterError(msg)
        if not _is_count(size) or size <= 0 or len(target) < size:
            msg = f"Invalid read size: {size!r}"
            raise InvalidParameterError(msg)
        target[:size] = self._read(fd, size)
        return size

    def read_bytes(self, fd: int, size: int) -> bytes:
        """Read ``size`` bytes from the descriptor's read offset.

        Same checks and cursor movement as ``read_file``.  The result is
        built only after every check has passed.

        Raises:
            InvalidParameterError: Bad fd index or size.
            FileNotExistError: The fd slot is empty.
            PermissionDeniedError: The file is not readable.
            InsufficientDataError: The read would pass the size limit.

        """
        if not self._fd_table.in_range(fd):
            msg = f"Descriptor out of range: {fd}"
            raise InvalidParameterError(msg)
        if not _is_count(size) or size <= 0:
            msg = f"Invalid read size: {size!r}"
            raise InvalidParameterError(msg)
        return self._read(fd, size)

    def unlink_file(self, name: str) -> None:
        """Delete a file, returning its inode and descriptor to the pool.

        Only the first descriptor bound to ``name`` is torn down.

        Raises:
            InvalidParameterError: Empty or missing name.
            FileNotExistError: No regular file has that name.

        """
        if not isinstance(name, str) or not name:
            msg = "File name must be a non-empty string"
            raise InvalidParameterError(msg)
        inode = self._inodes.find_regular(name)
        if inode is None:
            msg = f"Unable to delete as there is no such file: {name}"
            raise FileNotExistError(msg)

        fd = self._fd_table.find_by_name(name)
        try:
            if fd is not None:
                self._fd_table.release(fd)
        finally:
            inode.release()
            self._superblock.free_inodes += 1

        self._log(LogLevel.INFO, f"unlinked {name} (inode {inode.inode_number})", fd=fd)

    def list_files(self) -> Iterator[FileListing]:
        """Return a one-shot iterator over every regular file.

        The listing is captured when this method is called; later
        creates and unlinks do not affect an iterator already handed out.
        """
        snapshot = [
            FileListing(inode.inode_number, inode.file_name, inode.actual_size)
            for inode in self._inodes
            if inode.is_regular
        ]
        return iter(snapshot)

    # -- Inspection ------------------------------------------------------------

    def stat(self, name: str) -> InodeInfo:
        """Return metadata for the regular file called ``name``.

        Raises:
            FileNotExistError: No regular file has that name.

        """
        inode = self._inodes.find_regular(name)
        if inode is None:
            msg = f"File not found: {name}"
            raise FileNotExistError(msg)
        return inode.to_info()

    def fstat(self, fd: int) -> InodeInfo:
        """Return metadata for the inode bound to ``fd``."""
        return self.describe(fd).inode.to_info()

    def describe(self, fd: int) -> OpenFileDescription:
        """Return the open file description at ``fd``.

        Raises:
            InvalidParameterError: The fd is out of range.
            FileNotExistError: The slot is empty.

        """
        if not self._fd_table.in_range(fd):
            msg = f"Descriptor out of range: {fd}"
            raise InvalidParameterError(msg)
        return self._require_open(fd)

    def reset(self) -> None:
        """Release every buffer and descriptor, as at shutdown."""
        self._fd_table.clear()
        self._inodes.release_all()
        self._superblock.free_inodes = self._superblock.total_inodes

    # -- Helpers ---------------------------------------------------------------

    def _require_open(self, fd: int) -> OpenFileDescription:
        ofd = self._fd_table.lookup(fd)
        if ofd is None:
            msg = f"There is no such file: fd {fd}"
            raise FileNotExistError(msg)
        return ofd

    def _read(self, fd: int, size: int) -> bytes:
        ofd = self._require_open(fd)
        inode = ofd.inode
        if not inode.permission & Permission.READ:
            msg = f"Permission denied: {inode.file_name}"
            raise PermissionDeniedError(msg)
        if inode.size_limit - ofd.read_offset < size:
            msg = f"Insufficient data: {inode.file_name}"
            raise InsufficientDataError(msg)

        assert inode.buffer is not None  # noqa: S101
        start = ofd.read_offset
        data = bytes(inode.buffer[start : start + size])
        ofd.read_offset += size

        self._log(LogLevel.DEBUG, f"read {size} bytes from {inode.file_name}", fd=fd)
        return data

    def _log(self, level: LogLevel, message: str, *, fd: int | None = None) -> None:
        if self._logger is not None:
            self._logger.log(level, message, source=_LOG_SOURCE, fd=fd)


def _as_bytes_view(data: Buffer | str) -> memoryview:
    """Return a flat byte view of ``data``; text is encoded as UTF-8.

    Raises:
        InvalidParameterError: If ``data`` is not a contiguous buffer.

    """
    if isinstance(data, str):
        data = data.encode()
    try:
        return memoryview(data).cast("B")
    except TypeError as e:
        msg = f"Expected a bytes-like buffer, got {type(data).__name__}"
        raise InvalidParameterError(msg) from e


def _is_count(value: object) -> bool:
    """Return True for a plain int (``bool`` is not a byte count)."""
    return isinstance(value, int) and not isinstance(value, bool)
