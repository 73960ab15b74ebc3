"""Tests for the virtual file system core.

The file system keeps three structures in step: the super block (free
inode count), the inode table, and the fd table.  Every test here uses
the classic capacities: five inodes, twenty descriptors, fifty bytes
per file.  After each operation the invariant

    free_inodes + regular inodes == MAX_INODES

must still hold, whether the operation succeeded or was rejected.
"""

import pytest

from py_cvfs.fs.errors import (
    ErrorCode,
    FileAlreadyExistsError,
    FileNotExistError,
    InsufficientDataError,
    InsufficientSpaceError,
    InvalidParameterError,
    MaxFilesOpenError,
    NoFreeInodesError,
    PermissionDeniedError,
)
from py_cvfs.fs.filesystem import (
    MAX_FILE_SIZE,
    MAX_INODES,
    MAX_OPEN_FILES,
    FileListing,
    FileSystem,
    FsLimits,
)
from py_cvfs.fs.inode import FileType, InodeInfo, Permission
from py_cvfs.logging import Logger, LogLevel

READ = 1
WRITE = 2
READ_WRITE = 3


def _assert_consistent(fs: FileSystem) -> None:
    """Check the super block agrees with the inode table."""
    regular = sum(1 for info in fs.inodes if info.file_type is FileType.REGULAR)
    assert fs.superblock.free_inodes + regular == MAX_INODES


def _bound_inode(fs: FileSystem, fd: int) -> InodeInfo:
    return fs.fstat(fd)


def _snapshot(fs: FileSystem) -> tuple[object, ...]:
    """Capture everything an operation could change."""
    fds = {
        fd: (ofd.inode_number, ofd.read_offset, ofd.write_offset, ofd.mode)
        for fd, ofd in fs.fd_table.list_fds().items()
    }
    return (fs.superblock, fs.inodes, fds)


# -- Boot ----------------------------------------------------------------------


class TestBoot:
    """Verify the state right after construction."""

    def test_all_inodes_free(self) -> None:
        """Every inode should start free and the super block should agree."""
        fs = FileSystem()
        assert fs.superblock.total_inodes == MAX_INODES
        assert fs.superblock.free_inodes == MAX_INODES
        assert all(info.file_type is FileType.FREE for info in fs.inodes)
        _assert_consistent(fs)

    def test_inodes_numbered_from_one(self) -> None:
        """Inodes should be numbered 1..MAX_INODES in table order."""
        fs = FileSystem()
        assert [info.inode_number for info in fs.inodes] == list(range(1, MAX_INODES + 1))

    def test_fd_table_empty(self) -> None:
        """No descriptor should be open at boot."""
        fs = FileSystem()
        assert fs.fd_table.list_fds() == {}
        assert fs.fd_table.size == MAX_OPEN_FILES

    def test_default_limits(self) -> None:
        """Default limits should be 5 inodes, 20 fds, 50 bytes."""
        limits = FileSystem().limits
        assert limits == FsLimits(max_inodes=5, max_open_files=20, max_file_size=50)

    def test_process_name_default(self) -> None:
        """The user area should belong to Myexe unless told otherwise."""
        assert FileSystem().fd_table.process_name == "Myexe"
        assert FileSystem(process_name="shell").fd_table.process_name == "shell"

    def test_rejects_bad_limits(self) -> None:
        """Limits that leave no usable inode or fd should be refused."""
        with pytest.raises(ValueError, match="max_inodes"):
            FsLimits(max_inodes=0)
        with pytest.raises(ValueError, match="max_open_files"):
            FsLimits(max_open_files=3)
        with pytest.raises(ValueError, match="max_file_size"):
            FsLimits(max_file_size=0)


# -- file_exists ------------------------------------------------------------


class TestFileExists:
    """Verify the existence check."""

    def test_false_on_empty_system(self) -> None:
        """Nothing exists before the first create."""
        assert not FileSystem().file_exists("a.txt")

    def test_true_after_create(self) -> None:
        """A created file should exist; other names should not."""
        fs = FileSystem()
        fs.create_file("a.txt", READ_WRITE)
        assert fs.file_exists("a.txt")
        assert not fs.file_exists("b.txt")

    def test_empty_name_never_exists(self) -> None:
        """Free inodes have empty names but must not count as files."""
        assert not FileSystem().file_exists("")


# -- create_file ------------------------------------------------------------


class TestCreateFile:
    """Verify file creation and its preconditions."""

    def test_returns_descriptor_from_three(self) -> None:
        """The first descriptor handed out should be 3."""
        fs = FileSystem()
        fd = fs.create_file("a.txt", READ_WRITE)
        first_fd = 3
        assert fd == first_fd

    def test_binds_regular_inode(self) -> None:
        """The bound inode should be regular, empty and carry the permission."""
        fs = FileSystem()
        fd = fs.create_file("a.txt", READ_WRITE)
        info = _bound_inode(fs, fd)
        assert info.file_type is FileType.REGULAR
        assert info.file_name == "a.txt"
        assert info.actual_size == 0
        assert info.size_limit == MAX_FILE_SIZE
        assert info.reference_count == 1
        assert info.permission == READ_WRITE
        assert fs.superblock.free_inodes == MAX_INODES - 1
        _assert_consistent(fs)

    def test_offsets_start_at_zero(self) -> None:
        """A new open file description starts both cursors at 0."""
        fs = FileSystem()
        fd = fs.create_file("a.txt", READ)
        ofd = fs.describe(fd)
        assert ofd.read_offset == 0
        assert ofd.write_offset == 0
        assert ofd.mode is Permission.READ

    def test_sequential_descriptors(self) -> None:
        """Consecutive creates should get 3, 4, 5."""
        fs = FileSystem()
        fds = [fs.create_file(f"f{i}", READ) for i in range(3)]
        assert fds == [3, 4, 5]

    def test_uses_lowest_free_inode(self) -> None:
        """After an unlink the freed inode should be reused first."""
        fs = FileSystem()
        fs.create_file("a", READ)
        fs.create_file("b", READ)
        fs.unlink_file("a")
        fd = fs.create_file("c", READ)
        assert _bound_inode(fs, fd).inode_number == 1

    def test_duplicate_rejected(self) -> None:
        """Creating the same name twice should fail without side effects."""
        fs = FileSystem()
        fs.create_file("a.txt", READ_WRITE)
        before = _snapshot(fs)
        with pytest.raises(FileAlreadyExistsError):
            fs.create_file("a.txt", READ_WRITE)
        assert _snapshot(fs) == before
        assert fs.superblock.free_inodes == MAX_INODES - 1

    @pytest.mark.parametrize("permission", [0, 4, 5, 7, -1])
    def test_invalid_permission(self, permission: int) -> None:
        """Only 1, 2 and 3 are accepted."""
        fs = FileSystem()
        with pytest.raises(InvalidParameterError):
            fs.create_file("a.txt", permission)
        assert fs.superblock.free_inodes == MAX_INODES

    def test_non_int_permission(self) -> None:
        """Strings, floats and bools are not permissions."""
        fs = FileSystem()
        for permission in ("3", 3.0, True):
            with pytest.raises(InvalidParameterError):
                fs.create_file("a.txt", permission)  # type: ignore[arg-type]

    def test_empty_name(self) -> None:
        """An empty name is an invalid parameter."""
        fs = FileSystem()
        with pytest.raises(InvalidParameterError):
            fs.create_file("", READ)

    def test_none_name(self) -> None:
        """A missing name is an invalid parameter."""
        fs = FileSystem()
        with pytest.raises(InvalidParameterError):
            fs.create_file(None, READ)  # type: ignore[arg-type]

    def test_name_checked_before_permission(self) -> None:
        """Both bad: the error still carries INVALID_PARAMETER."""
        fs = FileSystem()
        with pytest.raises(InvalidParameterError) as info:
            fs.create_file("", 9)
        assert info.value.code is ErrorCode.INVALID_PARAMETER

    def test_capacity_exhaustion(self) -> None:
        """Five files use every inode; the sixth create fails cleanly."""
        fs = FileSystem()
        for i in range(MAX_INODES):
            fs.create_file(f"f{i}.txt", READ_WRITE)
        assert fs.superblock.free_inodes == 0
        before = _snapshot(fs)
        with pytest.raises(NoFreeInodesError):
            fs.create_file("extra.txt", READ_WRITE)
        assert _snapshot(fs) == before
        _assert_consistent(fs)

    def test_no_free_inodes_checked_before_duplicate(self) -> None:
        """With the table full, even a duplicate name reports NO_FREE_INODES."""
        fs = FileSystem()
        for i in range(MAX_INODES):
            fs.create_file(f"f{i}", READ)
        with pytest.raises(NoFreeInodesError):
            fs.create_file("f0", READ)

    def test_fd_table_full(self) -> None:
        """When descriptors run out before inodes, MAX_FILES_OPEN is raised."""
        limits = FsLimits(max_inodes=10, max_open_files=5)
        fs = FileSystem(limits=limits)
        fs.create_file("a", READ)
        fs.create_file("b", READ)
        before = _snapshot(fs)
        with pytest.raises(MaxFilesOpenError):
            fs.create_file("c", READ)
        assert _snapshot(fs) == before
        assert not fs.file_exists("c")

    def test_logs_creation(self) -> None:
        """A create should leave an INFO entry from the vfs source."""
        logger = Logger()
        fs = FileSystem(logger=logger)
        fd = fs.create_file("a.txt", READ)
        entries = logger.filter(min_level=LogLevel.INFO, source="vfs")
        assert len(entries) == 1
        assert "a.txt" in entries[0].message
        assert entries[0].fd == fd


# -- write_file ---------------------------------------------------------------


class TestWriteFile:
    """Verify appends through a descriptor."""

    def test_write_returns_size(self) -> None:
        """Writing five bytes should report five and grow the file."""
        fs = FileSystem()
        fd = fs.create_file("a.txt", READ_WRITE)
        written = 5
        assert fs.write_file(fd, b"hello", 5) == written
        assert _bound_inode(fs, fd).actual_size == written
        assert fs.describe(fd).write_offset == written

    def test_size_defaults_to_data_length(self) -> None:
        """Omitting size writes the whole buffer."""
        fs = FileSystem()
        fd = fs.create_file("a.txt", WRITE)
        expected = 3
        assert fs.write_file(fd, b"abc") == expected

    def test_partial_size(self) -> None:
        """Only the leading ``size`` bytes are written."""
        fs = FileSystem()
        fd = fs.create_file("a.txt", READ_WRITE)
        fs.write_file(fd, b"hello world", 5)
        buf = bytearray(5)
        fs.read_file(fd, buf, 5)
        assert buf == b"hello"

    def test_text_is_encoded(self) -> None:
        """A str payload is stored as UTF-8."""
        fs = FileSystem()
        fd = fs.create_file("a.txt", READ_WRITE)
        fs.write_file(fd, "hi", 2)
        buf = bytearray(2)
        fs.read_file(fd, buf, 2)
        assert buf == b"hi"

    def test_appends_sequentially(self) -> None:
        """Two writes land one after the other."""
        fs = FileSystem()
        fd = fs.create_file("a.txt", READ_WRITE)
        fs.write_file(fd, b"abc")
        fs.write_file(fd, b"def")
        buf = bytearray(6)
        fs.read_file(fd, buf, 6)
        assert buf == b"abcdef"
        total = 6
        assert _bound_inode(fs, fd).actual_size == total

    def test_zero_length_write(self) -> None:
        """An empty write succeeds and changes nothing."""
        fs = FileSystem()
        fd = fs.create_file("a.txt", WRITE)
        assert fs.write_file(fd, b"") == 0
        assert _bound_inode(fs, fd).actual_size == 0

    def test_read_only_file_denied(self) -> None:
        """Writing to a read-only file fails and leaves the size at 0."""
        fs = FileSystem()
        fs.create_file("a.txt", READ_WRITE)
        fd = fs.create_file("b.txt", READ)
        with pytest.raises(PermissionDeniedError):
            fs.write_file(fd, b"x", 1)
        assert _bound_inode(fs, fd).actual_size == 0
        assert fs.describe(fd).write_offset == 0

    def test_overflow_rejected(self) -> None:
        """With 45 bytes written, a 10-byte write does not fit."""
        fs = FileSystem()
        fd = fs.create_file("a.txt", READ_WRITE)
        offset = 45
        fs.write_file(fd, b"x" * offset)
        with pytest.raises(InsufficientSpaceError):
            fs.write_file(fd, b"0123456789", 10)
        assert fs.describe(fd).write_offset == offset
        assert _bound_inode(fs, fd).actual_size == offset

    def test_exact_fit(self) -> None:
        """Filling the file to exactly the limit is allowed."""
        fs = FileSystem()
        fd = fs.create_file("a.txt", WRITE)
        assert fs.write_file(fd, b"x" * MAX_FILE_SIZE) == MAX_FILE_SIZE
        with pytest.raises(InsufficientSpaceError):
            fs.write_file(fd, b"y")

    @pytest.mark.parametrize("fd", [-1, MAX_OPEN_FILES, 100])
    def test_fd_out_of_range(self, fd: int) -> None:
        """Descriptors outside the table are invalid parameters."""
        fs = FileSystem()
        with pytest.raises(InvalidParameterError):
            fs.write_file(fd, b"x")

    @pytest.mark.parametrize("fd", [0, 1, 2, 3, MAX_OPEN_FILES - 1])
    def test_empty_slot(self, fd: int) -> None:
        """In-range but unused descriptors (reserved ones too) do not exist."""
        fs = FileSystem()
        with pytest.raises(FileNotExistError):
            fs.write_file(fd, b"x")

    @pytest.mark.parametrize("size", [-1, 6, 2.0, "2", True])
    def test_bad_size(self, size: object) -> None:
        """Size must be an int within the supplied data."""
        fs = FileSystem()
        fd = fs.create_file("a.txt", WRITE)
        before = _snapshot(fs)
        with pytest.raises(InvalidParameterError):
            fs.write_file(fd, b"hello", size)  # type: ignore[arg-type]
        assert _snapshot(fs) == before

    def test_non_buffer_data(self) -> None:
        """Data that is neither bytes-like nor text is rejected."""
        fs = FileSystem()
        fd = fs.create_file("a.txt", WRITE)
        with pytest.raises(InvalidParameterError):
            fs.write_file(fd, 42)  # type: ignore[arg-type]


# -- read_file ----------------------------------------------------------------


class TestReadFile:
    """Verify reads through a descriptor."""

    def test_round_trip(self) -> None:
        """Bytes written come back in order."""
        fs = FileSystem()
        fd = fs.create_file("a.txt", READ_WRITE)
        fs.write_file(fd, b"hello", 5)
        buf = bytearray(5)
        count = 5
        assert fs.read_file(fd, buf, 5) == count
        assert buf == b"hello"
        assert fs.describe(fd).read_offset == count

    def test_cursor_advances(self) -> None:
        """Consecutive reads continue where the last one stopped."""
        fs = FileSystem()
        fd = fs.create_file("a.txt", READ_WRITE)
        fs.write_file(fd, b"abcdef")
        first, second = bytearray(3), bytearray(3)
        fs.read_file(fd, first, 3)
        fs.read_file(fd, second, 3)
        assert (first, second) == (b"abc", b"def")

    def test_read_and_write_cursors_independent(self) -> None:
        """Reading does not move the write cursor."""
        fs = FileSystem()
        fd = fs.create_file("a.txt", READ_WRITE)
        fs.write_file(fd, b"abc")
        fs.read_file(fd, bytearray(2), 2)
        write_offset = 3
        assert fs.describe(fd).write_offset == write_offset

    def test_reads_past_written_bytes(self) -> None:
        """The bound is the size limit: unwritten bytes read back as zeros."""
        fs = FileSystem()
        fd = fs.create_file("a.txt", READ_WRITE)
        fs.write_file(fd, b"ab")
        buf = bytearray(5)
        count = 5
        assert fs.read_file(fd, buf, 5) == count
        assert buf == b"ab\x00\x00\x00"

    def test_read_beyond_limit(self) -> None:
        """Reading past the size limit reports insufficient data."""
        fs = FileSystem()
        fd = fs.create_file("a.txt", READ)
        fs.read_file(fd, bytearray(MAX_FILE_SIZE), MAX_FILE_SIZE)
        with pytest.raises(InsufficientDataError):
            fs.read_file(fd, bytearray(1), 1)
        assert fs.describe(fd).read_offset == MAX_FILE_SIZE

    def test_write_only_file_denied(self) -> None:
        """Reading from a write-only file fails."""
        fs = FileSystem()
        fd = fs.create_file("a.txt", WRITE)
        fs.write_file(fd, b"secret")
        with pytest.raises(PermissionDeniedError):
            fs.read_file(fd, bytearray(3), 3)
        assert fs.describe(fd).read_offset == 0

    @pytest.mark.parametrize("size", [0, -5, 2.0, "3", True])
    def test_non_positive_size(self, size: object) -> None:
        """Size must be a positive int."""
        fs = FileSystem()
        fd = fs.create_file("a.txt", READ)
        with pytest.raises(InvalidParameterError):
            fs.read_file(fd, bytearray(4), size)  # type: ignore[arg-type]
        assert fs.describe(fd).read_offset == 0

    def test_destination_too_small(self) -> None:
        """The destination must hold at least ``size`` bytes."""
        fs = FileSystem()
        fd = fs.create_file("a.txt", READ)
        with pytest.raises(InvalidParameterError):
            fs.read_file(fd, bytearray(2), 3)

    def test_missing_destination(self) -> None:
        """A None destination is an invalid parameter."""
        fs = FileSystem()
        fd = fs.create_file("a.txt", READ)
        with pytest.raises(InvalidParameterError):
            fs.read_file(fd, None, 3)  # type: ignore[arg-type]

    def test_read_only_destination(self) -> None:
        """Immutable bytes cannot receive data."""
        fs = FileSystem()
        fd = fs.create_file("a.txt", READ)
        with pytest.raises(InvalidParameterError):
            fs.read_file(fd, b"xxx", 3)

    def test_memoryview_destination(self) -> None:
        """Any writable buffer works, including a slice of a larger one."""
        fs = FileSystem()
        fd = fs.create_file("a.txt", READ_WRITE)
        fs.write_file(fd, b"xy")
        big = bytearray(b"----")
        fs.read_file(fd, memoryview(big)[1:3], 2)
        assert big == b"-xy-"

    def test_unoccupied_descriptor(self) -> None:
        """Reading an empty slot reports FILE_NOT_EXIST."""
        fs = FileSystem()
        with pytest.raises(FileNotExistError):
            fs.read_file(7, bytearray(1), 1)

    def test_out_of_range_descriptor(self) -> None:
        """Reading beyond the table is an invalid parameter."""
        fs = FileSystem()
        with pytest.raises(InvalidParameterError):
            fs.read_file(MAX_OPEN_FILES, bytearray(1), 1)


# -- read_bytes -----------------------------------------------------------------


class TestReadBytes:
    """Verify reads that build their own result."""

    def test_returns_bytes(self) -> None:
        """The bytes at the read cursor come back and the cursor moves."""
        fs = FileSystem()
        fd = fs.create_file("a.txt", READ_WRITE)
        fs.write_file(fd, b"hello")
        assert fs.read_bytes(fd, 4) == b"hell"
        count = 4
        assert fs.describe(fd).read_offset == count

    def test_shares_cursor_with_read_file(self) -> None:
        """Both read paths advance the same offset."""
        fs = FileSystem()
        fd = fs.create_file("a.txt", READ_WRITE)
        fs.write_file(fd, b"abcdef")
        fs.read_file(fd, bytearray(2), 2)
        assert fs.read_bytes(fd, 2) == b"cd"

    def test_huge_size_on_open_file(self) -> None:
        """A size far past the limit is insufficient data, not an allocation."""
        fs = FileSystem()
        fd = fs.create_file("a.txt", READ)
        with pytest.raises(InsufficientDataError):
            fs.read_bytes(fd, 10**20)
        assert fs.describe(fd).read_offset == 0

    def test_huge_size_on_empty_slot(self) -> None:
        """An empty slot is reported before the size is looked at."""
        fs = FileSystem()
        with pytest.raises(FileNotExistError):
            fs.read_bytes(7, 10**20)

    def test_huge_size_on_write_only_file(self) -> None:
        """Permission is checked before the size limit."""
        fs = FileSystem()
        fd = fs.create_file("a.txt", WRITE)
        with pytest.raises(PermissionDeniedError):
            fs.read_bytes(fd, 10**20)

    @pytest.mark.parametrize("size", [0, -1, 1.5, "1", None, False])
    def test_bad_size(self, size: object) -> None:
        """Only positive ints are accepted."""
        fs = FileSystem()
        fd = fs.create_file("a.txt", READ)
        with pytest.raises(InvalidParameterError):
            fs.read_bytes(fd, size)  # type: ignore[arg-type]

    def test_out_of_range_fd(self) -> None:
        """Descriptors past the table are invalid."""
        fs = FileSystem()
        with pytest.raises(InvalidParameterError):
            fs.read_bytes(MAX_OPEN_FILES, 1)


# -- unlink_file --------------------------------------------------------------


class TestUnlinkFile:
    """Verify deletion and resource reclamation."""

    def test_reclaims_inode_and_descriptor(self) -> None:
        """Unlink frees the inode, clears the fd slot and the name."""
        fs = FileSystem()
        fd = fs.create_file("a.txt", READ_WRITE)
        fs.write_file(fd, b"data")
        fs.unlink_file("a.txt")
        assert fs.superblock.free_inodes == MAX_INODES
        assert not fs.file_exists("a.txt")
        assert fs.fd_table.lookup(fd) is None
        _assert_consistent(fs)

    def test_inode_fully_reset(self) -> None:
        """Every inode field returns to its free value."""
        fs = FileSystem()
        fd = fs.create_file("a.txt", READ_WRITE)
        number = _bound_inode(fs, fd).inode_number
        fs.write_file(fd, b"data")
        fs.unlink_file("a.txt")
        info = fs.inodes[number - 1]
        assert info == InodeInfo(
            inode_number=number,
            file_name="",
            file_type=FileType.FREE,
            size_limit=0,
            actual_size=0,
            reference_count=0,
            permission=Permission.NONE,
        )

    def test_descriptor_unusable_after_unlink(self) -> None:
        """The old descriptor now refers to nothing."""
        fs = FileSystem()
        fd = fs.create_file("a.txt", READ_WRITE)
        fs.unlink_file("a.txt")
        with pytest.raises(FileNotExistError):
            fs.write_file(fd, b"x")

    def test_descriptor_slot_reused(self) -> None:
        """The freed slot is the next one handed out."""
        fs = FileSystem()
        fd_a = fs.create_file("a", READ)
        fs.create_file("b", READ)
        fs.unlink_file("a")
        assert fs.create_file("c", READ) == fd_a

    def test_recreate_starts_empty(self) -> None:
        """A file re-created under the same name has fresh, zeroed data."""
        fs = FileSystem()
        fd = fs.create_file("a.txt", READ_WRITE)
        fs.write_file(fd, b"old")
        fs.unlink_file("a.txt")
        fd = fs.create_file("a.txt", READ_WRITE)
        buf = bytearray(3)
        fs.read_file(fd, buf, 3)
        assert buf == bytes(3)
        assert _bound_inode(fs, fd).actual_size == 0

    def test_missing_file(self) -> None:
        """Unlinking an unknown name fails without side effects."""
        fs = FileSystem()
        fs.create_file("a.txt", READ)
        before = _snapshot(fs)
        with pytest.raises(FileNotExistError):
            fs.unlink_file("b.txt")
        assert _snapshot(fs) == before

    @pytest.mark.parametrize("name", ["", None])
    def test_missing_name(self, name: str | None) -> None:
        """An empty or absent name is an invalid parameter."""
        fs = FileSystem()
        with pytest.raises(InvalidParameterError):
            fs.unlink_file(name)  # type: ignore[arg-type]

    def test_unlink_leaves_other_files(self) -> None:
        """Only the named file is removed."""
        fs = FileSystem()
        fd_a = fs.create_file("a", READ_WRITE)
        fs.create_file("b", READ_WRITE)
        fs.unlink_file("b")
        assert fs.file_exists("a")
        assert fs.fd_table.lookup(fd_a) is not None

    def test_full_cycle_keeps_invariant(self) -> None:
        """Fill, drain and refill the table; counters always agree."""
        fs = FileSystem()
        for round_ in range(2):
            for i in range(MAX_INODES):
                fs.create_file(f"{round_}-{i}", READ_WRITE)
                _assert_consistent(fs)
            for i in range(MAX_INODES):
                fs.unlink_file(f"{round_}-{i}")
                _assert_consistent(fs)
        assert fs.superblock.free_inodes == MAX_INODES
        assert fs.fd_table.list_fds() == {}


# -- list_files ---------------------------------------------------------------


class TestListFiles:
    """Verify the ls snapshot."""

    def test_empty(self) -> None:
        """No files, no entries."""
        assert list(FileSystem().list_files()) == []

    def test_inode_order_with_sizes(self) -> None:
        """Entries come in inode order and carry the stored size."""
        fs = FileSystem()
        fd_a = fs.create_file("a", READ_WRITE)
        fs.create_file("b", READ_WRITE)
        fs.write_file(fd_a, b"xyz")
        assert list(fs.list_files()) == [(1, "a", 3), (2, "b", 0)]

    def test_entries_are_named(self) -> None:
        """Entries expose their fields by name."""
        fs = FileSystem()
        fs.create_file("a", READ)
        entry = next(fs.list_files())
        assert isinstance(entry, FileListing)
        assert entry.file_name == "a"
        assert entry.inode_number == 1
        assert entry.actual_size == 0

    def test_one_shot(self) -> None:
        """The returned iterator cannot be restarted."""
        fs = FileSystem()
        fs.create_file("a", READ)
        listing = fs.list_files()
        assert len(list(listing)) == 1
        assert list(listing) == []

    def test_snapshot_isolated_from_later_changes(self) -> None:
        """Creates and unlinks after the call do not show up."""
        fs = FileSystem()
        fs.create_file("a", READ)
        listing = fs.list_files()
        fs.unlink_file("a")
        fs.create_file("b", READ)
        assert list(listing) == [(1, "a", 0)]

    def test_gap_after_unlink(self) -> None:
        """Freed slots are skipped."""
        fs = FileSystem()
        for name in ("a", "b", "c"):
            fs.create_file(name, READ)
        fs.unlink_file("b")
        assert [entry.file_name for entry in fs.list_files()] == ["a", "c"]


# -- Inspection ---------------------------------------------------------------


class TestInspection:
    """Verify stat, fstat, describe and reset."""

    def test_stat_by_name(self) -> None:
        """Stat should find the regular file by name."""
        fs = FileSystem()
        fs.create_file("a", WRITE)
        info = fs.stat("a")
        assert info.inode_number == 1
        assert info.permission is Permission.WRITE

    def test_stat_missing(self) -> None:
        """Stat of an unknown name raises FILE_NOT_EXIST."""
        with pytest.raises(FileNotExistError):
            FileSystem().stat("nope")

    def test_describe_out_of_range(self) -> None:
        """Describe rejects descriptors outside the table."""
        with pytest.raises(InvalidParameterError):
            FileSystem().describe(-1)

    def test_superblock_is_a_copy(self) -> None:
        """Mutating the returned super block does not touch the real one."""
        fs = FileSystem()
        sb = fs.superblock
        sb.free_inodes = 0
        assert fs.superblock.free_inodes == MAX_INODES

    def test_reset_releases_everything(self) -> None:
        """Reset should free every inode and descriptor."""
        fs = FileSystem()
        fs.create_file("a", READ)
        fs.create_file("b", READ)
        fs.reset()
        assert fs.superblock.free_inodes == MAX_INODES
        assert fs.fd_table.list_fds() == {}
        assert list(fs.list_files()) == []
