"""System call interface — the gateway between user-space and the file system.

User code never holds a reference to the file system.  It asks the
kernel for a numbered operation and gets back a plain value:

1. ``SyscallNumber`` — an enum of every operation the kernel supports.
   We use an IntEnum so each number is also a valid int, like the
   ``__NR_*`` constants of a real kernel.

2. ``dispatch_syscall()`` — the trap handler.  It looks up the handler
   for the number, calls into the file system, and converts a rejected
   operation into its ``ErrorCode``.  A failed ``creat`` therefore
   *returns* ``ErrorCode.NO_FREE_INODES`` (-2) instead of raising, just
   as ``creat(2)`` returns -1 and sets ``errno``.

3. ``SyscallError`` — raised only when the call itself is malformed
   (unknown number, missing argument).  That is a programming error in
   the caller, not a file-system outcome.

Callers tell success from failure with ``is_error(result)``.
"""

from enum import IntEnum
from typing import Any

from py_cvfs.fs.errors import ErrorCode, VfsError


class SyscallNumber(IntEnum):
    """Enumerate every system call the kernel supports."""

    # File operations
    SYS_CREATE_FILE = 10
    SYS_READ_FILE = 12
    SYS_WRITE_FILE = 13
    SYS_UNLINK = 14
    SYS_LIST_FILES = 15
    SYS_FILE_EXISTS = 16

    # Inspection
    SYS_STAT = 20
    SYS_FSTAT = 21
    SYS_LIST_FDS = 22

    # Logging
    SYS_READ_LOG = 50

    # System info
    SYS_SYSINFO = 80


class SyscallError(Exception):
    """Raised when a system call request is malformed.

    File-system failures are not exceptions at this level; they come
    back as ``ErrorCode`` values.
    """


def is_error(result: object) -> bool:
    """Return True if a syscall result is an error code."""
    return isinstance(result, ErrorCode)


def dispatch_syscall(
    kernel: Any,
    number: SyscallNumber,
    **kwargs: Any,
) -> Any:
    """Dispatch a system call to its handler.

    Args:
        kernel: The running kernel instance.
        number: The syscall number identifying the operation.
        **kwargs: Arguments specific to the syscall.

    Returns:
        The syscall result, or an ``ErrorCode`` if the file system
        rejected the operation.

    Raises:
        SyscallError: If the number is unknown or an argument is missing.

    """
    handlers: dict[SyscallNumber, Any] = {
        SyscallNumber.SYS_CREATE_FILE: _sys_create_file,
        SyscallNumber.SYS_READ_FILE: _sys_read_file,
        SyscallNumber.SYS_WRITE_FILE: _sys_write_file,
        SyscallNumber.SYS_UNLINK: _sys_unlink,
        SyscallNumber.SYS_LIST_FILES: _sys_list_files,
        SyscallNumber.SYS_FILE_EXISTS: _sys_file_exists,
        SyscallNumber.SYS_STAT: _sys_stat,
        SyscallNumber.SYS_FSTAT: _sys_fstat,
        SyscallNumber.SYS_LIST_FDS: _sys_list_fds,
        SyscallNumber.SYS_READ_LOG: _sys_read_log,
        SyscallNumber.SYS_SYSINFO: _sys_sysinfo,
    }

    handler = handlers.get(number)
    if handler is None:
        msg = f"Unknown syscall: {number}"
        raise SyscallError(msg)

    try:
        return handler(kernel, **kwargs)
    except KeyError as e:
        msg = f"Missing argument for {SyscallNumber(number).name}: {e.args[0]}"
        raise SyscallError(msg) from e
    except VfsError as e:
        return e.code


# -- File syscall handlers ---------------------------------------------------


def _sys_create_file(kernel: Any, **kwargs: Any) -> int:
    """Create a file and return its descriptor."""
    assert kernel.filesystem is not None  # noqa: S101
    return kernel.filesystem.create_file(kwargs["name"], kwargs["permission"])


def _sys_read_file(kernel: Any, **kwargs: Any) -> bytes:
    """Read ``count`` bytes from a descriptor."""
    assert kernel.filesystem is not None  # noqa: S101
    return kernel.filesystem.read_bytes(kwargs["fd"], kwargs["count"])


def _sys_write_file(kernel: Any, **kwargs: Any) -> int:
    """Write bytes to a descriptor and return how many were written."""
    assert kernel.filesystem is not None  # noqa: S101
    return kernel.filesystem.write_file(kwargs["fd"], kwargs["data"], kwargs.get("size"))


def _sys_unlink(kernel: Any, **kwargs: Any) -> int:
    """Delete a file; return 0 on success."""
    assert kernel.filesystem is not None  # noqa: S101
    kernel.filesystem.unlink_file(kwargs["name"])
    return 0


def _sys_list_files(kernel: Any, **_kwargs: Any) -> list[dict[str, Any]]:
    """List every regular file in inode order."""
    assert kernel.filesystem is not None  # noqa: S101
    return [entry._asdict() for entry in kernel.filesystem.list_files()]


def _sys_file_exists(kernel: Any, **kwargs: Any) -> bool:
    """Check whether a file exists."""
    assert kernel.filesystem is not None  # noqa: S101
    return kernel.filesystem.file_exists(kwargs["name"])


# -- Inspection handlers -----------------------------------------------------


def _inode_dict(info: Any) -> dict[str, Any]:
    return {
        "inode_number": info.inode_number,
        "name": info.file_name,
        "type": info.file_type.name.lower(),
        "size_limit": info.size_limit,
        "actual_size": info.actual_size,
        "reference_count": info.reference_count,
        "permission": int(info.permission),
    }


def _sys_stat(kernel: Any, **kwargs: Any) -> dict[str, Any]:
    """Return metadata for a file by name."""
    assert kernel.filesystem is not None  # noqa: S101
    return _inode_dict(kernel.filesystem.stat(kwargs["name"]))


def _sys_fstat(kernel: Any, **kwargs: Any) -> dict[str, Any]:
    """Return metadata and cursors for a descriptor."""
    assert kernel.filesystem is not None  # noqa: S101
    fd: int = kwargs["fd"]
    ofd = kernel.filesystem.describe(fd)
    info = _inode_dict(ofd.inode.to_info())
    info.update(fd=fd, read_offset=ofd.read_offset, write_offset=ofd.write_offset)
    return info


def _sys_list_fds(kernel: Any, **_kwargs: Any) -> list[dict[str, Any]]:
    """List every open descriptor with its cursors."""
    assert kernel.filesystem is not None  # noqa: S101
    return [
        {
            "fd": fd,
            "name": ofd.inode.file_name,
            "inode_number": ofd.inode_number,
            "mode": int(ofd.mode),
            "read_offset": ofd.read_offset,
            "write_offset": ofd.write_offset,
        }
        for fd, ofd in kernel.filesystem.fd_table.list_fds().items()
    ]


def _sys_read_log(kernel: Any, **_kwargs: Any) -> list[str]:
    """Return formatted log entries."""
    assert kernel.logger is not None  # noqa: S101
    return [str(entry) for entry in kernel.logger.entries]


def _sys_sysinfo(kernel: Any, **_kwargs: Any) -> dict[str, Any]:
    """Return super block counters and capacities."""
    assert kernel.filesystem is not None  # noqa: S101
    fs = kernel.filesystem
    sb = fs.superblock
    return {
        "process_name": fs.fd_table.process_name,
        "total_inodes": sb.total_inodes,
        "free_inodes": sb.free_inodes,
        "used_inodes": sb.used_inodes,
        "open_files": len(fs.fd_table.list_fds()),
        "max_open_files": fs.limits.max_open_files,
        "max_file_size": fs.limits.max_file_size,
    }
