"""Error codes and exceptions for the virtual file system.

Inside the file system, a failed precondition raises a ``VfsError``
subclass.  Each subclass carries one ``ErrorCode`` so the system-call
layer can turn it into a plain negative return value, the way a Unix
kernel hands ``-EINVAL`` back to user space instead of crashing the
caller.

The numeric values are fixed: shells and scripts built on top of the
kernel compare against them.
"""

from enum import IntEnum


class ErrorCode(IntEnum):
    """Discriminated failure results of the core file operations."""

    INVALID_PARAMETER = -1
    NO_FREE_INODES = -2
    FILE_ALREADY_EXISTS = -3
    FILE_NOT_EXIST = -4
    PERMISSION_DENIED = -5
    INSUFFICIENT_SPACE = -6
    INSUFFICIENT_DATA = -7
    MAX_FILES_OPEN = -8


class VfsError(Exception):
    """Raise when a file-system operation is rejected.

    Subclasses pin ``code``; the base class defaults to INVALID_PARAMETER.
    """

    code: ErrorCode = ErrorCode.INVALID_PARAMETER


class InvalidParameterError(VfsError):
    """Raise when an argument is malformed or out of range."""

    code = ErrorCode.INVALID_PARAMETER


class NoFreeInodesError(VfsError):
    """Raise when every inode is already in use."""

    code = ErrorCode.NO_FREE_INODES


class FileAlreadyExistsError(VfsError):
    """Raise when creating a file whose name is already taken."""

    code = ErrorCode.FILE_ALREADY_EXISTS


class FileNotExistError(VfsError):
    """Raise when a name or descriptor does not refer to a live file."""

    code = ErrorCode.FILE_NOT_EXIST


class PermissionDeniedError(VfsError):
    """Raise when the inode's permission mask forbids the access."""

    code = ErrorCode.PERMISSION_DENIED


class InsufficientSpaceError(VfsError):
    """Raise when a write would run past the file's size limit."""

    code = ErrorCode.INSUFFICIENT_SPACE


class InsufficientDataError(VfsError):
    """Raise when a read would run past the file's size limit."""

    code = ErrorCode.INSUFFICIENT_DATA


class MaxFilesOpenError(VfsError):
    """Raise when the descriptor table has no free slot."""

    code = ErrorCode.MAX_FILES_OPEN
