"""File system subsystem — inodes, the super block, and file descriptors.

Re-exports public symbols so callers can write::

    from py_cvfs.fs import FileSystem, ErrorCode
"""

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
    VfsError,
)
from py_cvfs.fs.fd import FIRST_FD, FdTable, OpenFileDescription
from py_cvfs.fs.filesystem import (
    MAX_FILE_SIZE,
    MAX_INODES,
    MAX_OPEN_FILES,
    FileListing,
    FileSystem,
    FsLimits,
)
from py_cvfs.fs.inode import FileType, Inode, InodeInfo, InodeTable, Permission, SuperBlock

__all__ = [
    "FIRST_FD",
    "MAX_FILE_SIZE",
    "MAX_INODES",
    "MAX_OPEN_FILES",
    "ErrorCode",
    "FdTable",
    "FileAlreadyExistsError",
    "FileListing",
    "FileNotExistError",
    "FileSystem",
    "FileType",
    "FsLimits",
    "Inode",
    "InodeInfo",
    "InodeTable",
    "InsufficientDataError",
    "InsufficientSpaceError",
    "InvalidParameterError",
    "MaxFilesOpenError",
    "NoFreeInodesError",
    "OpenFileDescription",
    "PermissionDeniedError",
    "SuperBlock",
    "VfsError",
]
