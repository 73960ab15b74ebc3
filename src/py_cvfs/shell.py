"""The shell — command interpreter for the virtual file system.

The shell reads a command string, splits it into a command name and
arguments, dispatches to a handler, and returns a string result.  Every
handler talks to the kernel through ``kernel.syscall()``; the shell
never touches the file system object itself.

Design choices:
    - **Returns strings, not prints.**  The caller (REPL or web UI)
      decides how to display output, so the shell is fully testable.
    - **Command dispatch via a dict.**  Adding a command means writing
      a method and adding one dict entry.
    - **Error codes, not exceptions.**  File-system failures come back
      from the kernel as ``ErrorCode`` values and are mapped to fixed
      messages in ``_ERROR_MESSAGES``.
"""

from collections.abc import Callable
from typing import Any

from py_cvfs.fs.errors import ErrorCode
from py_cvfs.kernel import Kernel, KernelState
from py_cvfs.syscalls import SyscallNumber, is_error

# Type alias for a command handler: takes a list of args, returns output.
_Handler = Callable[[list[str]], str]

# ANSI "erase display" followed by "cursor home".
CLEAR_SCREEN = "\033[2J\033[H"

_RULE = "-" * 68

_ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.INVALID_PARAMETER: "Error : Invalid parameter",
    ErrorCode.NO_FREE_INODES: "Error : Unable to create file as there is no inode",
    ErrorCode.FILE_ALREADY_EXISTS: (
        "Error : Unable to create file because the file is already present"
    ),
    ErrorCode.FILE_NOT_EXIST: "Error : There is no such file",
    ErrorCode.PERMISSION_DENIED: "Error : Permission denied",
    ErrorCode.INSUFFICIENT_SPACE: "Error : Unable to write as there is no space",
    ErrorCode.INSUFFICIENT_DATA: "Error : Insufficient data",
    ErrorCode.MAX_FILES_OPEN: "Error : Unable to create file\nMax opened files limit reached",
}

_HELP_LINES: dict[str, str] = {
    "help": "Display this help page",
    "man": "Display the manual page of a command",
    "ls": "List all files with details",
    "clear": "Clear the terminal",
    "creat": "Create a new file",
    "write": "Write data into a file",
    "read": "Read data from a file",
    "stat": "Display statistical information",
    "fstat": "Display information about an open descriptor",
    "unlink": "Delete a file",
    "lsfd": "List open file descriptors",
    "log": "Show the kernel log",
    "dmesg": "Show the boot log",
    "exit": "Terminate CVFS",
}

_MAN_PAGES: dict[str, tuple[str, str, str | None]] = {
    "help": ("It is used to display the help page", "help", None),
    "man": (
        "It is used to display the manual page",
        "man command_name",
        "command_name : It is the name of command",
    ),
    "ls": ("It is used to list the names of all files", "ls", None),
    "clear": ("It is used to clear the shell", "clear", None),
    "creat": (
        "It is used to create a new file",
        "creat file_name permission",
        "permission : 1 (read), 2 (write), 3 (read + write)",
    ),
    "write": (
        "It is used to write data at the end of a file",
        "write file_descriptor data",
        "file_descriptor : value returned by creat",
    ),
    "read": (
        "It is used to read data from a file",
        "read file_descriptor size",
        "size : number of bytes to read",
    ),
    "stat": (
        "It is used to display information about a file or the file system",
        "stat [file_name]",
        None,
    ),
    "fstat": ("It is used to display information about a descriptor", "fstat fd", None),
    "unlink": ("It is used to delete the file", "unlink file_name", None),
    "lsfd": ("It is used to list open file descriptors", "lsfd", None),
    "log": ("It is used to display the kernel log", "log", None),
    "dmesg": ("It is used to display the boot log", "dmesg", None),
    "exit": ("It is used to terminate the shell", "exit", None),
}


def error_message(code: ErrorCode) -> str:
    """Return the user-facing message for an error code."""
    return _ERROR_MESSAGES[code]


class Shell:
    """Command interpreter that operates on a booted kernel.

    The constructor enforces that the kernel is running.
    """

    EXIT_SENTINEL = "__EXIT__"

    def __init__(self, *, kernel: Kernel) -> None:
        """Create a shell attached to a running kernel.

        Args:
            kernel: A booted kernel instance.

        Raises:
            RuntimeError: If the kernel is not in the RUNNING state.

        """
        if kernel.state is not KernelState.RUNNING:
            msg = f"Shell requires a running kernel (state: {kernel.state}, not running)"
            raise RuntimeError(msg)

        self._kernel = kernel

        # Command dispatch table: command name to handler method.
        self._commands: dict[str, _Handler] = {
            "help": self._cmd_help,
            "man": self._cmd_man,
            "ls": self._cmd_ls,
            "clear": self._cmd_clear,
            "creat": self._cmd_creat,
            "write": self._cmd_write,
            "read": self._cmd_read,
            "stat": self._cmd_stat,
            "fstat": self._cmd_fstat,
            "unlink": self._cmd_unlink,
            "lsfd": self._cmd_lsfd,
            "log": self._cmd_log,
            "dmesg": self._cmd_dmesg,
            "exit": self._cmd_exit,
        }

    @property
    def kernel(self) -> Kernel:
        """Return the kernel this shell talks to."""
        return self._kernel

    @property
    def command_names(self) -> list[str]:
        """Return every command name, sorted."""
        return sorted(self._commands)

    def execute(self, command: str) -> str:
        """Parse and execute one command line.

        Args:
            command: The raw command string (e.g. "creat a.txt 3").

        Returns:
            The command output as a string, or an error message.

        """
        parts = command.strip().split()
        if not parts:
            return ""

        name = parts[0]
        args = parts[1:]

        handler = self._commands.get(name)
        if handler is None:
            return "Command not found\nPlease refer help option to get more information"

        return handler(args)

    def _syscall(self, number: SyscallNumber, **kwargs: Any) -> Any:
        return self._kernel.syscall(number, **kwargs)

    # -- Command handlers ------------------------------------------------

    def _cmd_help(self, _args: list[str]) -> str:
        """List available commands."""
        width = max(len(name) for name in _HELP_LINES)
        lines = [_RULE, "CVFS help page", _RULE]
        lines.extend(f"{name:<{width}} : {text}" for name, text in _HELP_LINES.items())
        lines.append(_RULE)
        return "\n".join(lines)

    def _cmd_man(self, args: list[str]) -> str:
        """Show the manual page of a command."""
        if len(args) != 1:
            return "Usage: man <command>"
        page = _MAN_PAGES.get(args[0])
        if page is None:
            return f"No manual entry for {args[0]}"
        about, usage, note = page
        lines = [f"About        : {about}", f"Usage        : {usage}"]
        if note is not None:
            lines.append(note)
        return "\n".join(lines)

    def _cmd_ls(self, _args: list[str]) -> str:
        """List every file: inode number, name, bytes stored."""
        files: list[dict[str, Any]] = self._syscall(SyscallNumber.SYS_LIST_FILES)
        lines = [_RULE, "CVFS files information", _RULE]
        lines.extend(f"{f['inode_number']}\t{f['file_name']}\t{f['actual_size']}" for f in files)
        lines.append(_RULE)
        return "\n".join(lines)

    def _cmd_clear(self, _args: list[str]) -> str:
        """Return the terminal clear sequence."""
        return CLEAR_SCREEN

    def _cmd_creat(self, args: list[str]) -> str:
        """Create a file: ``creat <name> <permission>``."""
        if len(args) != 2:  # noqa: PLR2004
            return "Usage: creat <name> <permission>"
        permission = _parse_int(args[1])
        if permission is None:
            return error_message(ErrorCode.INVALID_PARAMETER)
        result = self._syscall(SyscallNumber.SYS_CREATE_FILE, name=args[0], permission=permission)
        if is_error(result):
            return error_message(result)
        return f"File gets successfully created with FD {result}"

    def _cmd_write(self, args: list[str]) -> str:
        """Append text to a file: ``write <fd> <data...>``."""
        if len(args) < 2:  # noqa: PLR2004
            return "Usage: write <fd> <data...>"
        fd = _parse_int(args[0])
        if fd is None:
            return error_message(ErrorCode.INVALID_PARAMETER)
        data = " ".join(args[1:]).encode()
        result = self._syscall(SyscallNumber.SYS_WRITE_FILE, fd=fd, data=data)
        if is_error(result):
            return error_message(result)
        return f"{result} bytes gets successfully written"

    def _cmd_read(self, args: list[str]) -> str:
        """Read bytes from a file: ``read <fd> <count>``."""
        if len(args) != 2:  # noqa: PLR2004
            return "Usage: read <fd> <count>"
        fd = _parse_int(args[0])
        count = _parse_int(args[1])
        if fd is None or count is None:
            return error_message(ErrorCode.INVALID_PARAMETER)
        result = self._syscall(SyscallNumber.SYS_READ_FILE, fd=fd, count=count)
        if is_error(result):
            return error_message(result)
        text = result.rstrip(b"\x00").decode(errors="replace")
        return f"Read operation is successful\nData from file is : {text}"

    def _cmd_stat(self, args: list[str]) -> str:
        """Show file-system counters, or one file's metadata."""
        if not args:
            info: dict[str, Any] = self._syscall(SyscallNumber.SYS_SYSINFO)
            lines = [
                f"  Process: {info['process_name']}",
                f"  Total inodes: {info['total_inodes']}",
                f"  Free inodes: {info['free_inodes']}",
                f"  Used inodes: {info['used_inodes']}",
                f"  Open files: {info['open_files']} / {info['max_open_files']}",
                f"  Max file size: {info['max_file_size']}",
            ]
            return "\n".join(lines)
        result = self._syscall(SyscallNumber.SYS_STAT, name=args[0])
        if is_error(result):
            return error_message(result)
        return _format_inode(result)

    def _cmd_fstat(self, args: list[str]) -> str:
        """Show metadata and cursors for a descriptor."""
        if len(args) != 1:
            return "Usage: fstat <fd>"
        fd = _parse_int(args[0])
        if fd is None:
            return error_message(ErrorCode.INVALID_PARAMETER)
        result = self._syscall(SyscallNumber.SYS_FSTAT, fd=fd)
        if is_error(result):
            return error_message(result)
        return "\n".join(
            [
                _format_inode(result),
                f"  Read offset: {result['read_offset']}",
                f"  Write offset: {result['write_offset']}",
            ]
        )

    def _cmd_unlink(self, args: list[str]) -> str:
        """Delete a file by name."""
        if len(args) != 1:
            return "Usage: unlink <name>"
        result = self._syscall(SyscallNumber.SYS_UNLINK, name=args[0])
        if result is ErrorCode.FILE_NOT_EXIST:
            return "Error : Unable to delete as there is no such file"
        if is_error(result):
            return error_message(result)
        return "File gets successfully deleted"

    def _cmd_lsfd(self, _args: list[str]) -> str:
        """List open file descriptors."""
        fds: list[dict[str, Any]] = self._syscall(SyscallNumber.SYS_LIST_FDS)
        if not fds:
            return "No open file descriptors."
        lines = ["FD  MODE  READ  WRITE  NAME"]
        lines.extend(
            f"{f['fd']:<3} {f['mode']:<5} {f['read_offset']:<5} {f['write_offset']:<6} {f['name']}"
            for f in fds
        )
        return "\n".join(lines)

    def _cmd_log(self, _args: list[str]) -> str:
        """Show recent log entries."""
        entries: list[str] = self._syscall(SyscallNumber.SYS_READ_LOG)
        return "\n".join(entries) if entries else "No log entries."

    def _cmd_dmesg(self, _args: list[str]) -> str:
        """Show the boot log."""
        return "\n".join(self._kernel.dmesg())

    def _cmd_exit(self, _args: list[str]) -> str:
        """Shut down the kernel and signal the REPL to stop."""
        self._kernel.shutdown()
        return self.EXIT_SENTINEL


def _parse_int(text: str) -> int | None:
    try:
        return int(text)
    except ValueError:
        return None


def _format_inode(info: dict[str, Any]) -> str:
    lines = [
        f"  File: {info['name']}",
        f"  Inode: {info['inode_number']}",
        f"  Type: {info['type']}",
        f"  Size: {info['actual_size']} / {info['size_limit']}",
        f"  References: {info['reference_count']}",
        f"  Permission: {info['permission']}",
    ]
    return "\n".join(lines)
