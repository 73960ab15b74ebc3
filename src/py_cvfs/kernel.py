"""The kernel — owner of the virtual file system and its lifecycle.

The kernel is the only holder of the ``FileSystem`` context.  Everything
above it (shell, REPL, web UI) goes through ``kernel.syscall()``.

Lifecycle, as an explicit state machine:

    SHUTDOWN  →  BOOTING  →  RUNNING  →  SHUTTING_DOWN  →  SHUTDOWN

Boot sequence (order matters):
    0. Logger — capture events from the start.
    1. Boot block — record the boot message.
    2. Super block — total and free inode counts.
    3. DILB — every inode created free.
    4. User area — empty fd table for the session process.

Shutdown releases every file buffer and drops the file system.
"""

from enum import StrEnum
from time import monotonic
from typing import Any

from py_cvfs.fs.fd import DEFAULT_PROCESS_NAME
from py_cvfs.fs.filesystem import FileSystem, FsLimits
from py_cvfs.logging import Logger, LogLevel
from py_cvfs.syscalls import SyscallNumber, dispatch_syscall, is_error

BOOT_MESSAGE = "Booting process of CVFS is done"


class KernelState(StrEnum):
    """Represent the lifecycle phases of the kernel."""

    SHUTDOWN = "shutdown"
    BOOTING = "booting"
    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"


class Kernel:
    """The central coordinator of the simulated machine.

    Subsystem references are None when the kernel is not running,
    and are initialised during boot.
    """

    def __init__(
        self,
        *,
        limits: FsLimits | None = None,
        process_name: str = DEFAULT_PROCESS_NAME,
    ) -> None:
        """Create a kernel in the SHUTDOWN state.

        Args:
            limits: File-system capacities used at boot.  Defaults to
                five inodes, twenty descriptors and fifty-byte files.
            process_name: Name of the session process owning the fd table.

        """
        self._state: KernelState = KernelState.SHUTDOWN
        self._limits = limits if limits is not None else FsLimits()
        self._process_name = process_name
        self._boot_time: float | None = None
        self._filesystem: FileSystem | None = None
        self._logger: Logger | None = None
        self._boot_log: list[str] = []

    @property
    def state(self) -> KernelState:
        """Return the current kernel state."""
        return self._state

    @property
    def limits(self) -> FsLimits:
        """Return the capacities the file system boots with."""
        return self._limits

    @property
    def uptime(self) -> float:
        """Return seconds elapsed since boot, or 0.0 if not running."""
        if self._boot_time is None:
            return 0.0
        return monotonic() - self._boot_time

    @property
    def filesystem(self) -> FileSystem | None:
        """Return the file system, or None if not booted."""
        return self._filesystem

    @property
    def logger(self) -> Logger | None:
        """Return the kernel logger, or None if not booted."""
        return self._logger

    def dmesg(self) -> list[str]:
        """Return the kernel boot log (like Linux dmesg)."""
        return list(self._boot_log)

    def _require_running(self) -> None:
        """Raise if the kernel is not in the RUNNING state."""
        if self._state is not KernelState.RUNNING:
            msg = f"Kernel is not running (state: {self._state})"
            raise RuntimeError(msg)

    def boot(self) -> None:
        """Transition the kernel from SHUTDOWN → RUNNING.

        Raises:
            RuntimeError: If the kernel is not in the SHUTDOWN state.

        """
        if self._state is not KernelState.SHUTDOWN:
            msg = f"Cannot boot: kernel is {self._state}, expected shutdown"
            raise RuntimeError(msg)

        self._state = KernelState.BOOTING
        self._boot_time = monotonic()

        # 0. Logger, so boot events are captured
        self._logger = Logger()
        self._boot_log.append("[OK] Logger")

        # 1. Boot block
        self._boot_log.append(BOOT_MESSAGE)

        # 2-4. Super block, DILB and user area are built together
        self._filesystem = FileSystem(
            limits=self._limits,
            process_name=self._process_name,
            logger=self._logger,
        )
        self._boot_log.append(f"[OK] Super block ({self._limits.max_inodes} inodes)")
        self._boot_log.append(f"[OK] DILB ({self._limits.max_file_size} bytes per file)")
        self._boot_log.append(
            f"[OK] UAREA for {self._process_name} ({self._limits.max_open_files} fds)"
        )

        self._state = KernelState.RUNNING
        self._logger.log(LogLevel.INFO, "Kernel boot complete", source="kernel")

    def shutdown(self) -> None:
        """Transition the kernel from RUNNING → SHUTDOWN.

        Raises:
            RuntimeError: If the kernel is not in the RUNNING state.

        """
        if self._state is not KernelState.RUNNING:
            msg = f"Cannot shutdown: kernel is {self._state}, expected running"
            raise RuntimeError(msg)

        self._state = KernelState.SHUTTING_DOWN
        if self._filesystem is not None:
            self._filesystem.reset()
        self._filesystem = None
        self._boot_log.clear()
        self._logger = None
        self._boot_time = None
        self._state = KernelState.SHUTDOWN

    def syscall(self, number: SyscallNumber, **kwargs: Any) -> Any:
        """Execute a system call on behalf of user space.

        Args:
            number: The syscall number identifying the operation.
            **kwargs: Arguments specific to the syscall.

        Returns:
            The syscall result, or an ``ErrorCode`` on failure.

        Raises:
            RuntimeError: If the kernel is not running.
            SyscallError: If the request itself is malformed.

        """
        self._require_running()
        assert self._logger is not None  # noqa: S101
        label = number.name if hasattr(number, "name") else str(number)
        self._logger.log(LogLevel.DEBUG, f"syscall {label}", source="syscall")
        result = dispatch_syscall(self, number, **kwargs)
        if is_error(result):
            self._logger.log(
                LogLevel.WARNING,
                f"syscall {label} failed: {result.name}",
                source="syscall",
            )
        return result
