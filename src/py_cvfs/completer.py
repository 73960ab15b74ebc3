"""Context-aware tab completer for the CVFS shell.

The completer separates **what to complete** (pure logic, fully
testable) from **how to wire it** (readline integration in the REPL).

The ``complete(text, state)`` method is the readline callback.  It
delegates to ``completions(text, line)`` which looks at the command
being typed and returns a list of candidate strings:

- first word → command names;
- after ``man`` → command names;
- after ``unlink`` / ``stat`` → names of existing files;
- after ``read`` / ``write`` / ``fstat`` → open descriptors.
"""

from __future__ import annotations

import readline
from typing import TYPE_CHECKING, Any

from py_cvfs.kernel import KernelState
from py_cvfs.syscalls import SyscallNumber

if TYPE_CHECKING:
    from py_cvfs.kernel import Kernel
    from py_cvfs.shell import Shell

_FILE_NAME_COMMANDS: frozenset[str] = frozenset(["unlink", "stat"])
_FD_COMMANDS: frozenset[str] = frozenset(["read", "write", "fstat"])

# A command plus the argument being typed.
_WORDS_WITH_FIRST_ARG = 2


class Completer:
    """Context-aware tab completer for the CVFS shell."""

    def __init__(self, shell: Shell) -> None:
        """Create a completer attached to a shell instance."""
        self._shell = shell
        self._kernel: Kernel = shell.kernel

    def complete(self, text: str, state: int) -> str | None:
        """Readline callback: return the *state*-th candidate for *text*."""
        line = readline.get_line_buffer()
        candidates = self.completions(text, line)
        if state < len(candidates):
            return candidates[state]
        return None

    def completions(self, text: str, line: str) -> list[str]:
        """Return completion candidates based on context.

        Args:
            text: The partial word under the cursor.
            line: The full input line so far.

        Returns:
            Sorted list of matching candidates.

        """
        words = line.lstrip().split()

        # No words yet, or still typing the first word → command completion
        if not words or (len(words) == 1 and not line.endswith(" ")):
            return self._complete_commands(text)

        # Only the first argument is completed
        typing_first_arg = len(words) == 1 or (
            len(words) == _WORDS_WITH_FIRST_ARG and not line.endswith(" ")
        )
        if not typing_first_arg:
            return []

        cmd = words[0]
        if cmd == "man":
            return self._complete_commands(text)
        if cmd in _FILE_NAME_COMMANDS:
            return self._complete_file_names(text)
        if cmd in _FD_COMMANDS:
            return self._complete_fds(text)
        return []

    # -- private completers ------------------------------------------------

    def _complete_commands(self, text: str) -> list[str]:
        """Complete command names from the shell's dispatch table."""
        return [cmd for cmd in self._shell.command_names if cmd.startswith(text)]

    def _complete_file_names(self, text: str) -> list[str]:
        """Complete names of existing files."""
        if self._kernel.state is not KernelState.RUNNING:
            return []
        files: list[dict[str, Any]] = self._kernel.syscall(SyscallNumber.SYS_LIST_FILES)
        return sorted(f["file_name"] for f in files if f["file_name"].startswith(text))

    def _complete_fds(self, text: str) -> list[str]:
        """Complete open descriptor numbers."""
        if self._kernel.state is not KernelState.RUNNING:
            return []
        fds: list[dict[str, Any]] = self._kernel.syscall(SyscallNumber.SYS_LIST_FDS)
        return [str(f["fd"]) for f in fds if str(f["fd"]).startswith(text)]
