"""Interactive REPL (Read-Eval-Print Loop) for CVFS.

The REPL boots the kernel, creates a shell, and enters the classic loop:

    1. **Read** — display a prompt and read user input.
    2. **Eval** — pass the command to ``shell.execute()``.
    3. **Print** — display the result.
    4. **Loop** — repeat until the shell returns the exit sentinel.

The shell is fully testable (returns strings, no I/O); the REPL is the
thin I/O wrapper that connects it to ``stdin``/``stdout``.  The helper
functions (``build_prompt``, ``format_boot_log``) are pure and testable.
"""

import readline

from py_cvfs.completer import Completer
from py_cvfs.kernel import Kernel, KernelState
from py_cvfs.shell import Shell

_BANNER_WIDTH = 38


def format_boot_log(boot_log: list[str]) -> str:
    """Format the boot log into a displayable banner string.

    Args:
        boot_log: List of boot messages from the kernel.

    Returns:
        A formatted string suitable for printing to the console.

    """
    border = "=" * _BANNER_WIDTH
    header = (
        f"\n  {border}\n              CVFS v0.1.0\n"
        f"    A customised virtual file system\n  {border}\n\n"
    )
    body = "\n".join(f"  {msg}" for msg in boot_log)
    footer = "\nCVFS started successfully. Type 'help' for commands, 'exit' to quit.\n"
    return header + body + footer


def build_prompt(kernel: Kernel) -> str:
    """Build the shell prompt string showing the session process.

    Returns:
        A prompt string like ``Myexe@cvfs > ``.

    """
    if kernel.state is not KernelState.RUNNING or kernel.filesystem is None:
        return "cvfs > "
    return f"{kernel.filesystem.fd_table.process_name}@cvfs > "


def run() -> None:
    """Boot CVFS and run the interactive REPL.

    Handles Ctrl+C and Ctrl+D gracefully and always shuts the kernel
    down on the way out.
    """
    kernel = Kernel()
    kernel.boot()
    shell = Shell(kernel=kernel)

    completer = Completer(shell)
    readline.set_completer(completer.complete)
    readline.set_completer_delims(" \t")
    readline.parse_and_bind("tab: complete")

    print(format_boot_log(kernel.dmesg()))  # noqa: T201

    try:
        while kernel.state is KernelState.RUNNING:
            try:
                command = input(build_prompt(kernel))
            except EOFError:
                # Ctrl+D
                print()  # noqa: T201
                break

            result = shell.execute(command)
            if result == Shell.EXIT_SENTINEL:
                break
            if result:
                print(result)  # noqa: T201

    except KeyboardInterrupt:
        print("\nInterrupted.")  # noqa: T201

    finally:
        if kernel.state is KernelState.RUNNING:
            kernel.shutdown()
        print("Thank you for using CVFS")  # noqa: T201
