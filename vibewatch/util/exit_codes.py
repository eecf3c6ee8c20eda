"""Documented exit codes for the vibewatch CLI.

Exit codes follow UNIX conventions:
- 0: Success
- 2: Invalid command-line arguments or detector settings (argparse uses 2 too)
- 3-4: Application-specific errors

Usage:
    from vibewatch.util.exit_codes import ExitCode
    sys.exit(ExitCode.INPUT_UNAVAILABLE)
"""

from __future__ import annotations


class ExitCode:
    """Exit code constants for vibewatch processes.

    Attributes:
        SUCCESS: Normal termination, no errors.
        INVALID_ARGS: Command-line argument or detector setting validation failed.
        INPUT_UNAVAILABLE: The input file could not be opened.
        INTERRUPTED: Stopped by the operator (Ctrl-C).
    """

    SUCCESS: int = 0
    INVALID_ARGS: int = 2
    INPUT_UNAVAILABLE: int = 3
    INTERRUPTED: int = 4

    @classmethod
    def message(cls, code: int) -> str:
        """Return a human-readable message for an exit code."""
        messages = {
            cls.SUCCESS: "Success",
            cls.INVALID_ARGS: "Invalid arguments",
            cls.INPUT_UNAVAILABLE: "Input unavailable",
            cls.INTERRUPTED: "Interrupted",
        }
        return messages.get(code, f"Unknown exit code {code}")
