"""CLI error handling for cdm-cli.

Wraps cdm-core exceptions in user-friendly messages with exit codes.
"""

from __future__ import annotations

from typing import NoReturn

import click

from cdm_cli.output import error
from cdm_core.errors import CdmError

# Exit codes following sysexits.h convention
EXIT_SUCCESS = 0
EXIT_USER_ERROR = 1  # Resolution error (manifest, package, cache contents)
EXIT_SYSTEM_ERROR = 2  # System error (permissions, write failure)


class CLIError(click.ClickException):
    """CLI-specific exception with exit code support.

    Attributes:
        message: User-facing error message.
        exit_code: Exit code for the CLI (default: 1).
    """

    def __init__(self, message: str, exit_code: int = EXIT_USER_ERROR) -> None:
        super().__init__(message)
        self.exit_code = exit_code

    def show(self, file: object = None) -> None:
        """Display the error message using Rich formatting.

        Args:
            file: Output file (unused, for Click compatibility).
        """
        error(self.format_message())


def handle_cdm_error(err: CdmError) -> NoReturn:
    """Re-raise a cdm error as a CLIError carrying its user message.

    Args:
        err: Resolution or registry error.

    Raises:
        CLIError: Always, with exit code 1.
    """
    raise CLIError(err.user_message) from err


def handle_permission_error(path: str, operation: str = "access") -> NoReturn:
    """Handle permission errors.

    Args:
        path: Path that caused the permission error.
        operation: Operation that failed (read, write, etc.).

    Raises:
        CLIError: Always, with exit code 2.
    """
    raise CLIError(
        f"Permission denied: Cannot {operation} {path}",
        exit_code=EXIT_SYSTEM_ERROR,
    )
