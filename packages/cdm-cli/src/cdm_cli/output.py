"""Rich console output utilities for cdm-cli.

Formatted console output with Rich that respects the NO_COLOR environment
variable and the --no-color flag.
"""

from __future__ import annotations

import json
import os
from typing import Any

from rich.console import Console

# Rich respects NO_COLOR itself, but --no-color must also force plain output
_force_no_color = os.environ.get("NO_COLOR") is not None


def create_console(no_color: bool = False) -> Console:
    """Create a Rich Console instance with appropriate color settings.

    Args:
        no_color: If True, disable colored output. Also respects NO_COLOR env var.

    Returns:
        Configured Console instance.
    """
    force_terminal = None
    if no_color or _force_no_color:
        force_terminal = False
    return Console(force_terminal=force_terminal, no_color=no_color or _force_no_color)


console = create_console()


def success(message: str, **kwargs: Any) -> None:
    """Print a success message with green checkmark.

    Example:
        >>> success("Wrote binding token.py")
        ✓ Wrote binding token.py
    """
    console.print(f"[green]✓[/green] {message}", **kwargs)


def error(message: str, **kwargs: Any) -> None:
    """Print an error message with red X.

    Example:
        >>> error("Package 'token' not found in cdm.json dependencies.")
        ✗ Package 'token' not found in cdm.json dependencies.
    """
    console.print(f"[red]✗[/red] {message}", **kwargs)


def info(message: str, **kwargs: Any) -> None:
    """Print an informational message."""
    console.print(message, **kwargs)


def print_json(data: dict[str, Any], **kwargs: Any) -> None:
    """Print JSON data with syntax highlighting.

    Args:
        data: Dictionary to print as JSON.
        **kwargs: Additional arguments passed to console.print_json().
    """
    console.print_json(json.dumps(data), **kwargs)


def set_no_color(no_color: bool) -> None:
    """Replace the module-level console, enabling or disabling colors."""
    global console
    console = create_console(no_color=no_color)
