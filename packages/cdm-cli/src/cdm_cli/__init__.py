"""cdm-cli: Command-line build step for cdm.

Resolves cdm.json dependencies against the local contract cache and writes
contract bindings for build tooling.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
