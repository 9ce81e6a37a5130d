"""cdm bind command - Write the binding module for a package."""

from __future__ import annotations

from pathlib import Path

import click

from cdm_cli.errors import handle_cdm_error, handle_permission_error
from cdm_cli.output import success


@click.command("bind")
@click.argument("package")
@click.option(
    "--from",
    "start_dir",
    type=click.Path(file_okay=False),
    default=".",
    help="Directory to search upward for cdm.json [default: .]",
)
@click.option(
    "--cache-root",
    "cache_root",
    type=click.Path(file_okay=False),
    default=None,
    help="Contract cache root [default: $CDM_ROOT or ~/.cdm]",
)
@click.option(
    "-o",
    "--output",
    "output_dir",
    type=click.Path(file_okay=False),
    default=".",
    help="Directory to write the binding into [default: .]",
)
def bind(package: str, start_dir: str, cache_root: str | None, output_dir: str) -> None:
    """Generate the binding module for PACKAGE.

    Writes <identifier>.py, where the identifier is the last segment of the
    package name with non-identifier characters replaced by underscores.

    Examples:

        cdm bind token

        cdm bind @acme/price-oracle --output src/bindings
    """
    from cdm_core.errors import CdmError
    from cdm_core.resolver import DependencyResolver

    resolver = DependencyResolver(cache_root=cache_root)
    try:
        binding = resolver.bind(package, start_dir=Path(start_dir))
    except CdmError as e:
        handle_cdm_error(e)
    except PermissionError as e:
        handle_permission_error(str(e.filename or start_dir), "read")

    try:
        path = resolver.write_binding(binding, output_dir)
    except PermissionError:
        handle_permission_error(output_dir, "write to")

    success(
        f"Bound {package} (version {binding.reference.version}, "
        f"{len(binding.reference.methods)} methods) to {path}"
    )
