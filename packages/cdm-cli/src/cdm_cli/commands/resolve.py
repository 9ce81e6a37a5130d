"""cdm resolve command - Resolve a package to its installed artifact."""

from __future__ import annotations

from pathlib import Path

import click

from cdm_cli.errors import handle_cdm_error, handle_permission_error
from cdm_cli.output import info, print_json, success


@click.command("resolve")
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
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Print the resolved reference as JSON.",
)
def resolve(package: str, start_dir: str, cache_root: str | None, as_json: bool) -> None:
    """Resolve PACKAGE against cdm.json and the local cache.

    Examples:

        cdm resolve token

        cdm resolve @acme/price-oracle --from contracts/app --json
    """
    # Import here to avoid heavy imports at CLI startup
    from cdm_core.errors import CdmError
    from cdm_core.resolver import DependencyResolver

    resolver = DependencyResolver(cache_root=cache_root)
    try:
        reference = resolver.resolve(package, start_dir=Path(start_dir))
        contract = resolver.read_info(reference)
    except CdmError as e:
        handle_cdm_error(e)
    except PermissionError as e:
        handle_permission_error(str(e.filename or start_dir), "read")

    if as_json:
        data = reference.to_dict()
        if contract is not None:
            data["address"] = contract.address
        print_json(data)
        return

    success(f"{reference.package_name} → version {reference.version}")
    info(f"  target:   {reference.target_id}")
    info(f"  artifact: {reference.artifact_path}")
    if contract is not None:
        info(f"  address:  {contract.address}")
