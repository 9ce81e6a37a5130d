"""cdm schema command - Export JSON Schema for cdm.json."""

from __future__ import annotations

import click

from cdm_cli.errors import handle_permission_error
from cdm_cli.output import success


@click.group()
def schema() -> None:
    """Manage JSON Schema for IDE support.

    **Commands:**

    - `cdm schema export` - Export the cdm.json JSON Schema
    """


@schema.command("export")
@click.option(
    "-o",
    "--output",
    "output_path",
    type=click.Path(dir_okay=False),
    default="./schemas/cdm.schema.json",
    help="Output path [default: ./schemas/cdm.schema.json]",
)
def export_schema(output_path: str) -> None:
    """Export the cdm.json JSON Schema.

    Examples:

        cdm schema export

        cdm schema export --output custom/path/cdm.schema.json
    """
    from cdm_core.export import export_manifest_schema

    try:
        export_manifest_schema(output_path)
    except PermissionError:
        handle_permission_error(output_path, "write to")

    success(f"Schema exported to {output_path}")
