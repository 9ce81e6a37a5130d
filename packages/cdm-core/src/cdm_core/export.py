"""JSON Schema export for cdm.json.

Generates a JSON Schema Draft 2020-12 document from the Manifest model for
editor autocomplete and validation of hand-edited manifests.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from cdm_core.schemas import Manifest

SCHEMA_DIALECT = "https://json-schema.org/draft/2020-12/schema"
MANIFEST_SCHEMA_ID = "https://cdm.dev/schemas/cdm.schema.json"


def export_manifest_schema(
    output_path: Path | str | None = None,
) -> dict[str, Any]:
    """Export the Manifest JSON Schema.

    Args:
        output_path: Optional path to write the schema file. Parent
            directories are created as needed.

    Returns:
        Dictionary containing the JSON Schema.

    Example:
        >>> schema = export_manifest_schema()
        >>> schema["$schema"]
        'https://json-schema.org/draft/2020-12/schema'
    """
    schema = Manifest.model_json_schema(by_alias=True)
    schema["$schema"] = SCHEMA_DIALECT
    schema["$id"] = MANIFEST_SCHEMA_ID

    if output_path is not None:
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(schema, indent=2) + "\n", encoding="utf-8")

    return schema
