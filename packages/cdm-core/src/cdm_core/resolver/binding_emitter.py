"""Binding generation for resolved cdm dependencies.

Turns a ResolvedReference into a ContractBinding and renders it as a small
Python module that build tooling splices into the calling project:

    ResolvedReference → BindingEmitter.emit() → ContractBinding
                      → ContractBinding.render() → <identifier>.py

The module defines one ContractReference constant named after the binding
identifier (the last segment of the package name, made identifier-safe).
"""

from __future__ import annotations

import json
import keyword
import logging
import re
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from cdm_core.bindings import ContractMethod, ContractReference
from cdm_core.errors import InterfaceMalformedError
from cdm_core.resolver.models import ResolvedReference
from cdm_core.schemas.artifact import ABI_DOCUMENT, AbiEntry

logger = logging.getLogger(__name__)

# Separator between scope and name in package names ("org/token")
PACKAGE_PATH_SEPARATOR = "/"

# Characters that may not appear in a binding identifier
_DISALLOWED_IDENTIFIER_CHARS = re.compile(r"[^0-9A-Za-z_]")


def derive_module_name(package_name: str) -> str:
    """Derive the binding identifier for a package.

    Takes the final path segment of the package name and replaces every
    character outside ``[A-Za-z0-9_]`` with an underscore. A leading digit
    gets an underscore prefix and Python keywords an underscore suffix.

    Args:
        package_name: Package name, optionally scoped ("org/my-token").

    Returns:
        Identifier-safe binding name.

    Example:
        >>> derive_module_name("@acme/price-oracle")
        'price_oracle'
    """
    segment = package_name.rsplit(PACKAGE_PATH_SEPARATOR, 1)[-1]
    identifier = _DISALLOWED_IDENTIFIER_CHARS.sub("_", segment) or "_"
    if identifier[0].isdigit():
        identifier = f"_{identifier}"
    if keyword.iskeyword(identifier):
        identifier = f"{identifier}_"
    return identifier


@dataclass(frozen=True)
class ContractBinding:
    """A generated binding for one resolved package.

    Attributes:
        module_name: Binding identifier, also the generated module name.
        reference: The reference the generated module defines.
    """

    module_name: str
    reference: ContractReference

    @property
    def file_name(self) -> str:
        return f"{self.module_name}.py"

    def render(self) -> str:
        """Render the binding as Python source."""
        ref = self.reference
        lines = [
            f'"""Contract binding for {ref.package!r}.',
            "",
            "Generated by cdm. Do not edit; rerun `cdm bind` instead.",
            '"""',
            "",
            "from cdm_core.bindings import ContractMethod, ContractReference",
            "",
            f"{self.module_name} = ContractReference(",
            f"    name={ref.name!r},",
            f"    package={ref.package!r},",
            f"    target={ref.target!r},",
            f"    version={ref.version!r},",
            f"    abi_path={ref.abi_path!r},",
            "    methods=(",
        ]
        lines.extend(
            f"        ContractMethod({m.name!r}, {m.signature!r}, read_only={m.read_only!r}),"
            for m in ref.methods
        )
        lines.extend(
            [
                "    ),",
                ")",
                "",
                f"__all__ = [{self.module_name!r}]",
                "",
            ]
        )
        return "\n".join(lines)


class BindingEmitter:
    """Emit bindings from resolved references.

    Example:
        >>> emitter = BindingEmitter()
        >>> binding = emitter.emit(reference)
        >>> emitter.write(binding, Path("generated"))
        PosixPath('generated/my_token.py')
    """

    def emit(self, reference: ResolvedReference) -> ContractBinding:
        """Build the binding for a resolved reference.

        Args:
            reference: Output of the resolution pipeline.

        Returns:
            ContractBinding keyed by the derived identifier.

        Raises:
            InterfaceMalformedError: If abi.json is not a valid ABI document.
        """
        entries = self._load_abi(reference.artifact_path)
        module_name = derive_module_name(reference.package_name)

        methods = tuple(
            ContractMethod(
                name=entry.name or "",
                signature=entry.signature(),
                read_only=entry.is_read_only,
            )
            for entry in entries
            if entry.is_function
        )

        logger.debug(
            "Emitting binding %s for %s@%s (%d methods)",
            module_name,
            reference.package_name,
            reference.version,
            len(methods),
        )
        return ContractBinding(
            module_name=module_name,
            reference=ContractReference(
                name=module_name,
                package=reference.package_name,
                target=reference.target_id,
                version=reference.version,
                abi_path=str(reference.artifact_path),
                methods=methods,
            ),
        )

    def write(self, binding: ContractBinding, output_dir: Path | str) -> Path:
        """Write a rendered binding module into a directory.

        Args:
            binding: Binding to render.
            output_dir: Destination directory, created if needed.

        Returns:
            Path of the written module.
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        path = output_dir / binding.file_name
        path.write_text(binding.render(), encoding="utf-8")
        logger.info("Wrote binding %s", path)
        return path

    def _load_abi(self, abi_path: Path) -> list[AbiEntry]:
        try:
            data = json.loads(abi_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise InterfaceMalformedError(abi_path, str(e)) from e

        if not isinstance(data, list):
            raise InterfaceMalformedError(
                abi_path,
                f"expected a list of ABI entries, got {type(data).__name__}",
            )

        try:
            return ABI_DOCUMENT.validate_python(data)
        except PydanticValidationError as e:
            raise InterfaceMalformedError(
                abi_path,
                f"ABI validation failed with {e.error_count()} error(s)",
                internal_details=str(e),
            ) from e
