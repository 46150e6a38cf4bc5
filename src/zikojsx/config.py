"""
Compiler configuration.

Options come from the ``[tool.zikojsx]`` table of the nearest
``pyproject.toml`` and can be overridden per call (the CLI passes its flags
as overrides).
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

log = logging.getLogger(__name__)

TOOL_SECTION = "zikojsx"


@dataclass(frozen=True)
class CompilerOptions:
    """Naming conventions of the generated code."""

    # Identifier the intrinsic tag functions are destructured from.
    binding: str = "tags"
    # Module the binding is imported from.
    module: str = "ziko/ui"
    # Declaration keyword of the hoisting declarations.
    declaration_kind: str = "const"
    # Files picked up by build and watch.
    extensions: Tuple[str, ...] = (".jsx", ".tsx")

    def __post_init__(self) -> None:
        if not self.binding.isidentifier():
            raise ValueError(f"Binding must be an identifier, got {self.binding!r}")
        if self.declaration_kind not in ("const", "let", "var"):
            raise ValueError(
                f"Unknown declaration kind {self.declaration_kind!r} "
                "(expected const, let or var)"
            )

    def matches(self, path: Path) -> bool:
        """True when ``path`` should be compiled."""
        return path.suffix in self.extensions

    @classmethod
    def load(
        cls, search_path: Optional[Path] = None, **overrides: Any
    ) -> "CompilerOptions":
        """Read ``pyproject.toml`` settings and apply non-None overrides."""
        settings, _ = _load_toml_settings(search_path or Path.cwd())
        known = {f.name for f in fields(cls)}

        values: Dict[str, Any] = {}
        for key, value in settings.items():
            key = key.replace("-", "_")
            if key not in known:
                log.warning("Ignoring unknown option '%s' in [tool.%s]", key, TOOL_SECTION)
                continue
            values[key] = value
        values.update({k: v for k, v in overrides.items() if v is not None})

        if "extensions" in values:
            values["extensions"] = tuple(values["extensions"])
        return replace(cls(), **values)


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
    """Search ``start_path`` and its parents for ``pyproject.toml``."""
    current = start_path.resolve()

    for parent in [current, *current.parents]:
        toml_path = parent / "pyproject.toml"
        if toml_path.is_file():
            with open(toml_path, "rb") as f:
                data = tomllib.load(f)
            return data.get("tool", {}).get(TOOL_SECTION, {}), parent

    return {}, None
