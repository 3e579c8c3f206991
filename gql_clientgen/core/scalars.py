"""Scalar type mapping for generated code.

Maps GraphQL scalar names to the Python type written in generated modules
and the import that type needs.

Example usage:
    registry = ScalarRegistry({"Money": "decimal.Decimal"})
    registry.get("Money")     # ScalarMapping("Decimal", "from decimal import Decimal")
    registry.get("DateTime")  # ScalarMapping("datetime", "from datetime import datetime")
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ScalarMapping:
    """Python type for one GraphQL scalar.

    Attributes:
        python_type: The type name used in annotations (e.g., "Decimal")
        import_statement: The import needed for it, or None for builtins
    """
    python_type: str
    import_statement: str | None = None

    @classmethod
    def from_qualified_name(cls, qualified_name: str) -> "ScalarMapping":
        """Build a mapping from "module.Type"; a bare name is a builtin."""
        module, _, name = qualified_name.rpartition(".")
        if not module or module == "builtins":
            return cls(python_type=name)
        return cls(python_type=name, import_statement=f"from {module} import {name}")


BUILTIN_SCALARS = {
    "String": ScalarMapping("str"),
    "Int": ScalarMapping("int"),
    "Float": ScalarMapping("float"),
    "Boolean": ScalarMapping("bool"),
    "ID": ScalarMapping("str"),
}

FALLBACK_SCALAR = ScalarMapping("Any", "from typing import Any")


class ScalarRegistry:
    """Registry of scalar mappings.

    Built-in GraphQL scalars and a few common custom scalars are registered
    by default. The custom type map passed in takes precedence.
    """

    def __init__(self, custom_type_map: dict[str, str] | None = None):
        self._mappings: dict[str, ScalarMapping] = dict(BUILTIN_SCALARS)
        self._register_defaults()
        for scalar_name, qualified_name in (custom_type_map or {}).items():
            self.register(scalar_name, ScalarMapping.from_qualified_name(qualified_name))

    def _register_defaults(self):
        """Register well-known custom scalars."""
        self.register("DateTime", ScalarMapping("datetime", "from datetime import datetime"))
        self.register("Date", ScalarMapping("date", "from datetime import date"))
        self.register("UUID", ScalarMapping("UUID", "from uuid import UUID"))
        self.register("JSON", FALLBACK_SCALAR)

    def register(self, scalar_name: str, mapping: ScalarMapping):
        self._mappings[scalar_name] = mapping

    def get(self, scalar_name: str) -> ScalarMapping:
        """Return the mapping for a scalar; unknown scalars map to Any."""
        return self._mappings.get(scalar_name, FALLBACK_SCALAR)

    def has(self, scalar_name: str) -> bool:
        return scalar_name in self._mappings

    def imports_for(self, scalar_names) -> list[str]:
        """Return the sorted imports needed for the given scalars."""
        imports = {self.get(name).import_statement for name in scalar_names}
        imports.discard(None)
        return sorted(imports)
