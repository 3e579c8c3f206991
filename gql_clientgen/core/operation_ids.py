"""Operation ID generators.

Every generated operation carries an identifier, typically used for
persisted queries. The identifier comes from an OperationIdGenerator.

Unless configured otherwise the identifier is the SHA-256 hex digest of the
printed operation document. Changing the generator changes every generated
OPERATION_ID, so the default is part of the public contract.

Example usage:
    from gql_clientgen.core.operation_ids import OperationIdRegistry

    # Built-in strategies
    registry = OperationIdRegistry()
    generator = registry.resolve("sequential")

    # Custom strategy
    class Md5Ids:
        def apply(self, operation_document, operation_filepath):
            return hashlib.md5(operation_document.encode()).hexdigest()

    registry.register("md5", Md5Ids)

    # Late binding from an importable class, "package.module:Class"
    generator = registry.resolve("my_project.ids:Md5Ids")
"""

import hashlib
import importlib
from typing import Callable, Protocol, runtime_checkable

from .errors import StrategyResolutionFailed

DEFAULT_OPERATION_ID_GENERATOR = "sha256"


@runtime_checkable
class OperationIdGenerator(Protocol):
    """Protocol for operation ID strategies."""

    def apply(self, operation_document: str, operation_filepath: str) -> str:
        """Return the identifier for one operation.

        Args:
            operation_document: The printed operation, fragments included
            operation_filepath: The document file the operation came from
        """
        ...


class Sha256OperationIdGenerator:
    """SHA-256 of the operation document (the default)."""

    def apply(self, operation_document: str, operation_filepath: str) -> str:
        return hashlib.sha256(operation_document.encode("utf-8")).hexdigest()


class SequentialOperationIdGenerator:
    """Numbers operations "1", "2", ... in generation order."""

    def __init__(self):
        self._counter = 0

    def apply(self, operation_document: str, operation_filepath: str) -> str:
        self._counter += 1
        return str(self._counter)


class OperationIdRegistry:
    """Registry of operation ID strategies.

    Maps short names to factories. Each resolve() builds a fresh instance, so
    stateful strategies never leak between runs.
    """

    def __init__(self):
        self._factories: dict[str, Callable[[], OperationIdGenerator]] = {}
        self._register_defaults()

    def _register_defaults(self):
        """Register built-in strategies."""
        self.register("sha256", Sha256OperationIdGenerator)
        self.register("sequential", SequentialOperationIdGenerator)

    def register(self, name: str, factory: Callable[[], OperationIdGenerator]):
        """Register a factory under a short name."""
        self._factories[name] = factory

    def has(self, name: str) -> bool:
        return name in self._factories

    @property
    def names(self) -> list[str]:
        return sorted(self._factories)

    def resolve(self, identifier: str | None) -> OperationIdGenerator:
        """Return a generator for a registered name or an importable class.

        An empty identifier selects the SHA-256 default.

        Raises:
            StrategyResolutionFailed: identifier is neither registered nor
                importable, or does not produce an OperationIdGenerator
        """
        name = (identifier or "").strip() or DEFAULT_OPERATION_ID_GENERATOR
        factory = self._factories.get(name)
        if factory is None:
            factory = self._import_factory(name)

        try:
            generator = factory()
        except Exception as e:
            raise StrategyResolutionFailed(name, f"cannot be instantiated ({e})") from e

        if not isinstance(generator, OperationIdGenerator):
            raise StrategyResolutionFailed(
                name, f"{type(generator).__name__} has no apply(operation_document, operation_filepath) method"
            )
        return generator

    def _import_factory(self, identifier: str) -> Callable[[], OperationIdGenerator]:
        """Load "package.module:Class" or "package.module.Class"."""
        if ":" in identifier:
            module_name, _, attr = identifier.partition(":")
        else:
            module_name, _, attr = identifier.rpartition(".")
        if not module_name or not attr or module_name.startswith("."):
            raise StrategyResolutionFailed(
                identifier,
                f"not a registered name ({', '.join(self.names)}) or an importable class path",
            )

        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise StrategyResolutionFailed(identifier, f"module '{module_name}' not found") from e
        except Exception as e:
            raise StrategyResolutionFailed(identifier, f"module '{module_name}' failed to import ({e})") from e

        factory = getattr(module, attr, None)
        if factory is None:
            raise StrategyResolutionFailed(identifier, f"'{module_name}' has no attribute '{attr}'")
        if not callable(factory):
            raise StrategyResolutionFailed(identifier, f"'{attr}' is not instantiable")
        return factory
