"""Configuration for a client generation run.

ClientGenerationSettings is the full invocation surface: paths, remote schema
access, run flags and the options forwarded to the compiler. It validates raw
input from the CLI or a YAML file.

GenerationConfig turns settings into the immutable GenerationRequest handed
to the compiler.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigError
from .operation_ids import OperationIdGenerator, OperationIdRegistry

logger = logging.getLogger(__name__)


class NullableValueType(str, Enum):
    """How nullable values are spelled in generated code."""
    OPTIONAL = "optional"  # Optional[T]
    UNION = "union"  # T | None


class GenerationOptions(BaseModel):
    """Options forwarded verbatim to the compiler.

    No cross-field validation happens here; interpreting combinations is up
    to the compiler.
    """

    model_config = ConfigDict(frozen=True)

    custom_type_map: dict[str, str] = Field(default_factory=dict)
    nullable_value_type: NullableValueType = NullableValueType.OPTIONAL
    use_semantic_naming: bool = True
    generate_model_builder: bool = True
    suppress_raw_types_warning: bool = False
    use_bean_semantic_naming: bool = True
    generate_dataclass_models: bool = False
    generate_as_internal: bool = False
    generate_visitor_for_polymorphic_datatypes: bool = True
    enum_as_literal_pattern_filters: tuple[str, ...] = ()

    def as_mapping(self) -> dict[str, Any]:
        """Return the options as a flat name -> value mapping."""
        return self.model_dump()


class ClientGenerationSettings(BaseModel):
    """Every parameter a run accepts, with its default.

    Relative paths are resolved against base_directory.
    """

    model_config = ConfigDict(extra="forbid")

    base_directory: Path = Path(".")
    introspection_file: Path = Path("graphql/schema.json")
    output_directory: Path = Path("generated/graphql_client")
    source_directory: Path = Path("graphql")
    root_package_name: str = "graphql_client"

    schema_url: str = "http://localhost/graphql"
    schema_url_headers: dict[str, str] = Field(default_factory=dict)
    use_self_signed_certificate: bool = False
    introspection_timeout: float = 30.0

    operation_id_generator: str = ""
    generate_introspection_file: bool = False
    skip: bool = False
    add_source_root: bool = True

    custom_type_map: dict[str, str] = Field(default_factory=dict)
    nullable_value_type: NullableValueType = NullableValueType.OPTIONAL
    use_semantic_naming: bool = True
    generate_model_builder: bool = True
    suppress_raw_types_warning: bool = False
    use_bean_semantic_naming: bool = True
    generate_dataclass_models: bool = False
    generate_as_internal: bool = False
    generate_visitor_for_polymorphic_datatypes: bool = True
    enum_as_literal_pattern_filters: list[str] = Field(default_factory=list)

    @classmethod
    def from_file(cls, path: Path, **overrides: Any) -> "ClientGenerationSettings":
        """Load settings from a YAML file, then apply explicit overrides.

        A relative base_directory in the file is taken relative to the file.
        """
        path = Path(path)
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read configuration file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration file {path} must contain a mapping")

        data.setdefault("base_directory", ".")
        data["base_directory"] = path.parent / data["base_directory"]
        data.update(overrides)
        return cls.validated(data, origin=str(path))

    @classmethod
    def validated(cls, data: dict[str, Any], origin: str = "settings") -> "ClientGenerationSettings":
        """Validate raw settings, reporting failures as ConfigError."""
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid {origin}: {e}") from e

    def resolve_path(self, path: Path) -> Path:
        """Return path as an absolute path anchored at base_directory."""
        return (Path(self.base_directory) / path).resolve()

    def generation_options(self) -> GenerationOptions:
        return GenerationOptions(
            custom_type_map=self.custom_type_map,
            nullable_value_type=self.nullable_value_type,
            use_semantic_naming=self.use_semantic_naming,
            generate_model_builder=self.generate_model_builder,
            suppress_raw_types_warning=self.suppress_raw_types_warning,
            use_bean_semantic_naming=self.use_bean_semantic_naming,
            generate_dataclass_models=self.generate_dataclass_models,
            generate_as_internal=self.generate_as_internal,
            generate_visitor_for_polymorphic_datatypes=self.generate_visitor_for_polymorphic_datatypes,
            enum_as_literal_pattern_filters=tuple(self.enum_as_literal_pattern_filters),
        )


@dataclass(frozen=True)
class GenerationRequest:
    """Everything the compiler needs for one run. Paths are absolute."""
    introspection_file: Path
    output_directory: Path
    source_directory: Path
    root_package_name: str
    options: GenerationOptions
    operation_id_generator: OperationIdGenerator

    def __post_init__(self):
        for name in ("introspection_file", "output_directory", "source_directory"):
            if not getattr(self, name).is_absolute():
                raise ConfigError(f"{name} must be absolute, got {getattr(self, name)}")


class GenerationConfig:
    """Builds a GenerationRequest from settings.

    The operation ID generator is taken from, in order: the instance passed
    here, the settings' operation_id_generator identifier resolved through
    the registry, or the SHA-256 default.
    """

    def __init__(
        self,
        settings: ClientGenerationSettings,
        operation_id_generator: OperationIdGenerator | None = None,
        registry: OperationIdRegistry | None = None,
    ):
        self.settings = settings
        self.operation_id_generator = operation_id_generator
        self.registry = registry or OperationIdRegistry()

    def build(self) -> GenerationRequest:
        """Assemble the request.

        Raises:
            StrategyResolutionFailed: The configured strategy cannot be resolved
            ConfigError: Any other invalid setting
        """
        settings = self.settings
        if not all(part.isidentifier() for part in settings.root_package_name.split(".")):
            raise ConfigError(f"Invalid root package name: '{settings.root_package_name}'")

        generator = self.operation_id_generator
        if generator is None:
            generator = self.registry.resolve(settings.operation_id_generator)
        logger.debug("Using operation ID generator %s", type(generator).__name__)

        return GenerationRequest(
            introspection_file=settings.resolve_path(settings.introspection_file),
            output_directory=settings.resolve_path(settings.output_directory),
            source_directory=settings.resolve_path(settings.source_directory),
            root_package_name=settings.root_package_name,
            options=settings.generation_options(),
            operation_id_generator=generator,
        )
