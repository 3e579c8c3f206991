"""Core modules for GraphQL client generation."""

from .acquirer import LocalSchema, RemoteSchema, SchemaAcquirer, SchemaSource
from .build import BuildProject
from .compiler import Compiler, GraphQLCompiler
from .config import (
    ClientGenerationSettings,
    GenerationConfig,
    GenerationOptions,
    GenerationRequest,
    NullableValueType,
)
from .discovery import DocumentDiscoverer, OperationDocumentSet
from .errors import (
    AcquisitionError,
    AcquisitionFailed,
    BuildIntegrationError,
    CompilerError,
    ConfigError,
    DiscoveryError,
    GenerationError,
    MissingSchemaFile,
    NoDocumentsFound,
    NotADirectory,
    StrategyResolutionFailed,
)
from .operation_ids import (
    OperationIdGenerator,
    OperationIdRegistry,
    SequentialOperationIdGenerator,
    Sha256OperationIdGenerator,
)
from .orchestrator import ClientGenerationTask, RunState

__all__ = [
    # Schema acquisition
    "LocalSchema",
    "RemoteSchema",
    "SchemaAcquirer",
    "SchemaSource",
    # Discovery
    "DocumentDiscoverer",
    "OperationDocumentSet",
    # Configuration
    "ClientGenerationSettings",
    "GenerationConfig",
    "GenerationOptions",
    "GenerationRequest",
    "NullableValueType",
    # Operation IDs
    "OperationIdGenerator",
    "OperationIdRegistry",
    "SequentialOperationIdGenerator",
    "Sha256OperationIdGenerator",
    # Compiler
    "Compiler",
    "GraphQLCompiler",
    # Orchestration
    "BuildProject",
    "ClientGenerationTask",
    "RunState",
    # Errors
    "GenerationError",
    "AcquisitionError",
    "AcquisitionFailed",
    "MissingSchemaFile",
    "DiscoveryError",
    "NotADirectory",
    "NoDocumentsFound",
    "ConfigError",
    "StrategyResolutionFailed",
    "CompilerError",
    "BuildIntegrationError",
]
