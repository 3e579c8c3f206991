"""Sequencing of a client generation run.

A run moves through these states, stopping at the first failure:

    IDLE -> DOCUMENTS_READY -> SCHEMA_READY -> CONFIGURED -> GENERATED -> INTEGRATED

Operation documents are discovered before the schema is acquired, so a
misconfigured source directory fails the run without any network access.
A run with skip set ends in SKIPPED without touching the filesystem or the
network.
"""

import logging
from enum import Enum

from .acquirer import LocalSchema, RemoteSchema, SchemaAcquirer
from .build import BuildProject
from .compiler import Compiler, GraphQLCompiler
from .config import ClientGenerationSettings, GenerationConfig, GenerationRequest
from .discovery import DOCUMENT_EXTENSION, DocumentDiscoverer, OperationDocumentSet
from .errors import BuildIntegrationError, CompilerError, GenerationError
from .operation_ids import OperationIdGenerator, OperationIdRegistry

logger = logging.getLogger(__name__)


class RunState(Enum):
    IDLE = "idle"
    DOCUMENTS_READY = "documents_ready"
    SCHEMA_READY = "schema_ready"
    CONFIGURED = "configured"
    GENERATED = "generated"
    INTEGRATED = "integrated"
    SKIPPED = "skipped"
    FAILED = "failed"


class ClientGenerationTask:
    """Runs the whole pipeline for one set of settings.

    Collaborators are injectable; the defaults talk to the real filesystem,
    network and compiler.

    Example:
        project = BuildProject()
        task = ClientGenerationTask(ClientGenerationSettings(base_directory=root), project=project)
        task.execute()
        project.compile_source_roots  # [".../generated/graphql_client"]
    """

    def __init__(
        self,
        settings: ClientGenerationSettings,
        *,
        project: BuildProject | None = None,
        compiler: Compiler | None = None,
        acquirer: SchemaAcquirer | None = None,
        discoverer: DocumentDiscoverer | None = None,
        operation_id_generator: OperationIdGenerator | None = None,
        registry: OperationIdRegistry | None = None,
    ):
        self.settings = settings
        self.project = project or BuildProject()
        self.compiler = compiler or GraphQLCompiler()
        self.acquirer = acquirer or SchemaAcquirer(timeout=settings.introspection_timeout)
        self.discoverer = discoverer or DocumentDiscoverer()
        self.operation_id_generator = operation_id_generator
        self.registry = registry

        self.state = RunState.IDLE
        self.failure: GenerationError | None = None
        self.documents: OperationDocumentSet | None = None
        self.request: GenerationRequest | None = None

    def execute(self) -> RunState:
        """Run every stage in order and return the final state.

        Raises:
            GenerationError: Any stage failed; the task is left in FAILED
        """
        self.state = RunState.IDLE
        self.failure = None

        if self.settings.skip:
            logger.info("Skipping execution because skip option is true")
            self.state = RunState.SKIPPED
            return self.state

        logger.info("GraphQL client code generation started")
        try:
            self._run()
        except GenerationError as e:
            self._fail(e)
            raise
        except Exception as e:
            error = GenerationError(f"Unexpected error during {self.state.value}: {e}")
            self._fail(error)
            raise error from e
        logger.info("GraphQL client code generation finished")
        return self.state

    def _fail(self, error: GenerationError):
        self.state = RunState.FAILED
        self.failure = error
        logger.error("GraphQL client code generation failed: %s", error)

    def _run(self):
        settings = self.settings

        logger.info("Reading operation documents")
        source_directory = settings.resolve_path(settings.source_directory)
        self.documents = self.discoverer.discover(source_directory, DOCUMENT_EXTENSION)
        self.state = RunState.DOCUMENTS_READY

        schema_file = settings.resolve_path(settings.introspection_file)
        if settings.generate_introspection_file:
            logger.info("Generating introspection file from %s", settings.schema_url)
            self.acquirer.acquire(
                RemoteSchema(
                    url=settings.schema_url,
                    headers=dict(settings.schema_url_headers),
                    insecure=settings.use_self_signed_certificate,
                ),
                schema_file,
            )
        self.acquirer.acquire(LocalSchema(schema_file), schema_file)
        self.state = RunState.SCHEMA_READY

        self.request = GenerationConfig(
            settings,
            operation_id_generator=self.operation_id_generator,
            registry=self.registry,
        ).build()
        self.state = RunState.CONFIGURED

        self._compile(self.request, self.documents)
        self.state = RunState.GENERATED

        if settings.add_source_root:
            logger.info("Adding generated sources to the compile source roots")
            try:
                self.project.add_compile_source_root(self.request.output_directory)
            except Exception as e:
                raise BuildIntegrationError(
                    f"Cannot add compile source root {self.request.output_directory}: {e}"
                ) from e
            self.state = RunState.INTEGRATED

    def _compile(self, request: GenerationRequest, documents: OperationDocumentSet):
        """Invoke the compiler once for the whole document set."""
        try:
            ir = self.compiler.parse(request.introspection_file, documents)
            self.compiler.generate(ir, request)
        except CompilerError:
            raise
        except Exception as e:
            raise CompilerError(f"Compiler failed: {e}", [repr(e)]) from e
        logger.info("Generated client sources in %s", request.output_directory)
