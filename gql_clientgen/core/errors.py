"""Exceptions raised by the client generation pipeline.

Every stage of a run raises a subclass of GenerationError. The CLI turns
any of them into a non-zero exit with the message shown to the user.
"""


class GenerationError(Exception):
    """Base class for all fatal generation errors."""


class AcquisitionError(GenerationError):
    """Raised when the introspection schema cannot be obtained."""


class MissingSchemaFile(AcquisitionError):
    """The local introspection schema file does not exist."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Introspection schema file not found: {path}")


class AcquisitionFailed(AcquisitionError):
    """Remote introspection failed or its result could not be written."""

    def __init__(self, message: str, url: str | None = None):
        self.url = url
        super().__init__(message)


class DiscoveryError(GenerationError):
    """Raised when operation documents cannot be collected."""


class NotADirectory(DiscoveryError):
    def __init__(self, path):
        self.path = path
        super().__init__(f"'{path}' must be a directory")


class NoDocumentsFound(DiscoveryError):
    def __init__(self, path, extension: str = ".graphql"):
        self.path = path
        self.extension = extension
        super().__init__(f"No '*{extension}' documents found under '{path}'")


class ConfigError(GenerationError):
    """Raised when the generation request cannot be assembled."""


class StrategyResolutionFailed(ConfigError):
    """The operation ID generator identifier could not be resolved."""

    def __init__(self, identifier: str, reason: str):
        self.identifier = identifier
        self.reason = reason
        super().__init__(
            f"Cannot resolve operation ID generator '{identifier}': {reason}"
        )


class CompilerError(GenerationError):
    """The compiler rejected the schema or the operation documents.

    Carries the compiler's own diagnostics, one entry per problem.
    """

    def __init__(self, message: str, diagnostics: list[str] | None = None):
        self.message = message
        self.diagnostics = list(diagnostics or [])
        super().__init__(message)

    def __str__(self) -> str:
        if not self.diagnostics:
            return self.message
        details = "\n".join(f"  - {d}" for d in self.diagnostics)
        return f"{self.message}\n{details}"


class BuildIntegrationError(GenerationError):
    """Registering generated sources with the host build failed."""
