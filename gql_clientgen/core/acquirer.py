"""Introspection schema acquisition.

A run reads its schema from a local file. When asked to, the file is first
refreshed from a live endpoint with the standard introspection query:

    acquirer = SchemaAcquirer(timeout=10.0)
    acquirer.acquire(RemoteSchema("https://api.example.com/graphql"), path)
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

import httpx
from graphql import get_introspection_query

from .errors import AcquisitionFailed, MissingSchemaFile
from .files import write_atomic

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocalSchema:
    """Schema read from an existing file."""
    path: Path


@dataclass(frozen=True)
class RemoteSchema:
    """Schema fetched from a GraphQL endpoint by introspection."""
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    # Accept self-signed or otherwise invalid certificates for this call only
    insecure: bool = False


SchemaSource = Union[LocalSchema, RemoteSchema]


class SchemaAcquirer:
    """Makes sure an introspection schema is available at a known path."""

    def __init__(
        self,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the acquirer.

        Args:
            timeout: Bound for the introspection request, in seconds
            transport: Optional httpx transport, used to stub the endpoint
        """
        self.timeout = timeout
        self.transport = transport

    def acquire(self, source: SchemaSource, destination: Path) -> None:
        """Materialize the schema described by source at destination.

        Raises:
            MissingSchemaFile: A local source does not point to a file
            AcquisitionFailed: The remote fetch or the write failed
        """
        if isinstance(source, LocalSchema):
            path = Path(source.path)
            if not path.is_file():
                raise MissingSchemaFile(path.absolute())
            return

        body = self._fetch(source)
        destination = Path(destination)
        if destination.exists():
            logger.warning(
                "Overwriting introspection file %s with schema from %s",
                destination, source.url,
            )
        try:
            write_atomic(destination, body)
        except OSError as e:
            raise AcquisitionFailed(
                f"Error, can't write introspection file {destination}: {e}",
                url=source.url,
            ) from e
        logger.info("Wrote introspection schema to %s (%d bytes)", destination, len(body))

    def _build_client(self, source: RemoteSchema) -> httpx.Client:
        """Create the client used for a single introspection call."""
        headers = {"Content-Type": "application/json"}
        headers.update(source.headers)
        return httpx.Client(
            timeout=self.timeout,
            headers=headers,
            verify=not source.insecure,
            transport=self.transport,
        )

    def _fetch(self, source: RemoteSchema) -> bytes:
        """POST the introspection query and return the raw response body."""
        if source.insecure:
            logger.warning("Certificate validation disabled for %s", source.url)
        payload = {
            "operationName": "IntrospectionQuery",
            "query": get_introspection_query(),
        }
        try:
            with self._build_client(source) as client:
                response = client.post(source.url, json=payload)
                response.raise_for_status()
                body = response.content
        except httpx.TimeoutException as e:
            raise AcquisitionFailed(
                f"Timed out after {self.timeout}s fetching introspection schema from: {source.url}",
                url=source.url,
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise AcquisitionFailed(
                f"Error, can't generate introspection schema file from: {source.url} ({e})",
                url=source.url,
            ) from e

        if not body.strip():
            raise AcquisitionFailed(
                f"Error, empty introspection schema returned by: {source.url}",
                url=source.url,
            )
        return body
