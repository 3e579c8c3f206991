"""Host build integration."""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class BuildProject:
    """In-memory view of the host build's compile source roots."""

    def __init__(self, compile_source_roots: list[str] | None = None):
        self._roots: list[str] = list(compile_source_roots or [])

    @property
    def compile_source_roots(self) -> list[str]:
        return list(self._roots)

    def add_compile_source_root(self, path: Path | str) -> None:
        """Register a directory as a compile source root.

        Registering a path that is already present leaves a single entry.
        """
        root = str(Path(path).absolute())
        if root in self._roots:
            logger.debug("Compile source root already registered: %s", root)
            return
        self._roots.append(root)
        logger.info("Added compile source root %s", root)
