"""Operation document discovery."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .errors import NoDocumentsFound, NotADirectory

logger = logging.getLogger(__name__)

DOCUMENT_EXTENSION = ".graphql"


@dataclass(frozen=True)
class OperationDocumentSet:
    """Ordered, non-empty collection of operation documents under a root."""
    root: Path
    files: tuple[Path, ...]
    extension: str = DOCUMENT_EXTENSION

    def __post_init__(self):
        if not self.files:
            raise NoDocumentsFound(self.root, self.extension)

    def __iter__(self):
        return iter(self.files)

    def __len__(self) -> int:
        return len(self.files)

    def relative_parent(self, path: Path) -> Path:
        """Return the directory of path relative to the document root."""
        return Path(path).parent.relative_to(self.root)


class DocumentDiscoverer:
    """Collects operation documents from a source directory tree."""

    def discover(self, root: Path, extension: str = DOCUMENT_EXTENSION) -> OperationDocumentSet:
        """Walk root recursively and collect every file ending with extension.

        Entries are visited in sorted order at every level, so repeated runs
        over an unchanged tree return the same sequence.

        Raises:
            NotADirectory: root is missing or is not a directory
            NoDocumentsFound: no matching file exists under root
        """
        root = Path(root).absolute()
        if not root.is_dir():
            raise NotADirectory(root)

        files = []
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames.sort()
            for filename in sorted(filenames):
                path = Path(dirpath) / filename
                if filename.endswith(extension) and path.is_file():
                    files.append(path)

        logger.debug("Found %d '*%s' documents under %s", len(files), extension, root)
        return OperationDocumentSet(root=root, files=tuple(files), extension=extension)
