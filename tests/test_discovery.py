"""Tests for operation document discovery."""

import pytest

from gql_clientgen.core.discovery import DocumentDiscoverer, OperationDocumentSet
from gql_clientgen.core.errors import NoDocumentsFound, NotADirectory


@pytest.fixture
def source_dir(tmp_path):
    """A document tree with unrelated files mixed in."""
    root = tmp_path / "graphql"
    (root / "b").mkdir(parents=True)
    (root / "a" / "deep").mkdir(parents=True)
    (root / "Root.graphql").write_text("query Root { a }")
    (root / "b" / "Two.graphql").write_text("query Two { a }")
    (root / "a" / "One.graphql").write_text("query One { a }")
    (root / "a" / "deep" / "Three.graphql").write_text("query Three { a }")
    (root / "schema.json").write_text("{}")
    (root / "notes.graphql.bak").write_text("")
    (root / "a" / "dir.graphql").mkdir()
    return root


class TestDocumentDiscoverer:
    """Tests for DocumentDiscoverer."""

    def test_collects_recursively(self, source_dir):
        documents = DocumentDiscoverer().discover(source_dir)
        names = sorted(p.name for p in documents)
        assert names == ["One.graphql", "Root.graphql", "Three.graphql", "Two.graphql"]

    def test_deterministic_order(self, source_dir):
        documents = DocumentDiscoverer().discover(source_dir)
        relative = [p.relative_to(source_dir).as_posix() for p in documents]
        assert relative == [
            "Root.graphql",
            "a/One.graphql",
            "a/deep/Three.graphql",
            "b/Two.graphql",
        ]

    def test_repeated_runs_match(self, source_dir):
        discoverer = DocumentDiscoverer()
        assert discoverer.discover(source_dir).files == discoverer.discover(source_dir).files

    def test_paths_are_absolute(self, source_dir, monkeypatch):
        monkeypatch.chdir(source_dir.parent)
        documents = DocumentDiscoverer().discover("graphql")
        assert documents.root == source_dir
        assert all(p.is_absolute() for p in documents)

    def test_custom_extension(self, source_dir):
        (source_dir / "Extra.gql").write_text("query Extra { a }")
        documents = DocumentDiscoverer().discover(source_dir, extension=".gql")
        assert [p.name for p in documents] == ["Extra.gql"]

    def test_missing_directory(self, tmp_path):
        with pytest.raises(NotADirectory) as exc:
            DocumentDiscoverer().discover(tmp_path / "missing")
        assert "must be a directory" in str(exc.value)

    def test_file_is_not_a_directory(self, source_dir):
        with pytest.raises(NotADirectory):
            DocumentDiscoverer().discover(source_dir / "Root.graphql")

    def test_no_documents(self, tmp_path):
        (tmp_path / "schema.json").write_text("{}")
        with pytest.raises(NoDocumentsFound) as exc:
            DocumentDiscoverer().discover(tmp_path)
        assert str(tmp_path) in str(exc.value)


class TestOperationDocumentSet:
    """Tests for OperationDocumentSet."""

    def test_empty_set_is_rejected(self, tmp_path):
        with pytest.raises(NoDocumentsFound):
            OperationDocumentSet(root=tmp_path, files=())

    def test_relative_parent(self, tmp_path):
        path = tmp_path / "users" / "Get.graphql"
        documents = OperationDocumentSet(root=tmp_path, files=(path,))
        assert documents.relative_parent(path).as_posix() == "users"
        assert len(documents) == 1
