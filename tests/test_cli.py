"""Tests for the command-line interface."""

import pytest
from click.testing import CliRunner

from gql_clientgen.cli import main


@pytest.fixture
def runner():
    return CliRunner()


class TestGenerateCommand:
    """Tests for `gql-clientgen generate`."""

    def test_generates_with_defaults(self, runner, project_dir):
        result = runner.invoke(main, ["generate", "--base-dir", str(project_dir)])

        assert result.exit_code == 0, result.output
        assert "Done! Generated code in" in result.output
        assert "Compile source root:" in result.output
        assert (project_dir / "generated" / "graphql_client" / "graphql_client" / "get_user.py").is_file()

    def test_explicit_paths(self, runner, project_dir, tmp_path):
        output = tmp_path / "out"
        result = runner.invoke(main, [
            "generate",
            "-s", str(project_dir / "graphql"),
            "-i", str(project_dir / "graphql" / "schema.json"),
            "-o", str(output),
            "--root-package", "acme_client",
            "--no-add-source-root",
        ])

        assert result.exit_code == 0, result.output
        assert (output / "acme_client" / "get_user.py").is_file()
        assert "Compile source root:" not in result.output

    def test_missing_source_directory(self, runner, tmp_path):
        result = runner.invoke(main, ["generate", "--base-dir", str(tmp_path)])

        assert result.exit_code == 1
        assert "must be a directory" in result.output

    def test_skip(self, runner, tmp_path):
        result = runner.invoke(main, ["generate", "--base-dir", str(tmp_path), "--skip"])

        assert result.exit_code == 0
        assert "Skipped." in result.output
        assert list(tmp_path.iterdir()) == []

    def test_config_file(self, runner, project_dir):
        config = project_dir / "graphql-client.yaml"
        config.write_text(
            "root_package_name: from_config\n"
            "nullable_value_type: union\n"
            "custom_type_map:\n"
            "  Money: decimal.Decimal\n"
        )

        result = runner.invoke(main, ["generate", "--config", str(config)])

        assert result.exit_code == 0, result.output
        assert (project_dir / "generated" / "graphql_client" / "from_config" / "get_user.py").is_file()

    def test_options_override_config_file(self, runner, project_dir):
        config = project_dir / "graphql-client.yaml"
        config.write_text("root_package_name: from_config\n")

        result = runner.invoke(main, [
            "generate", "--config", str(config), "--root-package", "from_cli",
        ])

        assert result.exit_code == 0, result.output
        assert (project_dir / "generated" / "graphql_client" / "from_cli").is_dir()
        assert not (project_dir / "generated" / "graphql_client" / "from_config").exists()

    def test_invalid_config_file(self, runner, tmp_path):
        config = tmp_path / "graphql-client.yaml"
        config.write_text("unknown_setting: 1\n")

        result = runner.invoke(main, ["generate", "--config", str(config)])

        assert result.exit_code == 1
        assert "unknown_setting" in result.output

    def test_malformed_header(self, runner, project_dir):
        result = runner.invoke(main, [
            "generate", "--base-dir", str(project_dir), "-H", "no-equals-sign",
        ])

        assert result.exit_code == 2
        assert "expected KEY=VALUE" in result.output

    def test_custom_type_option(self, runner, full_project_dir):
        result = runner.invoke(main, [
            "generate", "--base-dir", str(full_project_dir), "-t", "Money=decimal.Decimal",
        ])

        assert result.exit_code == 0, result.output
        schema_types = (
            full_project_dir / "generated" / "graphql_client" / "graphql_client" / "schema_types.py"
        ).read_text()
        assert "from decimal import Decimal" in schema_types

    def test_unknown_operation_id_generator(self, runner, project_dir):
        result = runner.invoke(main, [
            "generate", "--base-dir", str(project_dir), "--operation-id-generator", "nope",
        ])

        assert result.exit_code == 1
        assert "Cannot resolve operation ID generator 'nope'" in result.output

    def test_compiler_error_lists_diagnostics(self, runner, project_dir):
        (project_dir / "graphql" / "Bad.graphql").write_text("query Bad { user(id: \"1\") { nickname } }")

        result = runner.invoke(main, ["generate", "--base-dir", str(project_dir)])

        assert result.exit_code == 1
        assert "nickname" in result.output


class TestMain:
    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "generate" in result.output
