"""Command-line interface for gql-clientgen."""

import logging
from pathlib import Path

import click

from .core.build import BuildProject
from .core.config import ClientGenerationSettings, NullableValueType
from .core.errors import GenerationError
from .core.orchestrator import ClientGenerationTask, RunState


def parse_pairs(ctx, param, values):
    """Turn repeated KEY=VALUE options into a dict. None when not given."""
    if not values:
        return None
    pairs = {}
    for value in values:
        key, sep, val = value.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"expected KEY=VALUE, got '{value}'", ctx=ctx, param=param)
        pairs[key.strip()] = val.strip()
    return pairs


def configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


@click.group(context_settings={"auto_envvar_prefix": "GQL_CLIENTGEN"})
@click.version_option(package_name="gql-clientgen")
def main():
    """GraphQL client code generator.

    Generate typed Python modules from GraphQL operation documents.
    """
    pass


@main.command()
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML settings file. Options given on the command line take precedence.",
)
@click.option(
    "--base-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory relative paths are resolved against (default: current directory).",
)
@click.option("--source-dir", "-s", type=click.Path(path_type=Path), help="Directory holding the .graphql operation documents.")
@click.option("--output", "-o", type=click.Path(path_type=Path), help="Output directory for generated code.")
@click.option("--introspection-file", "-i", type=click.Path(path_type=Path), help="Local introspection schema file (.json or SDL).")
@click.option("--root-package", help="Root package of the generated modules.")
@click.option("--schema-url", help="GraphQL endpoint used to refresh the introspection file.")
@click.option(
    "--header",
    "-H",
    "headers",
    multiple=True,
    callback=parse_pairs,
    help="Header sent with the introspection request, as NAME=VALUE. Repeatable.",
)
@click.option(
    "--self-signed/--no-self-signed",
    "use_self_signed_certificate",
    default=None,
    help="Accept self-signed certificates for the introspection request only.",
)
@click.option("--timeout", type=float, help="Introspection request timeout in seconds.")
@click.option(
    "--generate-introspection-file/--no-generate-introspection-file",
    default=None,
    help="Refresh the introspection file from --schema-url before generating.",
)
@click.option(
    "--custom-type",
    "-t",
    "custom_types",
    multiple=True,
    callback=parse_pairs,
    help="Map a custom scalar to a Python type, as Scalar=module.Type. Repeatable.",
)
@click.option(
    "--nullable-value-type",
    type=click.Choice([t.value for t in NullableValueType]),
    help="Spelling of nullable values: Optional[T] or T | None.",
)
@click.option("--operation-id-generator", help="Operation ID strategy: sha256 (default), sequential or package.module:Class.")
@click.option("--skip/--no-skip", default=None, help="Do nothing and exit successfully.")
@click.option("--add-source-root/--no-add-source-root", default=None, help="Register the output directory as a compile source root.")
@click.option("--semantic-naming/--no-semantic-naming", "use_semantic_naming", default=None, help="Suffix operation classes with Query, Mutation or Subscription.")
@click.option("--model-builder/--no-model-builder", "generate_model_builder", default=None, help="Generate a builder() function per operation.")
@click.option("--suppress-raw-types-warning/--no-suppress-raw-types-warning", default=None, help="Silence type checkers in generated modules.")
@click.option("--bean-naming/--no-bean-naming", "use_bean_semantic_naming", default=None, help="Use snake_case field names aliased to the GraphQL names.")
@click.option("--dataclass-models/--no-dataclass-models", "generate_dataclass_models", default=None, help="Generate dataclasses instead of pydantic models.")
@click.option("--internal/--no-internal", "generate_as_internal", default=None, help="Prefix generated module names with an underscore.")
@click.option(
    "--polymorphic-visitor/--no-polymorphic-visitor",
    "generate_visitor_for_polymorphic_datatypes",
    default=None,
    help="Generate accept(visitor) dispatch on enums.",
)
@click.option(
    "--enum-literal-pattern",
    "enum_patterns",
    multiple=True,
    help="Regex of enum names to generate as Literal aliases. Repeatable.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
def generate(config_file, base_dir, source_dir, output, introspection_file, root_package,
             schema_url, headers, timeout, custom_types, enum_patterns, verbose, **flags):
    """Generate typed client modules from GraphQL operation documents.

    Examples:

        gql-clientgen generate -s ./graphql -i ./graphql/schema.json -o ./generated

        gql-clientgen generate --config graphql-client.yaml

        gql-clientgen generate --generate-introspection-file \\
            --schema-url https://api.example.com/graphql -H "Authorization=Bearer abc"
    """
    configure_logging(verbose)

    overrides = {
        "base_directory": base_dir,
        "source_directory": source_dir,
        "output_directory": output,
        "introspection_file": introspection_file,
        "root_package_name": root_package,
        "schema_url": schema_url,
        "schema_url_headers": headers,
        "introspection_timeout": timeout,
        "custom_type_map": custom_types,
        "enum_as_literal_pattern_filters": list(enum_patterns) or None,
        **flags,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}

    project = BuildProject()
    try:
        if config_file:
            settings = ClientGenerationSettings.from_file(config_file, **overrides)
        else:
            settings = ClientGenerationSettings.validated(overrides, origin="options")

        task = ClientGenerationTask(settings, project=project)
        state = task.execute()
    except GenerationError as e:
        raise click.ClickException(str(e)) from e

    if state is RunState.SKIPPED:
        click.echo("Skipped.")
        return

    click.echo(f"Done! Generated code in {task.request.output_directory}")
    for root in project.compile_source_roots:
        click.echo(f"Compile source root: {root}")


if __name__ == "__main__":
    main()
