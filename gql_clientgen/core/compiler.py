"""Compiler that turns operation documents into Python client modules.

Parsing, validation and type resolution are delegated to graphql-core.
Code is rendered from Jinja2 templates.

Supports custom templates via the template_dir parameter:
    compiler = GraphQLCompiler(template_dir="./my_templates")

Template lookup order:
1. User's template directory (if provided)
2. Package default templates
"""

import ast
import json
import logging
import re
from dataclasses import replace
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from graphql import (
    DocumentNode,
    FieldNode,
    FragmentDefinitionNode,
    FragmentSpreadNode,
    GraphQLError,
    GraphQLSchema,
    InlineFragmentNode,
    OperationDefinitionNode,
    Source,
    build_client_schema,
    build_schema,
    is_enum_type,
    is_input_object_type,
    is_list_type,
    is_non_null_type,
    is_scalar_type,
    parse,
    print_ast,
    type_from_ast,
    validate,
)
from jinja2 import ChoiceLoader, Environment, FileSystemLoader, PackageLoader, select_autoescape

from .config import GenerationOptions, GenerationRequest, NullableValueType
from .discovery import OperationDocumentSet
from .errors import CompilerError
from .files import write_atomic
from .ir import (
    IRDocumentSet,
    IREnum,
    IRInputField,
    IRInputType,
    IROperation,
    IRTypeRef,
    IRVariable,
)
from .scalars import ScalarRegistry

logger = logging.getLogger(__name__)


def snake_case(name: str) -> str:
    """Convert PascalCase or camelCase to snake_case."""
    s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1).lower()


def pascal_case(name: str) -> str:
    """Convert snake_case or camelCase to PascalCase."""
    return "".join(word[:1].upper() + word[1:] for word in snake_case(name).split("_"))


# Python reserved keywords that cannot be used as identifiers
PYTHON_KEYWORDS = {
    'False', 'None', 'True', 'and', 'as', 'assert', 'async', 'await',
    'break', 'class', 'continue', 'def', 'del', 'elif', 'else', 'except',
    'finally', 'for', 'from', 'global', 'if', 'import', 'in', 'is',
    'lambda', 'nonlocal', 'not', 'or', 'pass', 'raise', 'return', 'try',
    'while', 'with', 'yield'
}


def safe_name(name: str) -> str:
    """Make a name safe for Python by suffixing keywords with underscore."""
    if name in PYTHON_KEYWORDS:
        return f"{name}_"
    return name


def safe_docstring(text: str) -> str:
    """Escape text for use in docstrings."""
    if not text:
        return ""
    text = text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    if text.endswith('"'):
        text += " "
    return text


def module_name(part: str) -> str:
    """Turn a directory or operation name into a valid module name."""
    name = re.sub(r"\W", "_", snake_case(part))
    if not name or name[0].isdigit():
        name = f"_{name}"
    return safe_name(name)


@runtime_checkable
class Compiler(Protocol):
    """Protocol for the component that compiles documents into code.

    parse() and generate() are each called once per run, for the whole
    document set. Both raise CompilerError on any problem.
    """

    def parse(self, schema_file: Path, documents: OperationDocumentSet) -> Any:
        """Parse and validate the documents against the schema."""
        ...

    def generate(self, ir: Any, request: GenerationRequest) -> list[Path]:
        """Write generated sources under request.output_directory and return their paths."""
        ...


class _TypeRenderer:
    """Renders IR type references as Python annotations for one module.

    Tracks the imports the rendered annotations need.
    """

    def __init__(self, ir: IRDocumentSet, options: GenerationOptions, scalars: ScalarRegistry):
        self.ir = ir
        self.options = options
        self.scalars = scalars
        self.typing_names: set[str] = set()
        self.imports: set[str] = set()
        self.schema_types: set[str] = set()

    def annotation(self, ref: IRTypeRef) -> str:
        if ref.list_of is not None:
            inner = f"list[{self.annotation(ref.list_of)}]"
        else:
            inner = self._named(ref.name)
        if not ref.nullable:
            return inner
        if self.options.nullable_value_type is NullableValueType.OPTIONAL:
            self.typing_names.add("Optional")
            return f"Optional[{inner}]"
        return f"{inner} | None"

    def _named(self, name: str) -> str:
        if name in self.ir.enums or name in self.ir.inputs:
            self.schema_types.add(name)
            return name
        mapping = self.scalars.get(name)
        if mapping.import_statement:
            if mapping.import_statement.startswith("from typing import "):
                self.typing_names.add(mapping.python_type)
            else:
                self.imports.add(mapping.import_statement)
        return mapping.python_type

    def import_lines(self) -> list[str]:
        lines = set(self.imports)
        if self.typing_names:
            lines.add(f"from typing import {', '.join(sorted(self.typing_names))}")
        return sorted(lines)


class GraphQLCompiler:
    """Compiles operation documents into typed Python modules.

    Available templates to override:
        - operation.py.j2: one module per operation
        - schema_types.py.j2: enums and input objects used by variables
    """

    def __init__(self, template_dir: str | None = None):
        """Initialize the compiler.

        Args:
            template_dir: Optional directory with custom Jinja2 templates.
                          Templates here override the built-in templates.
        """
        loaders = []
        if template_dir:
            template_path = Path(template_dir)
            if template_path.is_dir():
                loaders.append(FileSystemLoader(str(template_path)))
        loaders.append(PackageLoader("gql_clientgen", "templates"))

        self.env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=select_autoescape(),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["repr"] = repr
        self.env.filters["safe_name"] = safe_name
        self.env.filters["safe_docstring"] = safe_docstring

    # ------------------------------------------------------------------
    # parse
    # ------------------------------------------------------------------

    def parse(self, schema_file: Path, documents: OperationDocumentSet) -> IRDocumentSet:
        """Parse every document and validate them together against the schema.

        Fragments may be defined in any document. All problems are collected
        and reported in a single CompilerError.
        """
        schema = self._load_schema(Path(schema_file))
        diagnostics: list[str] = []
        definitions: list[tuple[Path, Any]] = []

        for path in documents:
            try:
                content = Path(path).read_text(encoding="utf-8")
                document = parse(Source(content, str(path)))
            except OSError as e:
                diagnostics.append(f"{path}: {e}")
                continue
            except GraphQLError as e:
                diagnostics.append(str(e))
                continue
            definitions.extend((Path(path), d) for d in document.definitions)

        if diagnostics:
            raise CompilerError("Failed to parse operation documents", diagnostics)

        for path, definition in definitions:
            if isinstance(definition, OperationDefinitionNode) and definition.name is None:
                line = definition.loc.start_token.line if definition.loc else "?"
                diagnostics.append(f"{path}:{line}: operations must be named")

        combined = DocumentNode(definitions=tuple(d for _, d in definitions))
        diagnostics.extend(str(e) for e in validate(schema, combined))
        if diagnostics:
            raise CompilerError("Operation documents failed validation", diagnostics)

        fragments = {
            d.name.value: d for _, d in definitions if isinstance(d, FragmentDefinitionNode)
        }
        ir = IRDocumentSet(
            schema=schema,
            schema_file=Path(schema_file),
            source_directory=documents.root,
        )
        for path, definition in definitions:
            if isinstance(definition, OperationDefinitionNode):
                ir.operations.append(self._build_operation(ir, path, definition, fragments))

        logger.info(
            "Parsed %d operations from %d documents", len(ir.operations), len(documents)
        )
        return ir

    @staticmethod
    def _load_schema(schema_file: Path) -> GraphQLSchema:
        """Load an introspection result (.json) or an SDL schema."""
        try:
            text = schema_file.read_text(encoding="utf-8")
        except OSError as e:
            raise CompilerError(f"Cannot read schema file {schema_file}", [str(e)]) from e
        if not text.strip():
            raise CompilerError(f"Schema file is empty: {schema_file}")

        try:
            if schema_file.suffix == ".json":
                data = json.loads(text)
                if isinstance(data, dict) and "data" in data:
                    data = data["data"]
                return build_client_schema(data)
            return build_schema(text)
        except (GraphQLError, TypeError, ValueError) as e:
            raise CompilerError(f"Invalid schema file {schema_file}", [str(e)]) from e

    def _build_operation(
        self,
        ir: IRDocumentSet,
        path: Path,
        node: OperationDefinitionNode,
        fragments: dict[str, FragmentDefinitionNode],
    ) -> IROperation:
        used: set[str] = set()
        self._collect_fragments(node.selection_set, fragments, used)
        parts = [print_ast(node)] + [print_ast(fragments[name]) for name in sorted(used)]

        variables = []
        for var_def in node.variable_definitions:
            type_ref = self._type_ref(type_from_ast(ir.schema, var_def.type))
            self._collect_named_type(ir, type_ref.named_type)
            variables.append(
                IRVariable(
                    name=var_def.variable.name.value,
                    type_ref=type_ref,
                    has_default=var_def.default_value is not None,
                )
            )

        return IROperation(
            name=node.name.value,
            operation_type=node.operation.value,
            document="\n\n".join(parts),
            file_path=path,
            variables=variables,
        )

    def _collect_fragments(self, selection_set, fragments, used: set[str]):
        """Collect the names of every fragment reachable from a selection set."""
        if selection_set is None:
            return
        for selection in selection_set.selections:
            if isinstance(selection, FragmentSpreadNode):
                name = selection.name.value
                if name not in used:
                    used.add(name)
                    self._collect_fragments(fragments[name].selection_set, fragments, used)
            elif isinstance(selection, (FieldNode, InlineFragmentNode)):
                self._collect_fragments(selection.selection_set, fragments, used)

    def _type_ref(self, gql_type, nullable: bool = True) -> IRTypeRef:
        if is_non_null_type(gql_type):
            return self._type_ref(gql_type.of_type, nullable=False)
        if is_list_type(gql_type):
            return IRTypeRef(nullable=nullable, list_of=self._type_ref(gql_type.of_type))
        return IRTypeRef(name=gql_type.name, nullable=nullable)

    def _collect_named_type(self, ir: IRDocumentSet, name: str):
        """Record an enum, input object or scalar used by some variable."""
        if name in ir.enums or name in ir.inputs or name in ir.scalars:
            return
        gql_type = ir.schema.get_type(name)
        if is_enum_type(gql_type):
            ir.enums[name] = IREnum(
                name=name,
                values=list(gql_type.values),
                description=gql_type.description,
            )
        elif is_input_object_type(gql_type):
            input_type = IRInputType(name=name, fields=[], description=gql_type.description)
            # Registered before recursing so self-referencing inputs terminate
            ir.inputs[name] = input_type
            for field_name, input_field in gql_type.fields.items():
                type_ref = self._type_ref(input_field.type)
                input_type.fields.append(
                    IRInputField(name=field_name, type_ref=type_ref, description=input_field.description)
                )
                self._collect_named_type(ir, type_ref.named_type)
        elif is_scalar_type(gql_type):
            ir.scalars.add(name)

    # ------------------------------------------------------------------
    # generate
    # ------------------------------------------------------------------

    def generate(self, ir: IRDocumentSet, request: GenerationRequest) -> list[Path]:
        """Render every module, check it, then write them all.

        Returns the written paths. Nothing is written if any module fails to
        render or is not valid Python.
        """
        options = request.options
        scalars = ScalarRegistry(options.custom_type_map)
        literal_enums = self._literal_enums(ir, options)
        package_dir = request.output_directory.joinpath(*request.root_package_name.split("."))
        prefix = "_" if options.generate_as_internal else ""
        schema_module = f"{prefix}schema_types"

        files: dict[Path, str] = {}
        for op in ir.operations:
            target_dir = package_dir.joinpath(
                *(module_name(p) for p in op.file_path.parent.relative_to(ir.source_directory).parts)
            )
            target = target_dir / f"{prefix}{module_name(op.name)}.py"
            if target in files:
                raise CompilerError(
                    f"Operation {op.name} in {op.file_path} maps to a module that already exists: {target}"
                )
            operation_id = request.operation_id_generator.apply(op.document, str(op.file_path))
            files[target] = self._render_operation(
                ir, op, operation_id, request, scalars, schema_module
            )

        if ir.enums or ir.inputs:
            files[package_dir / f"{schema_module}.py"] = self._render_schema_types(
                ir, options, scalars, literal_enums
            )

        for directory in self._package_dirs(request.output_directory, files):
            files.setdefault(directory / "__init__.py", '"""Generated GraphQL client package."""\n')

        for path, content in files.items():
            self._check_syntax(path, content)

        for path in sorted(files):
            write_atomic(path, files[path])
            logger.debug("Wrote %s", path)
        logger.info("Generated %d files under %s", len(files), request.output_directory)
        return sorted(files)

    @staticmethod
    def _literal_enums(ir: IRDocumentSet, options: GenerationOptions) -> set[str]:
        try:
            patterns = [re.compile(p) for p in options.enum_as_literal_pattern_filters]
        except re.error as e:
            raise CompilerError("Invalid enum pattern filter", [str(e)]) from e
        return {name for name in ir.enums if any(p.fullmatch(name) for p in patterns)}

    @staticmethod
    def _package_dirs(output_directory: Path, files: dict[Path, str]) -> list[Path]:
        """Return every directory between output_directory and a module."""
        dirs = set()
        for path in files:
            parent = path.parent
            while parent != output_directory and output_directory in parent.parents:
                dirs.add(parent)
                parent = parent.parent
        return sorted(dirs)

    def _operation_class_name(self, op: IROperation, options: GenerationOptions) -> str:
        name = pascal_case(op.name)
        if options.use_semantic_naming:
            suffix = op.operation_type.capitalize()
            if not name.endswith(suffix):
                name += suffix
        return name

    @staticmethod
    def _field_name(name: str, options: GenerationOptions) -> str:
        if options.use_bean_semantic_naming:
            name = snake_case(name)
        if name.startswith("_"):
            # pydantic treats underscore names as private attributes
            name = f"{name.lstrip('_') or 'field'}_"
        return safe_name(name)

    def _fields(self, owner: str, entries, renderer: _TypeRenderer, options: GenerationOptions) -> list[dict]:
        """Build template fields; required ones come first.

        Raises:
            CompilerError: Two GraphQL names map to the same Python name
        """
        fields = []
        seen: dict[str, str] = {}
        for name, type_ref, optional in entries:
            if optional and not type_ref.nullable:
                type_ref = replace(type_ref, nullable=True)
            python_name = self._field_name(name, options)
            if python_name in seen:
                raise CompilerError(
                    f"{owner}: '{seen[python_name]}' and '{name}' both map to the Python name '{python_name}'"
                )
            seen[python_name] = name
            fields.append({
                "name": python_name,
                "graphql_name": name,
                "alias": name if python_name != name else None,
                "annotation": renderer.annotation(type_ref),
                "optional": optional,
            })
        return sorted(fields, key=lambda f: f["optional"])

    def _render_operation(
        self,
        ir: IRDocumentSet,
        op: IROperation,
        operation_id: str,
        request: GenerationRequest,
        scalars: ScalarRegistry,
        schema_module: str,
    ) -> str:
        options = request.options
        renderer = _TypeRenderer(ir, options, scalars)
        fields = self._fields(
            f"Variables of {op.name}",
            ((v.name, v.type_ref, v.type_ref.nullable or v.has_default) for v in op.variables),
            renderer,
            options,
        )
        renderer.typing_names.add("Any")
        if options.generate_dataclass_models:
            renderer.imports.add("from dataclasses import dataclass")
        local_import = None
        if renderer.schema_types:
            local_import = (
                f"from {request.root_package_name}.{schema_module} import "
                f"{', '.join(sorted(renderer.schema_types))}"
            )

        class_name = self._operation_class_name(op, options)
        template = self.env.get_template("operation.py.j2")
        return template.render(
            operation=op,
            source=op.file_path.relative_to(ir.source_directory).as_posix(),
            operation_id=operation_id,
            class_name=class_name,
            variables_class=f"{class_name}Variables",
            fields=fields,
            imports=renderer.import_lines(),
            local_import=local_import,
            options=options,
        )

    def _render_schema_types(
        self,
        ir: IRDocumentSet,
        options: GenerationOptions,
        scalars: ScalarRegistry,
        literal_enums: set[str],
    ) -> str:
        renderer = _TypeRenderer(ir, options, scalars)
        inputs = []
        for name in sorted(ir.inputs):
            input_type = ir.inputs[name]
            inputs.append({
                "name": name,
                "description": input_type.description,
                "fields": self._fields(
                    f"Input {name}",
                    ((f.name, f.type_ref, f.type_ref.nullable) for f in input_type.fields),
                    renderer,
                    options,
                ),
            })
        enums = [
            {
                "name": name,
                "values": ir.enums[name].values,
                "description": ir.enums[name].description,
                "literal": name in literal_enums,
            }
            for name in sorted(ir.enums)
        ]
        if literal_enums:
            renderer.typing_names.add("Literal")
        if any(not e["literal"] for e in enums):
            renderer.imports.add("from enum import Enum")
        if inputs and options.generate_dataclass_models:
            renderer.imports.add("from dataclasses import dataclass")

        template = self.env.get_template("schema_types.py.j2")
        return template.render(
            enums=enums,
            inputs=inputs,
            imports=renderer.import_lines(),
            options=options,
        )

    @staticmethod
    def _check_syntax(path: Path, content: str):
        try:
            ast.parse(content)
        except SyntaxError as e:
            raise CompilerError(f"Generated invalid Python for {path}", [str(e)]) from e
