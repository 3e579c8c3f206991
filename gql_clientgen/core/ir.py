"""Intermediate Representation (IR) for parsed operation documents.

This module defines dataclasses that describe operations, their variables
and the schema types they reference, in a form suitable for code generation.
"""

from dataclasses import dataclass, field
from pathlib import Path

from graphql import GraphQLSchema


@dataclass
class IRTypeRef:
    """A possibly wrapped reference to a named GraphQL type.

    [String!]! is IRTypeRef(list_of=IRTypeRef(name="String", nullable=False), nullable=False).
    """
    name: str | None = None
    nullable: bool = True
    list_of: "IRTypeRef | None" = None

    @property
    def named_type(self) -> str:
        ref = self
        while ref.list_of is not None:
            ref = ref.list_of
        return ref.name or ""


@dataclass
class IRVariable:
    """A variable declared by an operation."""
    name: str
    type_ref: IRTypeRef
    has_default: bool = False


@dataclass
class IRInputField:
    name: str
    type_ref: IRTypeRef
    description: str | None = None


@dataclass
class IRInputType:
    """A GraphQL input object reachable from some operation's variables."""
    name: str
    fields: list[IRInputField]
    description: str | None = None


@dataclass
class IREnum:
    """A GraphQL enum reachable from some operation's variables."""
    name: str
    values: list[str]
    description: str | None = None


@dataclass
class IROperation:
    """A named query, mutation or subscription."""
    name: str
    operation_type: str  # 'query', 'mutation' or 'subscription'
    # Printed operation followed by every fragment it uses
    document: str
    file_path: Path
    variables: list[IRVariable] = field(default_factory=list)


@dataclass
class IRDocumentSet:
    """Everything parse() extracted from the schema and the documents."""
    schema: GraphQLSchema
    schema_file: Path
    source_directory: Path
    operations: list[IROperation] = field(default_factory=list)
    enums: dict[str, IREnum] = field(default_factory=dict)
    inputs: dict[str, IRInputType] = field(default_factory=dict)
    scalars: set[str] = field(default_factory=set)
