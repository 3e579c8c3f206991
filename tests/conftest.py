"""Shared fixtures for the test suite."""

import json
from pathlib import Path

import pytest
from graphql import build_schema, introspection_from_schema

SCHEMA_SDL = """
scalar DateTime
scalar Money

enum Role {
  ADMIN
  MEMBER
  GUEST
}

input UserFilter {
  role: Role
  createdAfter: DateTime
  minBalance: Money
  nested: UserFilter
}

type User {
  id: ID!
  name: String!
  role: Role!
  createdAt: DateTime
  balance: Money
}

type Query {
  user(id: ID!): User
  users(filter: UserFilter, first: Int = 10): [User!]!
}

type Mutation {
  renameUser(id: ID!, name: String!): User
}
"""

GET_USER = """
query GetUser($id: ID!) {
  user(id: $id) {
    ...UserFields
  }
}
"""

USER_FIELDS = """
fragment UserFields on User {
  id
  name
  role
}
"""

LIST_USERS = """
query ListUsers($filter: UserFilter, $first: Int = 10) {
  users(filter: $filter, first: $first) {
    id
    createdAt
    balance
  }
}
"""

RENAME_USER = """
mutation RenameUser($id: ID!, $name: String!) {
  renameUser(id: $id, name: $name) {
    id
    name
  }
}
"""


def introspection_json() -> str:
    """Introspection result for SCHEMA_SDL, as an endpoint would return it."""
    return json.dumps({"data": introspection_from_schema(build_schema(SCHEMA_SDL))}, indent=2)


@pytest.fixture
def schema_file(tmp_path) -> Path:
    path = tmp_path / "graphql" / "schema.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(introspection_json())
    return path


@pytest.fixture
def project_dir(tmp_path, schema_file) -> Path:
    """A project laid out with the default settings paths.

    graphql/
        schema.json
        GetUser.graphql
    """
    (tmp_path / "graphql" / "GetUser.graphql").write_text(GET_USER + USER_FIELDS)
    return tmp_path


@pytest.fixture
def full_project_dir(project_dir) -> Path:
    """project_dir plus documents in nested directories and a shared fragment."""
    source = project_dir / "graphql"
    (source / "GetUser.graphql").write_text(GET_USER)
    (source / "fragments").mkdir()
    (source / "fragments" / "UserFields.graphql").write_text(USER_FIELDS)
    (source / "users").mkdir()
    (source / "users" / "ListUsers.graphql").write_text(LIST_USERS)
    (source / "users" / "RenameUser.graphql").write_text(RENAME_USER)
    return project_dir
