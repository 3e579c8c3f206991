"""Generate typed Python GraphQL clients from operation documents."""

__version__ = "0.1.0"
