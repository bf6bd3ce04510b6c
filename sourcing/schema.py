"""
Remote Schema — The Nacelle GraphQL schema used for compilation.

The schema is read once per run with the standard introspection query and
rebuilt locally with graphql-core's build_client_schema(). The resulting
GraphQLSchema is what the query compiler validates every document against,
and what the default fragment generator walks to pick fields.

The introspection result is checked up front (validate_schema), so a
truncated or inconsistent response fails here rather than in the middle of
query compilation.

Pipeline context:
    Loaded in Step 1 of the orchestrator (via load_schema()), then passed to
    fragment generation (Step 2) and query compilation (Step 3).
"""

from typing import Any, Dict, Optional

from graphql import (
    GraphQLError,
    GraphQLField,
    GraphQLSchema,
    build_client_schema,
    get_introspection_query,
    validate_schema,
)

from .errors import SourcingError

INTROSPECTION_QUERY = get_introspection_query(descriptions=False)


def build_remote_schema(data: Dict[str, Any]) -> GraphQLSchema:
    """Build a schema from the "data" of an introspection response.

    Raises:
        SourcingError: If the payload has no __schema object or does not
            describe a valid schema.
    """
    if not isinstance(data, dict) or not data.get("__schema"):
        raise SourcingError("Introspection result has no __schema")

    try:
        schema = build_client_schema(data)
        errors = validate_schema(schema)
    except (TypeError, KeyError, GraphQLError) as e:
        raise SourcingError(f"Invalid introspection result: {e}") from e

    if errors:
        raise SourcingError(
            "Invalid introspection result: " + "; ".join(error.message for error in errors)
        )
    return schema


def root_field(schema: GraphQLSchema, field_name: str) -> Optional[GraphQLField]:
    """The root Query field of that name, or None."""
    if schema.query_type is None:
        return None
    return schema.query_type.fields.get(field_name)


def load_schema(executor) -> GraphQLSchema:
    """Introspect the remote endpoint and return its schema.

    Args:
        executor: A QueryExecutor (or anything with the same execute()).

    Returns:
        The GraphQLSchema for this run.
    """
    data = executor.execute(INTROSPECTION_QUERY, "IntrospectionQuery", {})
    return build_remote_schema(data)
