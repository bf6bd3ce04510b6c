"""Shared fakes and builders for the sourcing tests."""

import json
import os

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "fixtures")

SMALL_FRAGMENTS = {
    "Product": "fragment Product on Product { id handle locale title }",
    "Collection": "fragment Collection on Collection { id handle locale title }",
    "Space": "fragment Space on Space { id name domain }",
}


def load_schema_fixture():
    with open(os.path.join(FIXTURES_DIR, "introspection_schema.json")) as f:
        return json.load(f)["data"]


def make_items(count, start=0, typename="Product", locale="en-US", **extra):
    return [
        {
            "__typename": typename,
            "id": f"{typename.lower()}-{i}",
            "handle": f"{typename.lower()}-{i}",
            "locale": locale,
            "title": f"{typename} {i}",
            **extra,
        }
        for i in range(start, start + count)
    ]


def page(root_field, items, next_token=None):
    return {root_field: {"items": items, "nextToken": next_token}}


class FakeExecutor:
    """Stands in for QueryExecutor.

    Args:
        pages: operation name -> list of "data" payloads, returned in order.
        lookups: operation name -> "data" payload.
        failures: operation name -> exception to raise (optionally only on
                  the Nth call of that operation, via (n, exc) tuples).
    """

    def __init__(self, pages=None, lookups=None, failures=None, schema_data=None):
        self.schema_data = schema_data or load_schema_fixture()
        self.pages = pages or {}
        self.lookups = lookups or {}
        self.failures = failures or {}
        self.calls = []

    @property
    def call_count(self):
        return len(self.calls)

    def operations(self):
        return [name for name, _ in self.calls]

    def execute(self, query, operation_name, variables=None):
        self.calls.append((operation_name, dict(variables or {})))
        nth = self.operations().count(operation_name)

        failure = self.failures.get(operation_name)
        if isinstance(failure, tuple):
            if failure[0] == nth:
                raise failure[1]
        elif failure is not None:
            raise failure

        if operation_name == "IntrospectionQuery":
            return self.schema_data
        if operation_name in self.pages:
            return self.pages[operation_name][nth - 1]
        return self.lookups.get(operation_name, {})
