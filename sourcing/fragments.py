"""
Fragment Provider — Field selections used to build the full sourcing queries.

For every registered entity type the query compiler needs one fragment that
lists the fields to fetch, e.g.:

    fragment Product on Product {
      handle
      locale
      title
      featuredMedia {
        src
        type
      }
    }

The default fragment is generated from the remote schema: all leaf (scalar
and enum) fields of the type, plus nested object fields down to a fixed depth.
Fields with required arguments are skipped, and so are nested objects that
end up with nothing to select. A type with no selectable field at all still
gets a valid fragment that selects only __typename.

Fragments are kept on disk, one file per entity type ("<dir>/Product.graphql"),
so they can be edited by hand. The cache is read-or-generate: an existing file
is always used as-is, and a missing one is generated and written once. The
cache is read at startup and shared read-only for the rest of the run.

Pipeline context:
    Step 2 of the orchestrator. The resulting provider is handed to
    compile_node_queries() (Step 3).
"""

import os
from typing import Dict, Iterable, List

from graphql import (
    GraphQLSchema,
    get_named_type,
    is_leaf_type,
    is_object_type,
    is_required_argument,
)

DEFAULT_MAX_DEPTH = 2
FRAGMENT_FILE_SUFFIX = ".graphql"


def _selectable_fields(schema: GraphQLSchema, type_name: str, depth: int, max_depth: int) -> List[str]:
    schema_type = schema.get_type(type_name)
    if not is_object_type(schema_type):
        return []

    lines = []
    for name, field in schema_type.fields.items():
        if any(is_required_argument(arg) for arg in field.args.values()):
            continue

        named_type = get_named_type(field.type)
        if is_leaf_type(named_type):
            lines.append(name)
            continue

        if not is_object_type(named_type) or depth + 1 >= max_depth:
            continue

        nested = _selectable_fields(schema, named_type.name, depth + 1, max_depth)
        if nested:
            lines.append(name + " {")
            lines.extend("  " + line for line in nested)
            lines.append("}")

    return lines


def generate_default_fragment(
    schema: GraphQLSchema, type_name: str, max_depth: int = DEFAULT_MAX_DEPTH
) -> str:
    """Generate the default fragment text for one remote type.

    Args:
        schema: The remote schema.
        type_name: The remote type, e.g. "Product".
        max_depth: How many levels of object fields to expand (1 = leaves only).

    Returns:
        The fragment text, named after the type.
    """
    body = _selectable_fields(schema, type_name, 0, max_depth) or ["__typename"]
    lines = [f"fragment {type_name} on {type_name} {{"]
    lines.extend("  " + line for line in body)
    lines.append("}")
    return "\n".join(lines) + "\n"


class FragmentProvider:
    """Supplies the field-selection fragment for each remote type."""

    def get_fragment(self, type_name: str) -> str:
        raise NotImplementedError


class InMemoryFragments(FragmentProvider):
    """Fragments held in a plain dict (used by tests and by callers that
    already hold the fragment text)."""

    def __init__(self, fragments: Dict[str, str]):
        self._fragments = dict(fragments)

    def get_fragment(self, type_name: str) -> str:
        if type_name not in self._fragments:
            raise KeyError(f"No fragment registered for type '{type_name}'")
        return self._fragments[type_name]


class DiskFragmentCache(FragmentProvider):
    """Read-or-generate fragment cache, one file per remote type.

    Attributes:
        directory: Where fragment files live (created if missing).
        schema: Used to generate fragments for types without a file.
        debug: If True, prints whether each fragment was read or generated.
    """

    def __init__(self, directory: str, schema: GraphQLSchema, debug: bool = False):
        self.directory = directory
        self.schema = schema
        self.debug = debug
        self._loaded: Dict[str, str] = {}

    def path_for(self, type_name: str) -> str:
        return os.path.join(self.directory, f"{type_name}{FRAGMENT_FILE_SUFFIX}")

    def get_fragment(self, type_name: str) -> str:
        if type_name in self._loaded:
            return self._loaded[type_name]

        path = self.path_for(type_name)
        if os.path.exists(path):
            with open(path) as f:
                text = f.read()
            if self.debug:
                print(f"  Read fragment: {path}")
        else:
            os.makedirs(self.directory, exist_ok=True)
            text = generate_default_fragment(self.schema, type_name)
            with open(path, "w") as f:
                f.write(text)
            if self.debug:
                print(f"  Generated fragment: {path}")

        self._loaded[type_name] = text
        return text


def read_or_generate_default_fragments(
    directory: str, schema: GraphQLSchema, type_names: Iterable[str], debug: bool = False
) -> InMemoryFragments:
    """Load (or generate) the fragment of every type once, up front.

    Returns:
        An InMemoryFragments snapshot, so nothing touches the disk mid-run.
    """
    cache = DiskFragmentCache(directory, schema, debug)
    return InMemoryFragments({name: cache.get_fragment(name) for name in type_names})
