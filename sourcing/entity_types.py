"""
Entity Types — The remote Nacelle types sourced into the node store.

Each entity type is registered once with:

  - the remote type name (also the node id prefix),
  - a LIST_ operation template for paginated listing (None for singletons),
  - a NODE_ operation template for a single-entity lookup by natural key,
  - the identity fields that make up the natural key.

The registered types:

    Product     getProducts(first, after)        getProductByHandle(handle, locale)
    Collection  getCollections(first, after)     getCollectionByHandle(handle, locale)
    Space       (singleton, no listing)          getSpace

Listing responses have the page shape {nextToken, items[]}. The query
compiler turns these templates into executable documents; see
query_compiler.py for the exact document text.
"""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class QueryTemplate:
    """One operation of an entity type, before compilation.

    Attributes:
        operation_name: e.g. "LIST_PRODUCTS" or "NODE_PRODUCT".
        root_field: The Query field the operation selects, e.g. "getProducts".
        variable_names: Variables the operation declares, in argument order.
    """

    operation_name: str
    root_field: str
    variable_names: Tuple[str, ...] = ()


@dataclass(frozen=True)
class EntityTypeSpec:
    remote_type_name: str
    lookup_query: QueryTemplate
    list_query: Optional[QueryTemplate] = None
    identity_fields: Tuple[str, ...] = ("__typename", "handle", "locale")

    @property
    def is_singleton(self) -> bool:
        return self.list_query is None

    @property
    def identity_fragment_name(self) -> str:
        return f"_{self.remote_type_name}Id_"

    @property
    def identity_fragment(self) -> str:
        """The identity fragment text, e.g. "fragment _ProductId_ on Product { __typename handle locale }"."""
        fields = " ".join(self.identity_fields)
        return f"fragment {self.identity_fragment_name} on {self.remote_type_name} {{ {fields} }}"


PRODUCT = EntityTypeSpec(
    remote_type_name="Product",
    list_query=QueryTemplate("LIST_PRODUCTS", "getProducts", ("first", "after")),
    lookup_query=QueryTemplate("NODE_PRODUCT", "getProductByHandle", ("handle", "locale")),
)

COLLECTION = EntityTypeSpec(
    remote_type_name="Collection",
    list_query=QueryTemplate("LIST_COLLECTION", "getCollections", ("first", "after")),
    lookup_query=QueryTemplate("NODE_COLLECTION", "getCollectionByHandle", ("handle", "locale")),
)

SPACE = EntityTypeSpec(
    remote_type_name="Space",
    lookup_query=QueryTemplate("NODE_SPACE", "getSpace"),
    identity_fields=("__typename", "id"),
)

NACELLE_ENTITY_TYPES = (PRODUCT, COLLECTION, SPACE)
