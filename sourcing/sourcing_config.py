"""
Sourcing Config — Everything a sourcing run needs, built once and then frozen.

create_sourcing_config() performs the three startup steps that happen before
any listing query is sent:

  1. Load the remote schema through the executor (introspection).
  2. Read or generate the field fragment of every registered type.
  3. Compile the LIST_ / NODE_ documents and validate them against the schema.

The result is an immutable SourcingConfig that is passed explicitly to the
SourcingEngine and SingletonSourcer. Nothing is registered globally, and no
recompilation happens during the run.
"""

from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from graphql import GraphQLSchema

from .entity_types import EntityTypeSpec, NACELLE_ENTITY_TYPES
from .fragments import FragmentProvider, read_or_generate_default_fragments
from .pagination import NacellePagination
from .query_compiler import CompiledDocuments, compile_node_queries
from .schema import load_schema

DEFAULT_TYPE_PREFIX = "Nacelle"


@dataclass(frozen=True)
class SourcingConfig:
    """Immutable configuration of one sourcing run.

    Attributes:
        executor: The QueryExecutor used for every call.
        schema: The remote schema the documents were compiled against.
        entity_types: Registered types, in sourcing order.
        documents: Remote type name -> compiled documents (read-only).
        type_prefix: Prepended to the remote type name for node.internal.type.
        pagination: The pagination adapter for LIST_ queries.
    """

    executor: object
    schema: GraphQLSchema
    entity_types: Tuple[EntityTypeSpec, ...]
    documents: Mapping[str, CompiledDocuments]
    type_prefix: str = DEFAULT_TYPE_PREFIX
    pagination: NacellePagination = field(default_factory=NacellePagination)

    def entity_type(self, remote_type_name: str) -> EntityTypeSpec:
        for entity_type in self.entity_types:
            if entity_type.remote_type_name == remote_type_name:
                return entity_type
        raise KeyError(f"Entity type '{remote_type_name}' is not registered")

    def node_type(self, remote_type_name: str) -> str:
        return f"{self.type_prefix}{remote_type_name}"


def create_sourcing_config(
    executor,
    fragments_dir: str,
    entity_types: Tuple[EntityTypeSpec, ...] = NACELLE_ENTITY_TYPES,
    type_prefix: str = DEFAULT_TYPE_PREFIX,
    fragments: Optional[FragmentProvider] = None,
    debug: bool = False,
) -> SourcingConfig:
    """Load the schema, resolve fragments and compile all documents.

    Args:
        executor: A QueryExecutor.
        fragments_dir: Fragment cache directory (ignored when fragments is given).
        entity_types: The types to register.
        type_prefix: Node type prefix.
        fragments: Optional ready-made fragment provider.
        debug: Verbose output.

    Raises:
        TransportError: If the schema cannot be loaded.
        SourcingError: If the introspection result is not a valid schema.
        CompilationError: If any document does not match the schema.
    """
    schema = load_schema(executor)
    if debug:
        print(f"  Loaded remote schema: {len(schema.type_map)} types")

    if fragments is None:
        fragments = read_or_generate_default_fragments(
            fragments_dir, schema, [t.remote_type_name for t in entity_types], debug
        )

    documents = compile_node_queries(schema, entity_types, fragments)
    if debug:
        print(f"  Compiled documents for: {', '.join(documents)}")

    return SourcingConfig(
        executor=executor,
        schema=schema,
        entity_types=tuple(entity_types),
        documents=documents,
        type_prefix=type_prefix,
    )
