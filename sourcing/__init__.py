"""
Sourcing package — The Nacelle node sourcing pipeline.

Each module handles one concern:

  orchestrator.py      Run coordination, env config, snapshot output
  source_nodes.py      One complete sourcing run (config + bulk + singleton)
  sourcing_config.py   Immutable per-run config (schema, fragments, documents)
  query_executor.py    HTTP communication with the Nacelle endpoint
  schema.py            Remote schema introspection
  entity_types.py      Registered entity types and their operation templates
  fragments.py         Field fragments: generation and read-or-generate cache
  query_compiler.py    Schema-validated LIST_ / NODE_ document compilation
  pagination.py        Cursor pagination adapter
  sourcing_engine.py   Pagination walks and node upserts
  singleton.py         Space singleton sourcing
  node_store.py        Node model, content digest, in-memory store
  errors.py            Error taxonomy
"""

from .errors import (
    SourcingError,
    CompilationError,
    TransportError,
    MalformedPageError,
    SingletonMissingError,
)
from .query_executor import QueryExecutor
from .schema import build_remote_schema, load_schema
from .entity_types import EntityTypeSpec, QueryTemplate, NACELLE_ENTITY_TYPES
from .fragments import (
    FragmentProvider,
    InMemoryFragments,
    DiskFragmentCache,
    generate_default_fragment,
    read_or_generate_default_fragments,
)
from .query_compiler import CompiledDocuments, CompiledQuery, compile_node_queries, parse_fragments
from .pagination import NacellePagination, PageState, AccumulatedResult, PAGE_SIZE
from .node_store import Node, NodeInternal, InMemoryNodeStore, create_content_digest
from .sourcing_config import SourcingConfig, create_sourcing_config
from .sourcing_engine import SourcingEngine
from .singleton import SingletonSourcer
from .source_nodes import source_all, source_nodes
from .orchestrator import SourcingOrchestrator
