"""
Source Nodes — One complete sourcing run against a Nacelle space.

    config  = create_sourcing_config(executor, fragments_dir)   # schema, fragments, documents
    counts  = source_all(config, node_store)                    # Product, Collection, then Space

source_nodes() does both and wraps any failure as
"Problem sourcing data from Nacelle: <cause>". The run is fail-fast: the first
error stops it, and the singleton is never sourced after a bulk failure.
"""

from typing import Dict

from .errors import SourcingError
from .singleton import SingletonSourcer
from .sourcing_config import SourcingConfig, create_sourcing_config, DEFAULT_TYPE_PREFIX
from .sourcing_engine import SourcingEngine

SOURCE_NAME = "Nacelle"


def source_all(config: SourcingConfig, node_store, debug: bool = False) -> Dict[str, int]:
    """Source every multi-instance type, then every singleton type.

    Returns:
        Remote type name -> number of nodes created.
    """
    counts = SourcingEngine(config, node_store, debug).source_all_nodes()

    singleton_sourcer = SingletonSourcer(config, node_store, debug)
    for entity_type in config.entity_types:
        if entity_type.is_singleton:
            singleton_sourcer.source(entity_type.remote_type_name)
            counts[entity_type.remote_type_name] = 1

    return counts


def source_nodes(
    executor,
    node_store,
    fragments_dir: str,
    type_prefix: str = DEFAULT_TYPE_PREFIX,
    debug: bool = False,
    **config_options,
) -> Dict[str, int]:
    """Build the sourcing config and run a full sourcing pass.

    Args:
        executor: A QueryExecutor.
        node_store: Target node store.
        fragments_dir: Fragment cache directory.
        type_prefix: Node type prefix.
        debug: Verbose output.
        **config_options: Passed through to create_sourcing_config()
                          (entity_types, fragments).

    Returns:
        Remote type name -> number of nodes created.

    Raises:
        SourcingError: "Problem sourcing data from Nacelle: <cause>".
    """
    try:
        config = create_sourcing_config(
            executor, fragments_dir, type_prefix=type_prefix, debug=debug, **config_options
        )
        return source_all(config, node_store, debug)
    except Exception as e:
        raise SourcingError(f"Problem sourcing data from {SOURCE_NAME}: {e}") from e
