"""
Singleton Sourcer — Sources the one-instance Space entity.

Space has no listing: its NODE_SPACE document is executed once, without
variables, and exactly one node is created from the result:

    id = "Space" + <remote id of the space>

This runs after the SourcingEngine has finished, so every Product and
Collection node exists before the Space node is created. A missing result
is fatal.
"""

from .errors import MalformedPageError, SingletonMissingError
from .node_store import Node
from .sourcing_config import SourcingConfig
from .sourcing_engine import create_entity_node


class SingletonSourcer:
    def __init__(self, config: SourcingConfig, node_store, debug: bool = False):
        self.config = config
        self.node_store = node_store
        self.debug = debug

    def source(self, remote_type_name: str = "Space") -> Node:
        """Execute the lookup once and create the singleton node.

        Raises:
            SingletonMissingError: If the lookup returns nothing or no remote id.
            TransportError: If the call fails.
        """
        entity_type = self.config.entity_type(remote_type_name)
        lookup = self.config.documents[remote_type_name].lookup
        data = self.config.executor.execute(lookup.document, lookup.operation_name, {})

        payload = data.get(lookup.root_field)
        if payload is None:
            raise SingletonMissingError(f"{lookup.operation_name} returned no {remote_type_name}")
        if not isinstance(payload, dict):
            raise MalformedPageError(f"{lookup.root_field} returned {payload!r}")
        if not payload.get("id"):
            raise SingletonMissingError(f"{lookup.operation_name} returned a {remote_type_name} without an id")

        node = create_entity_node(self.config, self.node_store, entity_type, payload)
        print(f"  {remote_type_name}: 1 node")
        return node
