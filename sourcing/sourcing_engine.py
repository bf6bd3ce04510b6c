"""
Sourcing Engine — Walks every paginated entity type and upserts its nodes.

For each registered multi-instance type (Product, Collection), in order:

  1. state = pagination.start()
  2. While state.has_next_page: execute the LIST_ document with
     state.variables, fold the page into the accumulator, and compute the
     next state from the page. Pages are fetched strictly one after another,
     since each request's cursor comes from the previous page.
  3. When the walk ends, create one node per accumulated item:
        id       = <remoteTypeName><handle><locale>
        fields   = the item's fields (remote "id" renamed to "remoteId")
        internal = {type: <prefix><remoteTypeName>, contentDigest: digest(fields)}

Nodes are only created once a type's walk has finished, so a failed walk
creates no nodes for that type. Any error aborts the run: it is wrapped as
"Failed to source <Type> nodes: <cause>" and re-raised, and later types are
never attempted.

source_node_change() refreshes a single node through the NODE_ lookup
document, for sourcing one changed entity without a full walk.
"""

from typing import Any, Dict, Optional

from .entity_types import EntityTypeSpec
from .errors import MalformedPageError, SourcingError
from .node_store import Node, NodeInternal
from .pagination import AccumulatedResult
from .sourcing_config import SourcingConfig


def node_fields(item: Dict[str, Any]) -> Dict[str, Any]:
    """Node fields of a raw item; the remote "id" is kept as "remoteId"."""
    fields = dict(item)
    if "id" in fields:
        fields["remoteId"] = fields.pop("id")
    return fields


def node_id(entity_type: EntityTypeSpec, item: Dict[str, Any]) -> str:
    """Derive the node id from the type name and the item's natural key.

    Raises:
        SourcingError: If the item lacks the primary natural key field.
    """
    key_fields = [f for f in entity_type.identity_fields if f != "__typename"]
    if key_fields and not item.get(key_fields[0]):
        raise SourcingError(
            f"{entity_type.remote_type_name} item has no '{key_fields[0]}': {item!r}"
        )
    key = "".join(str(item.get(f) or "") for f in key_fields)
    return f"{entity_type.remote_type_name}{key}"


def create_entity_node(config: SourcingConfig, node_store, entity_type: EntityTypeSpec, item: Dict[str, Any]) -> Node:
    """Build the node for one raw item and upsert it into the store."""
    fields = node_fields(item)
    node = Node(
        id=node_id(entity_type, item),
        fields=fields,
        internal=NodeInternal(
            type=config.node_type(entity_type.remote_type_name),
            content_digest=node_store.create_content_digest(fields),
        ),
    )
    node_store.create_node(node)
    return node


class SourcingEngine:
    """Sources all multi-instance entity types into a node store.

    Attributes:
        config: The immutable run configuration.
        node_store: Anything with create_node() and create_content_digest().
        debug: If True, prints per-page progress.
    """

    def __init__(self, config: SourcingConfig, node_store, debug: bool = False):
        self.config = config
        self.node_store = node_store
        self.debug = debug

    def source_all_nodes(self) -> Dict[str, int]:
        """Walk and materialize every multi-instance type, in registration order.

        Returns:
            Remote type name -> number of nodes created.

        Raises:
            SourcingError: On the first failure; later types are not attempted.
        """
        counts = {}
        for entity_type in self.config.entity_types:
            if entity_type.is_singleton:
                continue

            type_name = entity_type.remote_type_name
            try:
                result = self.fetch_all(type_name)
                items = self.config.pagination.get_items(result)
                for item in items:
                    create_entity_node(self.config, self.node_store, entity_type, item)
            except SourcingError as e:
                raise SourcingError(f"Failed to source {type_name} nodes: {e}") from e

            counts[type_name] = len(items)
            print(f"  {type_name}: {len(items)} nodes")

        return counts

    def fetch_all(self, remote_type_name: str) -> AccumulatedResult:
        """Run the pagination walk of one type to exhaustion.

        Returns:
            The accumulated items, keyed by natural identity.

        Raises:
            TransportError: If any page request fails.
            MalformedPageError: If a page lacks the items/nextToken shape or
                holds items of another type.
        """
        listing = self.config.documents[remote_type_name].listing
        if listing is None:
            raise SourcingError(f"{remote_type_name} has no listing query")

        adapter = self.config.pagination
        state = adapter.start()
        result = AccumulatedResult()
        page_count = 0

        while state.has_next_page:
            data = self.config.executor.execute(
                listing.document, listing.operation_name, state.variables
            )
            page = self._read_page(data, listing.root_field, remote_type_name)
            result = adapter.concat(result, page)
            state = adapter.next(state, page)
            page_count += 1

            if self.debug:
                print(
                    f"  {listing.operation_name} page {page_count}: "
                    f"{len(adapter.get_items(page))} items, {len(result.items)} total"
                )

        return result

    def source_node_change(
        self, remote_type_name: str, handle: str, locale: Optional[str] = None
    ) -> Optional[Node]:
        """Refresh one node by natural key through the NODE_ lookup document.

        Returns:
            The upserted node, or None if the remote has no such entity.
        """
        entity_type = self.config.entity_type(remote_type_name)
        lookup = self.config.documents[remote_type_name].lookup
        data = self.config.executor.execute(
            lookup.document, lookup.operation_name, {"handle": handle, "locale": locale}
        )

        item = data.get(lookup.root_field)
        if item is None:
            if self.debug:
                print(f"  {lookup.operation_name}: no {remote_type_name} for {handle!r} ({locale})")
            return None
        if not isinstance(item, dict):
            raise MalformedPageError(f"{lookup.root_field} returned {item!r}")

        return create_entity_node(self.config, self.node_store, entity_type, item)

    @staticmethod
    def _read_page(data: Dict[str, Any], root_field: str, type_name: str) -> Dict[str, Any]:
        page = data.get(root_field)
        if not isinstance(page, dict):
            raise MalformedPageError(f"{root_field} did not return a page: {page!r}")

        items = page.get("items")
        if not isinstance(items, list) or not all(isinstance(i, dict) for i in items):
            raise MalformedPageError(f"{root_field} page has no item list: {page!r}")

        # the accumulator key and the node id only agree for items of the listed type
        for item in items:
            if item.get("__typename") != type_name:
                raise MalformedPageError(
                    f"{root_field} returned a {item.get('__typename')!r} item, expected {type_name!r}"
                )

        return page
