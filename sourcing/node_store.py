"""
Node Store — Local, content-addressed representation of remote entities.

A node is one remote entity instance as the site build sees it:

    {
      "id": "Productred-shirten-US",         # derived from type + natural key
      "remoteId": "UHJvZHVjdDox",            # the remote "id" field, renamed
      "handle": "red-shirt",
      ...all other remote fields...,
      "internal": {
        "type": "NacelleProduct",            # type prefix + remote type name
        "contentDigest": "5d41402abc4b2a76..."
      }
    }

The content digest is an MD5 over the canonical JSON of the node fields
(sorted keys), so it depends on the field values only: the same fields under
two different entity types hash the same, and any changed field changes it.

The store itself is the system of record: create_node() is an upsert keyed by
node id, and callers do not keep references to nodes after creating them.
"""

import hashlib
import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


def create_content_digest(fields: Dict[str, Any]) -> str:
    """Deterministic hash of a field mapping."""
    canonical = json.dumps(fields, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.md5(canonical.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class NodeInternal:
    type: str
    content_digest: str


@dataclass(frozen=True)
class Node:
    id: str
    fields: Dict[str, Any]
    internal: NodeInternal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            **self.fields,
            "internal": {
                "type": self.internal.type,
                "contentDigest": self.internal.content_digest,
            },
        }


class InMemoryNodeStore:
    """Dict-backed node store.

    Attributes:
        debug: If True, prints each created node id.
    """

    def __init__(self, debug: bool = False):
        self.debug = debug
        self._nodes: Dict[str, Node] = {}

    def create_content_digest(self, fields: Dict[str, Any]) -> str:
        return create_content_digest(fields)

    def create_node(self, node: Node) -> None:
        """Insert or replace the node with this id."""
        self._nodes[node.id] = node
        if self.debug:
            print(f"  Created node: {node.id} ({node.internal.type})")

    def get_node(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def get_nodes_by_type(self, node_type: str) -> List[Node]:
        return [n for n in self._nodes.values() if n.internal.type == node_type]

    def all_nodes(self) -> List[Node]:
        return sorted(self._nodes.values(), key=lambda n: n.id)

    def __len__(self) -> int:
        return len(self._nodes)
