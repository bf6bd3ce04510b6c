"""
Pagination Adapter — How a Nacelle listing is walked to completion.

Nacelle listings are cursor-paginated. Each LIST_ query takes
{first: <page size>, after: <cursor>} and returns one page:

    {"items": [ {...}, {...} ], "nextToken": "eyJ..." | null}

The adapter is a small strategy object with four operations:

  start()          Variables of the first request (first=100, after=None).
  next(state, pg)  Variables of the following request (after=pg.nextToken)
                   and whether there is one at all: only if the page has a
                   token AND came back full. A short page ends the walk even
                   when the source still returns a token.
  concat(acc, pg)  Fold a page into the running result. Items are keyed by
                   natural identity (__typename, handle, locale), so an item
                   seen again on a later page replaces the earlier copy.
  get_items(x)     The items of either a single page or the accumulated
                   result.

All four are pure: none of them mutates its arguments.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

PAGE_SIZE = 100

ItemKey = Tuple[str, str, str]


@dataclass(frozen=True)
class PageState:
    variables: Dict[str, Any]
    has_next_page: bool


@dataclass(frozen=True)
class AccumulatedResult:
    """Items gathered so far for one entity type.

    Attributes:
        items: Natural key -> raw item, in first-arrival order.
        cursor: The continuation token of the last folded page.
    """

    items: Dict[ItemKey, Dict[str, Any]] = field(default_factory=dict)
    cursor: Optional[str] = None


def item_key(item: Dict[str, Any]) -> ItemKey:
    """Natural identity of a raw item: (__typename, handle, locale).

    Missing values count as "", the same way they do in the node id.
    """
    return (item.get("__typename") or "", item.get("handle") or "", item.get("locale") or "")


class NacellePagination:
    """Cursor pagination over {items, nextToken} pages.

    Attributes:
        name: Adapter name.
        expected_variable_names: Variables every LIST_ query must declare.
        page_size: Requested page size ("first").
    """

    name = "NacellePagination"
    expected_variable_names = ("first", "after")

    def __init__(self, page_size: int = PAGE_SIZE):
        self.page_size = page_size

    def start(self) -> PageState:
        return PageState(variables={"first": self.page_size, "after": None}, has_next_page=True)

    def next(self, state: PageState, page: Dict[str, Any]) -> PageState:
        token = page.get("nextToken")
        items = page.get("items") or []
        return PageState(
            variables={"first": self.page_size, "after": token},
            has_next_page=bool(token) and len(items) == self.page_size,
        )

    def concat(self, acc: AccumulatedResult, page: Dict[str, Any]) -> AccumulatedResult:
        items = dict(acc.items)
        for item in page.get("items") or []:
            items[item_key(item)] = item
        return AccumulatedResult(items=items, cursor=page.get("nextToken"))

    def get_items(self, page_or_result: Union[AccumulatedResult, Dict[str, Any]]) -> List[Dict[str, Any]]:
        if isinstance(page_or_result, AccumulatedResult):
            return list(page_or_result.items.values())
        return list(page_or_result.get("items") or [])
