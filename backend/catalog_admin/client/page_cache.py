"""Client-side cache of listing pages with optimistic updates.

Each cached page is a small state machine::

    IDLE --refresh--> LOADING --fetched--> READY
                        |                    |
                        +--failed--> IDLE    +--prepend/replace/remove--> READY

States are immutable; every transition returns a new ``PageState``. The
optimistic transitions let a UI show the result of a create, update or
delete without refetching. They are never checked against the server, so
a page can drift until its next ``refresh()``.
"""

from dataclasses import dataclass, field, replace as dc_replace
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Sequence, Tuple

import structlog

logger = structlog.get_logger(__name__)

Item = Mapping[str, Any]
Fetcher = Callable[[], Awaitable[Tuple[Sequence[Item], int]]]


class PageStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"


class InvalidTransition(Exception):
    """Raised when a transition is applied to a page in the wrong status."""

    def __init__(self, action: str, status: PageStatus):
        self.action = action
        self.status = status
        super().__init__(f"Cannot {action} a page in status '{status.value}'")


@dataclass(frozen=True)
class PageKey:
    """Identity of a cached page."""

    kind: str
    limit: int
    skip: int
    filter_key: str = ""


@dataclass(frozen=True)
class PageState:
    """Snapshot of a cached page.

    Invariants: ``total`` is never negative and ``items`` never holds two
    entries with the same ``id``.
    """

    status: PageStatus = PageStatus.IDLE
    items: Tuple[Item, ...] = ()
    total: int = 0

    def _require_ready(self, action: str) -> None:
        if self.status is not PageStatus.READY:
            raise InvalidTransition(action, self.status)

    def loading(self) -> "PageState":
        return PageState(status=PageStatus.LOADING)

    def loaded(self, items: Sequence[Item], total: int) -> "PageState":
        if self.status is not PageStatus.LOADING:
            raise InvalidTransition("load", self.status)
        return PageState(status=PageStatus.READY, items=_dedupe(items), total=max(0, total))

    def failed(self) -> "PageState":
        return PageState(status=PageStatus.IDLE)

    def prepend(self, item: Item) -> "PageState":
        """Insert ``item`` at the head and count it in ``total``.

        An item whose id is already cached moves to the head instead; the
        total stays the same.
        """
        self._require_ready("prepend")
        rest = tuple(i for i in self.items if i["id"] != item["id"])
        total = self.total if len(rest) < len(self.items) else self.total + 1
        return dc_replace(self, items=(item,) + rest, total=total)

    def replace(self, item_id: Any, item: Item) -> "PageState":
        """Swap the item with ``item_id`` for ``item`` in place."""
        self._require_ready("replace")
        items = tuple(item if i["id"] == item_id else i for i in self.items)
        return dc_replace(self, items=_dedupe(items))

    def remove(self, item_id: Any) -> "PageState":
        """Drop the item with ``item_id``; total decreases, floored at 0."""
        self._require_ready("remove")
        items = tuple(i for i in self.items if i["id"] != item_id)
        if len(items) == len(self.items):
            return self
        return dc_replace(self, items=items, total=max(0, self.total - 1))


def _dedupe(items: Sequence[Item]) -> Tuple[Item, ...]:
    seen = set()
    unique = []
    for item in items:
        if item["id"] in seen:
            continue
        seen.add(item["id"])
        unique.append(item)
    return tuple(unique)


@dataclass
class CachedPage:
    """A page key, the coroutine that fetches it and its current state."""

    key: PageKey
    fetcher: Fetcher
    state: PageState = field(default_factory=PageState)

    @property
    def items(self) -> Tuple[Item, ...]:
        return self.state.items

    @property
    def total(self) -> int:
        return self.state.total

    async def refresh(self) -> PageState:
        """Discard the cached page and fetch it again."""
        self.state = self.state.loading()
        try:
            items, total = await self.fetcher()
        except Exception:
            self.state = self.state.failed()
            logger.warning("page_refresh_failed", kind=self.key.kind, skip=self.key.skip, exc_info=True)
            raise
        self.state = self.state.loaded(items, total)
        return self.state

    def prepend(self, item: Item) -> PageState:
        self.state = self.state.prepend(item)
        return self.state

    def replace(self, item_id: Any, item: Item) -> PageState:
        self.state = self.state.replace(item_id, item)
        return self.state

    def remove(self, item_id: Any) -> PageState:
        self.state = self.state.remove(item_id)
        return self.state


class PageCache:
    """Cached pages by key, optionally bound to a ``CatalogApiClient``."""

    def __init__(self, client: Optional[Any] = None):
        self.client = client
        self._pages: Dict[PageKey, CachedPage] = {}

    def page(self, key: PageKey, fetcher: Fetcher) -> CachedPage:
        """Return the cached page for ``key``, creating it (IDLE) if needed."""
        if key not in self._pages:
            self._pages[key] = CachedPage(key=key, fetcher=fetcher)
        return self._pages[key]

    def categories(self, limit: int = 10, skip: int = 0) -> CachedPage:
        async def fetch():
            data = await self.client.list_categories(limit=limit, skip=skip)
            return data["categories"], data["total"]

        return self.page(PageKey("categories", limit, skip), fetch)

    def products(
        self,
        limit: int = 10,
        skip: int = 0,
        category_ids: Sequence[int] = (),
        q: Optional[str] = None,
        select: Sequence[str] = (),
    ) -> CachedPage:
        """Cached product page; category filter, search and selection are all part of the key."""

        async def fetch():
            data = await self.client.list_products(
                limit=limit, skip=skip, category_ids=category_ids, q=q, select=select
            )
            return data["products"], data["total"]

        filter_key = ",".join(str(c) for c in category_ids)
        if q:
            filter_key += f";q={q}"
        if select:
            filter_key += f";select={','.join(select)}"
        return self.page(PageKey("products", limit, skip, filter_key), fetch)

    def invalidate(self, kind: Optional[str] = None) -> None:
        """Forget cached pages, all of them or those of one kind."""
        if kind is None:
            self._pages.clear()
            return
        for key in [k for k in self._pages if k.kind == kind]:
            del self._pages[key]
