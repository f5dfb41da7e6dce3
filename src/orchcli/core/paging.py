"""Lazy iteration over offset-paginated catalog listings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Iterator, Sequence, TypeVar

T = TypeVar("T")

MAX_PAGE_SIZE = 500


@dataclass(frozen=True)
class Page(Generic[T]):
    """
    One page of a listing.

    Attributes:
        items: Entities on this page.
        total_elements: Total size of the collection, when the server reports it.
        has_next: Explicit "more pages" flag, when the server reports it.
                  Takes precedence over ``total_elements``.
    """

    items: Sequence[T]
    total_elements: int | None = None
    has_next: bool | None = None


def _has_more(page: Page, offset: int) -> bool:
    if not page.items:
        return False
    if page.has_next is not None:
        return page.has_next
    if page.total_elements is None:
        return False
    return page.total_elements > offset


def paginate(
    fetch: Callable[[int, int], Page[T]],
    *,
    page_size: int = MAX_PAGE_SIZE,
) -> Iterator[T]:
    """
    Yield every item of a listing, requesting pages on demand.

    ``fetch(page_size, offset)`` is called with offset 0 first and then with
    the number of items received so far, until the server signals the end.
    Errors raised by ``fetch`` propagate to the consumer.
    """
    if page_size < 1 or page_size > MAX_PAGE_SIZE:
        raise ValueError(f"page_size must be between 1 and {MAX_PAGE_SIZE}")

    offset = 0
    while True:
        page = fetch(page_size, offset)
        yield from page.items
        offset += len(page.items)
        if not _has_more(page, offset):
            return
