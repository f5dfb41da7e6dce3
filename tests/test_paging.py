import pytest

from orchcli.core.paging import MAX_PAGE_SIZE, Page, paginate


@pytest.mark.parametrize("size", [0, -1, MAX_PAGE_SIZE + 1])
def test_paginate_rejects_invalid_page_size(size: int):
    with pytest.raises(ValueError, match="page_size"):
        list(paginate(lambda s, o: Page(items=[]), page_size=size))


def test_paginate_follows_has_next_flag():
    offsets: list[int] = []
    pages = 3

    def fetch(size: int, offset: int) -> Page[int]:
        offsets.append(offset)
        n = len(offsets)
        return Page(items=[offset, offset + 1], has_next=n <= pages)

    items = list(paginate(fetch, page_size=2))

    assert len(offsets) == pages + 1
    assert offsets == [0, 2, 4, 6]
    assert items == list(range(8))


def test_paginate_has_next_wins_over_total():
    calls: list[int] = []

    def fetch(size: int, offset: int) -> Page[str]:
        calls.append(offset)
        return Page(items=["x"], total_elements=100, has_next=False)

    assert list(paginate(fetch, page_size=1)) == ["x"]
    assert calls == [0]


def test_paginate_uses_total_elements():
    data = list(range(7))
    calls: list[tuple[int, int]] = []

    def fetch(size: int, offset: int) -> Page[int]:
        calls.append((size, offset))
        return Page(items=data[offset : offset + size], total_elements=len(data))

    assert list(paginate(fetch, page_size=3)) == data
    assert calls == [(3, 0), (3, 3), (3, 6)]


def test_paginate_stops_on_empty_page_even_if_more_is_claimed():
    calls: list[int] = []

    def fetch(size: int, offset: int) -> Page[int]:
        calls.append(offset)
        return Page(items=[], total_elements=10, has_next=True)

    assert list(paginate(fetch)) == []
    assert calls == [0]


def test_paginate_is_lazy_and_propagates_errors():
    def fetch(size: int, offset: int) -> Page[int]:
        if offset:
            raise RuntimeError("page 2 failed")
        return Page(items=[1, 2], total_elements=4)

    it = paginate(fetch, page_size=2)
    assert next(it) == 1
    assert next(it) == 2
    with pytest.raises(RuntimeError, match="page 2"):
        next(it)
