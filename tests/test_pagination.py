import math

import pytest

from services.pagination import Paginator, page_window, slice_bounds, total_pages


@pytest.mark.parametrize("rows", [0, 1, 9, 10, 11, 25, 100])
@pytest.mark.parametrize("size", [1, 3, 10])
def test_total_pages_and_slices(rows, size):
    pages = total_pages(rows, size)
    assert pages == max(1, math.ceil(rows / size))
    data = list(range(rows))
    for k in range(1, pages + 1):
        start, stop = slice_bounds(k, size, rows)
        assert (start, stop) == ((k - 1) * size, min(k * size, rows))
        p = Paginator(size)
        p.set_total(rows)
        assert p.go_to(k)
        assert p.slice(data) == data[start:stop]


def test_total_pages_rejects_non_positive_size():
    with pytest.raises(ValueError):
        total_pages(5, 0)


def test_page_window_is_centered_and_shifted_at_the_end():
    assert page_window(1, 10) == [1, 2, 3, 4, 5]
    assert page_window(5, 10) == [3, 4, 5, 6, 7]
    assert page_window(9, 10) == [6, 7, 8, 9, 10]
    assert page_window(10, 10) == [6, 7, 8, 9, 10]
    assert page_window(2, 3) == [1, 2, 3]
    assert page_window(1, 1) == [1]


@pytest.mark.parametrize("pages", range(1, 13))
def test_page_window_properties(pages):
    for page in range(1, pages + 1):
        window = page_window(page, pages)
        assert len(window) <= 5
        assert page in window
        if page + 2 >= pages:
            assert window[-1] == pages


def test_out_of_range_navigation_is_ignored():
    p = Paginator(10)
    p.set_total(25)
    assert not p.go_to(0)
    assert not p.go_to(4)
    assert p.page == 1
    assert not p.previous()
    assert p.next() and p.next()
    assert p.page == 3
    assert not p.next()
    assert not p.has_next
    assert p.has_previous


def test_shrinking_rows_clamps_without_resetting_requested_page():
    p = Paginator(10)
    p.set_total(30)
    p.go_to(3)
    p.set_total(5)
    assert p.page == 1
    assert p.requested_page == 3
    p.set_total(30)
    assert p.page == 3


def test_summary():
    p = Paginator(10)
    assert p.summary() == "0 items"
    p.slice(list(range(11)))
    assert p.summary() == "1–10 of 11"
    p.go_to(2)
    assert p.summary() == "11–11 of 11"
