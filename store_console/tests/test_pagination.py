import math

import pytest

from store_console.models import ValidationError
from store_console.services import PaginationState, clamp_page, page_window, paginate


@pytest.mark.parametrize('total', [0, 1, 9, 10, 11, 25])
@pytest.mark.parametrize('requested', [-3, 0, 1, 2, 3, 7])
def test_page_stays_in_range(total, requested):
    items = list(range(total))
    page = paginate(items, page_size=10, current_page=requested)

    assert page.total_pages == max(1, math.ceil(total / 10))
    assert 1 <= page.current_page <= page.total_pages
    assert page.start_index == (page.current_page - 1) * 10
    assert page.end_index == min(page.start_index + 10, total)
    assert page.page_items == items[page.start_index:page.end_index]
    assert page.can_go_next == (page.current_page < page.total_pages)
    assert page.can_go_previous == (page.current_page > 1)


def test_empty_collection_has_one_empty_page():
    page = paginate([], page_size=10)

    assert page.total_pages == 1
    assert page.current_page == 1
    assert page.page_items == []
    assert page.is_empty
    assert not page.can_go_next and not page.can_go_previous


def test_last_page_is_partial():
    page = paginate(list(range(25)), page_size=10, current_page=3)

    assert page.page_items == [20, 21, 22, 23, 24]
    assert page.start_index == 20
    assert page.end_index == 25


def test_invalid_page_text_falls_back_to_first():
    assert clamp_page('abc', 4) == 1
    assert clamp_page(None, 4) == 1
    assert clamp_page('3', 4) == 3


def test_page_size_must_be_positive():
    with pytest.raises(ValidationError):
        paginate([1, 2], page_size=0)
    with pytest.raises(ValidationError):
        PaginationState(page_size=0)


@pytest.mark.parametrize('current,total,expected', [
    (1, 10, [1, 2, 3, 4, 5]),
    (2, 10, [1, 2, 3, 4, 5]),
    (6, 10, [4, 5, 6, 7, 8]),
    (9, 10, [6, 7, 8, 9, 10]),
    (10, 10, [6, 7, 8, 9, 10]),
    (2, 3, [1, 2, 3]),
    (1, 1, [1]),
    (1, 0, [1]),
])
def test_page_window(current, total, expected):
    assert page_window(current, total, max_pages=5) == expected


def test_to_dict_includes_window():
    data = paginate(list(range(100)), page_size=10, current_page=6).to_dict()

    assert data['currentPage'] == 6
    assert data['totalPages'] == 10
    assert data['pageWindow'] == [4, 5, 6, 7, 8]


def test_state_reclamps_when_the_collection_shrinks():
    state = PaginationState(page_size=10)
    state.go_to(3)
    assert state.apply(list(range(30))).current_page == 3

    page = state.apply(list(range(12)))
    assert page.current_page == 2
    assert state.current_page == 2


def test_state_next_previous_and_reset():
    state = PaginationState(page_size=5)
    state.apply(list(range(20)))

    state.next()
    state.next()
    assert state.apply(list(range(20))).page_items == [10, 11, 12, 13, 14]

    state.previous()
    assert state.current_page == 2

    state.reset()
    assert state.apply(list(range(20))).current_page == 1

    state.previous()
    assert state.current_page == 1
