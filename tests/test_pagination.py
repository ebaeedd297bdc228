import math

import pytest

from utils.pagination import paginate, clamp_limit, clamp_page


@pytest.mark.parametrize('total,limit', [(0, 20), (1, 20), (20, 20), (21, 20), (99, 10), (100, 100), (7, 3)])
def test_total_pages_is_ceiling(total, limit):
    _, info = paginate(list(range(total)), 1, limit)
    assert info['totalPages'] == math.ceil(total / limit)
    assert info['total'] == total


def test_empty_result_has_no_pages():
    items, info = paginate([], 1, 20)
    assert items == []
    assert info['totalPages'] == 0
    assert info['hasNext'] is False
    assert info['hasPrev'] is False


def test_middle_page_slice():
    items, info = paginate(list(range(25)), 2, 10)
    assert items == list(range(10, 20))
    assert info['currentPage'] == 2
    assert info['hasNext'] is True
    assert info['hasPrev'] is True


def test_last_page_is_partial():
    items, info = paginate(list(range(25)), 3, 10)
    assert items == [20, 21, 22, 23, 24]
    assert info['hasNext'] is False


def test_page_past_the_end_is_empty():
    items, info = paginate(list(range(5)), 4, 2)
    assert items == []
    assert info['totalPages'] == 3


def test_clamping():
    assert clamp_page(0) == 1
    assert clamp_page('3') == 3
    assert clamp_page('abc') == 1
    assert clamp_limit(0) == 1
    assert clamp_limit(500) == 100
    assert clamp_limit(None, 6) == 6
    assert clamp_limit('15') == 15
