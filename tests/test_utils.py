import pytest

from utils.ids import is_valid_post_id
from utils.pagination import number_of_pages, page_offset


@pytest.mark.parametrize("post_id", ["abc", "Xy12AbCdEfGhIjKlMnOp", "with space", "a.b"])
def test_valid_post_ids(post_id):
    assert is_valid_post_id(post_id)


@pytest.mark.parametrize("post_id", ["", ".", "..", "a/b", "__id__", "x" * 1501])
def test_malformed_post_ids(post_id):
    assert not is_valid_post_id(post_id)


def test_page_offset():
    assert page_offset(1, 8) == 0
    assert page_offset(3, 8) == 16


@pytest.mark.parametrize("total,pages", [(0, 0), (1, 1), (8, 1), (9, 2), (16, 2), (17, 3)])
def test_number_of_pages(total, pages):
    assert number_of_pages(total, 8) == pages
