import math


def page_offset(page: int, page_size: int) -> int:
    """Number of records to skip before the given 1-based page"""
    return (page - 1) * page_size


def number_of_pages(total: int, page_size: int) -> int:
    """Total page count for a collection of `total` records"""
    return math.ceil(total / page_size)
