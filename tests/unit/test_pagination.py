import pytest

from ticket_assistant.core import ValidationException
from ticket_assistant.tickets.domain import MAX_PAGE_SIZE, Pagination, completion_rate


def test_last_page_of_twenty_five_tickets():
    pagination = Pagination(page=3, limit=10, total=25)

    assert pagination.total_pages == 3
    assert pagination.has_next is False
    assert pagination.has_prev is True
    assert pagination.offset == 20


def test_first_page_has_next_but_no_prev():
    pagination = Pagination(page=1, limit=10, total=25)

    assert pagination.has_next is True
    assert pagination.has_prev is False
    assert pagination.offset == 0


def test_empty_result_has_no_pages():
    pagination = Pagination(page=1, limit=10, total=0)

    assert pagination.total_pages == 0
    assert pagination.has_next is False
    assert pagination.has_prev is False


def test_exact_multiple_does_not_add_a_page():
    assert Pagination(page=1, limit=5, total=20).total_pages == 4


def test_with_total_keeps_window():
    pagination = Pagination(page=2, limit=5).with_total(11)

    assert (pagination.page, pagination.limit, pagination.total) == (2, 5, 11)
    assert pagination.total_pages == 3


@pytest.mark.parametrize("page,limit", [(0, 10), (-1, 10), (1, 0), (1, -5)])
def test_rejects_non_positive_page_or_limit(page, limit):
    with pytest.raises(ValidationException):
        Pagination(page=page, limit=limit)


@pytest.mark.parametrize("page,limit", [(1, MAX_PAGE_SIZE + 1), (1, 10**20), (10**19, 10)])
def test_rejects_oversized_window(page, limit):
    with pytest.raises(ValidationException):
        Pagination(page=page, limit=limit)


def test_largest_page_size_is_accepted():
    assert Pagination(page=2, limit=MAX_PAGE_SIZE).offset == MAX_PAGE_SIZE


def test_completion_rate_is_zero_without_assignments():
    assert completion_rate(0, 0) == 0


def test_completion_rate_is_rounded():
    assert completion_rate(1, 3) == 0.3333
    assert completion_rate(2, 2) == 1.0
