from django.contrib.sessions.backends.cache import SessionStore
from django.test import RequestFactory

from base.api_client import ListResult
from base.pagination import Pagination, fetch_list


def make_request(query=None, session=None):
    request = RequestFactory().get("/list/", query or {})
    request.session = session if session is not None else SessionStore()
    return request


def test_go_to_clamps_to_known_pages():
    pagination = Pagination(current_page=1, items_per_page=10, total_items=45, total_pages=5)
    assert pagination.go_to(9) == 5
    assert pagination.go_to(0) == 1
    assert pagination.go_to("abc") == 1


def test_zero_total_pages_is_treated_as_one():
    pagination = Pagination(current_page=3, total_pages=0)
    assert pagination.total_pages == 1
    assert pagination.current_page == 1


def test_changing_page_size_resets_to_first_page():
    pagination = Pagination(current_page=4, items_per_page=10, total_items=100, total_pages=10)
    pagination.set_items_per_page(50)
    assert pagination.items_per_page == 50
    assert pagination.current_page == 1


def test_update_reclamps_current_page():
    pagination = Pagination(current_page=8, items_per_page=10, total_items=100, total_pages=10)
    pagination.update(total_items=30, total_pages=3)
    assert pagination.current_page == 3


def test_page_range_is_a_window_of_five():
    pagination = Pagination(current_page=7, items_per_page=10, total_items=200, total_pages=20)
    assert list(pagination.page_range) == [5, 6, 7, 8, 9]
    pagination.go_to(1)
    assert list(pagination.page_range) == [1, 2, 3, 4, 5]
    pagination.go_to(20)
    assert list(pagination.page_range) == [16, 17, 18, 19, 20]


def test_start_and_end_index():
    pagination = Pagination(current_page=3, items_per_page=10, total_items=25, total_pages=3)
    assert (pagination.start_index, pagination.end_index) == (21, 25)
    assert Pagination(total_items=0).start_index == 0


def test_from_request_remembers_page_size_per_list():
    session = SessionStore()
    pagination = Pagination.from_request(make_request({"limit": "50", "page": "3"}, session), "students")
    assert pagination.items_per_page == 50
    assert pagination.current_page == 1
    assert session["page_size:students"] == 50

    again = Pagination.from_request(make_request({"page": "3"}, session), "students")
    assert again.items_per_page == 50
    assert again.current_page == 3


class FakeResource:
    def __init__(self, total):
        self.total = total
        self.pages_requested = []

    def list(self, **params):
        self.pages_requested.append(params["page"])
        pages = -(-self.total // params["limit"])
        return ListResult([{"_id": str(params["page"])}], total=self.total, pages=pages, page=params["page"])


def test_fetch_list_refetches_last_page_when_out_of_range():
    resource = FakeResource(total=25)
    result, pagination, search, filter_values = fetch_list(
        resource, make_request({"page": "9", "search": " ann "}), "students", filter_keys=["status"]
    )
    assert resource.pages_requested == [9, 3]
    assert pagination.current_page == 3
    assert result.items == [{"_id": "3"}]
    assert search == "ann"
    assert filter_values == {"status": ""}
