import logging

from django.conf import settings

from .filters import create_api_filters

logger = logging.getLogger(__name__)

PAGE_WINDOW = 5


def _to_int(value, default):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


class Pagination:
    def __init__(self, current_page=1, items_per_page=None, total_items=0, total_pages=1):
        self.items_per_page = items_per_page or settings.DEFAULT_PAGE_SIZE
        self.total_items = total_items
        self.total_pages = max(total_pages or 1, 1)
        self.current_page = 1
        self.go_to(current_page)

    def go_to(self, page):
        page = _to_int(page, 1)
        self.current_page = min(max(page, 1), self.total_pages)
        return self.current_page

    def set_items_per_page(self, items_per_page):
        self.items_per_page = max(_to_int(items_per_page, self.items_per_page), 1)
        self.current_page = 1

    def update(self, total_items, total_pages):
        self.total_items = total_items or 0
        self.total_pages = max(total_pages or 1, 1)
        self.go_to(self.current_page)

    @property
    def has_previous(self):
        return self.current_page > 1

    @property
    def has_next(self):
        return self.current_page < self.total_pages

    @property
    def previous_page(self):
        return max(self.current_page - 1, 1)

    @property
    def next_page(self):
        return min(self.current_page + 1, self.total_pages)

    @property
    def start_index(self):
        if not self.total_items:
            return 0
        return (self.current_page - 1) * self.items_per_page + 1

    @property
    def end_index(self):
        return min(self.current_page * self.items_per_page, self.total_items)

    @property
    def page_range(self):
        half = PAGE_WINDOW // 2
        first = max(1, min(self.current_page - half, self.total_pages - PAGE_WINDOW + 1))
        last = min(self.total_pages, first + PAGE_WINDOW - 1)
        return range(first, last + 1)

    @classmethod
    def from_request(cls, request, key, default_per_page=None):
        """Page state from ``?page=&limit=``.

        The page size is remembered per list; when the requested size differs
        from the remembered one the page goes back to 1.
        """
        session_key = f"page_size:{key}"
        remembered = request.session.get(session_key)
        default_per_page = default_per_page or settings.DEFAULT_PAGE_SIZE

        pagination = cls(items_per_page=remembered or default_per_page)
        requested = _to_int(request.GET.get("limit"), None)
        if requested and requested != pagination.items_per_page:
            pagination.set_items_per_page(requested)
            request.session[session_key] = pagination.items_per_page
        else:
            # Total pages are unknown until the API answers; only the lower bound applies.
            pagination.current_page = max(_to_int(request.GET.get("page"), 1), 1)
        return pagination


def read_filters(request, filter_keys):
    return {key: request.GET.get(key, "").strip() for key in filter_keys}


def fetch_list(resource, request, key, mapping=None, filter_keys=(), extra=None, per_page=None):
    """Fetch one page of ``resource`` for a list view.

    Returns ``(result, pagination, search, filter_values)``. When the requested
    page lies beyond the last page the last page is fetched instead.
    """
    pagination = Pagination.from_request(request, key, per_page)
    search = request.GET.get("search", "").strip()
    filter_values = read_filters(request, filter_keys)

    def load(page):
        params = create_api_filters(
            page, pagination.items_per_page, search, filter_values, mapping or {}
        )
        params.update(extra or {})
        return resource.list(**params)

    requested_page = pagination.current_page
    result = load(requested_page)
    pagination.update(result.total, result.pages)
    if pagination.current_page != requested_page:
        logger.debug("%s: page %s out of range, showing %s", key, requested_page, pagination.current_page)
        result = load(pagination.current_page)
    return result, pagination, search, filter_values
