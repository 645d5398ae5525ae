from __future__ import annotations

from typing import Any

from django.core.paginator import Page
from rest_framework.utils.urls import replace_query_param

from .response_contract import normalize_payload

PAGINATION_KEY = 'pagination'
PAGINATION_FIELDS = (
    'current_page',
    'per_page',
    'last_page',
    'data',
    'from',
    'to',
    'total',
    'prev_page_url',
    'next_page_url',
    'links',
)

PREVIOUS_LABEL = '&laquo; Previous'
NEXT_LABEL = 'Next &raquo;'


def resolve_page(data: Any) -> Page | None:
    """
    Return the Django page behind ``data``.

    Accepts a ``Page`` or a DRF paginator that has already paginated a
    queryset (it keeps the page on ``.page``). Anything else is not paginated.
    """
    if isinstance(data, Page):
        return data
    page = getattr(data, 'page', None)
    if isinstance(page, Page):
        return page
    return None


def page_url(number: int | None, request=None, page_query_param: str = 'page') -> str | None:
    if number is None:
        return None
    if request is None:
        return f'?{page_query_param}={number}'
    return replace_query_param(request.build_absolute_uri(), page_query_param, number)


def build_links(page: Page, request=None, page_query_param: str = 'page') -> list[dict[str, Any]]:
    prev_number = page.previous_page_number() if page.has_previous() else None
    next_number = page.next_page_number() if page.has_next() else None

    links = [{
        'url': page_url(prev_number, request, page_query_param),
        'label': PREVIOUS_LABEL,
        'active': False,
    }]
    for number in page.paginator.get_elided_page_range(page.number):
        if not isinstance(number, int):
            links.append({'url': None, 'label': str(number), 'active': False})
            continue
        links.append({
            'url': page_url(number, request, page_query_param),
            'label': str(number),
            'active': number == page.number,
        })
    links.append({
        'url': page_url(next_number, request, page_query_param),
        'label': NEXT_LABEL,
        'active': False,
    })
    return links


def extract_pagination(
    page: Page,
    request=None,
    page_query_param: str = 'page',
    items: Any = None,
) -> dict[str, Any]:
    paginator = page.paginator
    object_list = page.object_list if items is None else items
    data = normalize_payload(object_list, plural=True)
    has_items = paginator.count > 0 and len(data) > 0
    prev_number = page.previous_page_number() if page.has_previous() else None
    next_number = page.next_page_number() if page.has_next() else None
    return {
        'current_page': page.number,
        'per_page': paginator.per_page,
        'last_page': paginator.num_pages,
        'data': data,
        'from': page.start_index() if has_items else None,
        'to': page.end_index() if has_items else None,
        'total': paginator.count,
        'prev_page_url': page_url(prev_number, request, page_query_param),
        'next_page_url': page_url(next_number, request, page_query_param),
        'links': build_links(page, request, page_query_param),
    }
