from __future__ import annotations

from rest_framework.pagination import PageNumberPagination

from .builder import ResponseEnvelopeBuilder
from .services.page_meta import PAGINATION_FIELDS


class EnvelopePageNumberPagination(PageNumberPagination):
    """
    Page number pagination whose responses are envelopes with
    ``meta.pagination`` filled from the current page.
    """

    page_size_query_param = 'per_page'
    max_page_size = 100
    builder_class = ResponseEnvelopeBuilder

    def get_paginated_response(self, data):
        return self.builder_class().paginated(
            self,
            items=data,
            request=self.request,
            page_query_param=self.page_query_param,
        )

    def get_paginated_response_schema(self, schema):
        settings = self.builder_class().settings
        pagination = {
            'type': 'object',
            'properties': {name: {} for name in PAGINATION_FIELDS},
        }
        inner = {
            'type': 'object',
            'properties': {
                settings.plural_data_key: schema,
                'meta': {'type': 'object', 'properties': {'pagination': pagination}},
                'message': {'type': 'string', 'example': 'Success'},
            },
        }
        if settings.without_wrapping:
            return inner
        return {
            'type': 'object',
            'properties': {
                'response': {'type': 'object', 'properties': {'data': inner}},
            },
        }
