from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from rest_framework import status
from rest_framework.views import exception_handler

from .builder import ResponseEnvelopeBuilder, default_builder
from .decorators import get_response_data_key
from .negotiation import EnvelopeContentNegotiation, json_renderer
from .services.response_contract import DEFAULT_ERROR_MESSAGE, DEFAULT_SUCCESS_MESSAGE

logger = logging.getLogger(__name__)


class EnvelopeResponseMixin:
    """
    Envelope helpers for DRF views and viewsets.

    The calling-context hint is the viewset ``action`` (``retrieve``,
    ``update``, ...) or the lower-cased HTTP method on plain ``APIView``s.
    Handlers decorated with ``@response_data_key`` pin the data key.
    """

    envelope_builder_class = ResponseEnvelopeBuilder
    content_negotiation_class = EnvelopeContentNegotiation

    def get_envelope_builder(self) -> ResponseEnvelopeBuilder:
        return self.envelope_builder_class()

    def get_envelope_hint(self) -> str | None:
        action = getattr(self, 'action', None)
        if action:
            return action
        request = getattr(self, 'request', None)
        if request is None:
            return None
        return request.method.lower()

    def get_envelope_data_key(self, builder: ResponseEnvelopeBuilder) -> str | None:
        name = self.get_envelope_hint()
        handler = getattr(self, name, None) if name else None
        if handler is None:
            return None
        return get_response_data_key(handler, builder.settings.singular_data_key)

    def success(
        self,
        payload: Any = None,
        meta: Mapping[str, Any] | None = None,
        message: str = DEFAULT_SUCCESS_MESSAGE,
        status_code: int = status.HTTP_200_OK,
        *,
        data_key: str | None = None,
        headers=None,
    ):
        builder = self.get_envelope_builder()
        return builder.success(
            payload,
            meta,
            message,
            status_code,
            hint=self.get_envelope_hint(),
            data_key=data_key or self.get_envelope_data_key(builder),
            headers=headers,
        )

    def paginated(
        self,
        data: Any,
        meta: Mapping[str, Any] | None = None,
        message: str = DEFAULT_SUCCESS_MESSAGE,
        *,
        items: Any = None,
        data_key: str | None = None,
    ):
        builder = self.get_envelope_builder()
        paginator = getattr(self, 'paginator', None)
        return builder.paginated(
            data,
            meta,
            message,
            items=items,
            request=getattr(self, 'request', None),
            page_query_param=getattr(paginator, 'page_query_param', 'page'),
            data_key=data_key or self.get_envelope_data_key(builder),
        )

    def paginate_envelope(self, queryset, meta=None, message: str = DEFAULT_SUCCESS_MESSAGE):
        """Paginate ``queryset`` with the view's paginator and serializer."""
        page = self.paginate_queryset(queryset)
        if page is None:
            serializer = self.get_serializer(queryset, many=True)
            return self.paginated(serializer.data, meta, message)
        serializer = self.get_serializer(page, many=True)
        return self.paginated(self.paginator, meta, message, items=serializer.data)

    def error(self, message: str = DEFAULT_ERROR_MESSAGE, status_code: int = status.HTTP_400_BAD_REQUEST, errors=None):
        return self.get_envelope_builder().error(message, status_code, errors)

    def stored(self, payload: Any = None, meta=None):
        builder = self.get_envelope_builder()
        return builder.stored(payload, meta, hint=self.get_envelope_hint(), data_key=self.get_envelope_data_key(builder))

    def updated(self, payload: Any = None, meta=None):
        builder = self.get_envelope_builder()
        return builder.updated(payload, meta, hint=self.get_envelope_hint(), data_key=self.get_envelope_data_key(builder))

    def deleted(self, payload: Any = None, meta=None):
        builder = self.get_envelope_builder()
        return builder.deleted(payload, meta, hint=self.get_envelope_hint(), data_key=self.get_envelope_data_key(builder))

    def not_found(self, message: str = 'Not Found', errors=None):
        return self.get_envelope_builder().not_found(message, errors)

    def validation_error(self, errors=None, message: str = 'Validation Error'):
        return self.get_envelope_builder().validation_error(errors, message)


def _split_detail(exc, data) -> tuple[str, Any]:
    if isinstance(data, Mapping) and set(data) == {'detail'} and isinstance(data['detail'], str):
        return str(data['detail']), None
    message = str(getattr(exc, 'default_detail', '') or DEFAULT_ERROR_MESSAGE)
    return message, data


def envelope_exception_handler(exc, context):
    """
    DRF ``EXCEPTION_HANDLER`` that renders handled exceptions as error envelopes.

    Exceptions DRF does not handle are logged and left to propagate.
    """
    response = exception_handler(exc, context)
    if response is None:
        view = context.get('view')
        logger.error(
            'unhandled %s in %s',
            type(exc).__name__,
            type(view).__name__ if view is not None else 'unknown view',
            exc_info=exc,
        )
        return None

    message, errors = _split_detail(exc, response.data)
    response.data = default_builder.build_error_payload(message, errors)
    request = context.get('request')
    if request is not None and default_builder.settings.force_json_response_header:
        view = context.get('view')
        renderer = json_renderer(view.get_renderers() if view is not None else ())
        request.accepted_renderer = renderer
        request.accepted_media_type = renderer.media_type
    return response
