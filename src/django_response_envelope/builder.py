from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from django.core.serializers.json import DjangoJSONEncoder
from django.http import JsonResponse
from rest_framework import status
from rest_framework.response import Response

from .conf import EnvelopeSettings, get_envelope_settings
from .negotiation import json_renderer
from .services.page_meta import PAGINATION_KEY, extract_pagination, resolve_page
from .services.response_contract import (
    DEFAULT_ERROR_MESSAGE,
    DEFAULT_SUCCESS_MESSAGE,
    build_error_envelope,
    build_success_envelope,
)


class ResponseEnvelopeBuilder:
    """
    Builds enveloped DRF responses.

    ``success``/``paginated``/``error`` return ``Response`` objects; the
    ``build_*_payload`` methods return the same envelopes as plain dicts.
    """

    def __init__(self, settings: EnvelopeSettings | None = None):
        self._settings = settings

    @property
    def settings(self) -> EnvelopeSettings:
        return self._settings or get_envelope_settings()

    def build_success_payload(
        self,
        payload: Any = None,
        meta: Mapping[str, Any] | None = None,
        message: str = DEFAULT_SUCCESS_MESSAGE,
        *,
        hint: str | None = None,
        data_key: str | None = None,
    ) -> dict[str, Any]:
        return build_success_envelope(
            payload,
            meta,
            message,
            hint=hint,
            data_key=data_key,
            settings=self.settings,
        )

    def build_paginated_payload(
        self,
        data: Any,
        meta: Mapping[str, Any] | None = None,
        message: str = DEFAULT_SUCCESS_MESSAGE,
        *,
        items: Any = None,
        request=None,
        page_query_param: str = 'page',
        data_key: str | None = None,
    ) -> dict[str, Any]:
        settings = self.settings
        key = data_key or settings.plural_data_key
        page = resolve_page(data)
        if page is None:
            return self.build_success_payload(
                data if items is None else items,
                meta,
                message,
                data_key=key,
            )
        if request is None:
            request = getattr(data, 'request', None)
        pagination = extract_pagination(page, request=request, page_query_param=page_query_param, items=items)
        combined = {PAGINATION_KEY: pagination, **(meta or {})}
        return self.build_success_payload(pagination['data'], combined, message, data_key=key)

    def build_error_payload(
        self,
        message: str = DEFAULT_ERROR_MESSAGE,
        errors: Any = None,
    ) -> dict[str, Any]:
        return build_error_envelope(message, errors, settings=self.settings)

    def respond(self, envelope: dict[str, Any], status_code: int, headers=None) -> Response:
        response = Response(envelope, status=status_code, headers=headers)
        if self.settings.force_json_response_header:
            # Views replace these on finalize; EnvelopeContentNegotiation keeps them JSON there.
            renderer = json_renderer()
            response.accepted_renderer = renderer
            response.accepted_media_type = renderer.media_type
            response.renderer_context = {}
        return response

    def json_response(self, envelope: dict[str, Any], status_code: int = status.HTTP_200_OK) -> JsonResponse:
        """Render an envelope without DRF, for plain Django views."""
        return JsonResponse(envelope, status=status_code, encoder=DjangoJSONEncoder, safe=False)

    def success(
        self,
        payload: Any = None,
        meta: Mapping[str, Any] | None = None,
        message: str = DEFAULT_SUCCESS_MESSAGE,
        status_code: int = status.HTTP_200_OK,
        *,
        hint: str | None = None,
        data_key: str | None = None,
        headers=None,
    ) -> Response:
        envelope = self.build_success_payload(payload, meta, message, hint=hint, data_key=data_key)
        return self.respond(envelope, status_code, headers=headers)

    def paginated(
        self,
        data: Any,
        meta: Mapping[str, Any] | None = None,
        message: str = DEFAULT_SUCCESS_MESSAGE,
        *,
        items: Any = None,
        request=None,
        page_query_param: str = 'page',
        data_key: str | None = None,
        status_code: int = status.HTTP_200_OK,
        headers=None,
    ) -> Response:
        envelope = self.build_paginated_payload(
            data,
            meta,
            message,
            items=items,
            request=request,
            page_query_param=page_query_param,
            data_key=data_key,
        )
        return self.respond(envelope, status_code, headers=headers)

    def error(
        self,
        message: str = DEFAULT_ERROR_MESSAGE,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        errors: Any = None,
        *,
        headers=None,
    ) -> Response:
        envelope = self.build_error_payload(message, errors)
        return self.respond(envelope, status_code, headers=headers)

    # Named shortcuts

    def stored(self, payload: Any = None, meta=None, *, hint: str | None = None, data_key=None) -> Response:
        return self.success(payload, meta, 'Stored', status.HTTP_201_CREATED, hint=hint, data_key=data_key)

    def updated(self, payload: Any = None, meta=None, *, hint: str | None = None, data_key=None) -> Response:
        return self.success(payload, meta, 'Updated', status.HTTP_200_OK, hint=hint, data_key=data_key)

    def deleted(self, payload: Any = None, meta=None, *, hint: str | None = None, data_key=None) -> Response:
        return self.success(payload, meta, 'Deleted', status.HTTP_204_NO_CONTENT, hint=hint, data_key=data_key)

    def not_found(self, message: str = 'Not Found', errors: Any = None) -> Response:
        return self.error(message, status.HTTP_404_NOT_FOUND, errors)

    def unauthorized(self, message: str = 'Unauthorized', errors: Any = None) -> Response:
        return self.error(message, status.HTTP_401_UNAUTHORIZED, errors)

    def forbidden(self, message: str = 'Forbidden', errors: Any = None) -> Response:
        return self.error(message, status.HTTP_403_FORBIDDEN, errors)

    def validation_error(self, errors: Any = None, message: str = 'Validation Error') -> Response:
        return self.error(message, status.HTTP_422_UNPROCESSABLE_ENTITY, errors)

    def server_error(self, message: str = 'Server Error', errors: Any = None) -> Response:
        return self.error(message, status.HTTP_500_INTERNAL_SERVER_ERROR, errors)


default_builder = ResponseEnvelopeBuilder()
