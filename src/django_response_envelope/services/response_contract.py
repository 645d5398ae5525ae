from __future__ import annotations

import copy
import dataclasses
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from django.db.models import Model
from rest_framework.serializers import BaseSerializer

from ..conf import (
    ERRORS_KEY,
    MESSAGE_KEY,
    META_KEY,
    RESERVED_DATA_KEYS,
    EnvelopeSettings,
    get_envelope_settings,
)
from ..exceptions import EnvelopeError

logger = logging.getLogger(__name__)

ROOT_KEY = 'response'
DATA_KEY = 'data'

DEFAULT_SUCCESS_MESSAGE = 'Success'
DEFAULT_ERROR_MESSAGE = 'Error'


def select_data_key(
    settings: EnvelopeSettings,
    hint: str | None = None,
    override: str | None = None,
) -> str:
    if override:
        key = override
    elif not settings.using_for_rest:
        key = settings.plural_data_key
    elif _is_singular_hint(settings, hint):
        key = settings.singular_data_key
    else:
        key = settings.plural_data_key
    logger.debug('envelope data key %r (hint=%r, override=%r)', key, hint, override)
    return key


def _is_singular_hint(settings: EnvelopeSettings, hint: str | None) -> bool:
    raw = str(hint or '').strip().lower()
    if not raw:
        return False
    singular = settings.methods_for_singular_key
    return raw in singular or settings.resolve_hint(raw) in singular


def _model_to_dict(instance: Model) -> dict[str, Any]:
    return {f.name: f.value_from_object(instance) for f in instance._meta.concrete_fields}


def _convert_entity(value):
    """Return a plain mapping for entity-like objects, or None if ``value`` is not one."""
    if isinstance(value, Mapping):
        return copy.deepcopy(dict(value))
    if isinstance(value, Model):
        return _model_to_dict(value)
    if isinstance(value, BaseSerializer):
        return normalize_payload(value.data)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    to_dict = getattr(value, 'to_dict', None)
    if callable(to_dict):
        converted = to_dict()
        if not isinstance(converted, Mapping):
            raise EnvelopeError(
                f'{type(value).__name__}.to_dict() returned {type(converted).__name__!r}, expected a mapping.'
            )
        return copy.deepcopy(dict(converted))
    return None


def _convert_item(value):
    converted = _convert_entity(value)
    if converted is not None:
        return converted
    return copy.deepcopy(value)


def normalize_payload(payload: Any, *, plural: bool = True):
    """
    Turn ``payload`` into a plain dict or list without touching the original.

    Mappings, model instances, serializers, dataclasses and objects with a
    ``to_dict()`` method become dicts; querysets and other non-string
    iterables become lists. ``None`` becomes an empty container matching
    the selected key.
    """
    if payload is None:
        return [] if plural else {}
    if isinstance(payload, BaseSerializer):
        return normalize_payload(payload.data, plural=plural)
    converted = _convert_entity(payload)
    if converted is not None:
        return converted
    if isinstance(payload, (str, bytes, bytearray)):
        raise EnvelopeError(f'Cannot build an envelope from {type(payload).__name__!r} payload.')
    if isinstance(payload, Iterable):
        return [_convert_item(item) for item in payload]
    raise EnvelopeError(
        f'Cannot build an envelope from {type(payload).__name__!r}; '
        'expected a mapping, a sequence or an object convertible to a mapping.'
    )


def wrap(inner: dict[str, Any], settings: EnvelopeSettings) -> dict[str, Any]:
    if settings.without_wrapping:
        logger.debug('envelope wrapping disabled, returning inner data')
        return inner
    return {ROOT_KEY: {DATA_KEY: inner}}


def build_success_envelope(
    payload: Any = None,
    meta: Mapping[str, Any] | None = None,
    message: str = DEFAULT_SUCCESS_MESSAGE,
    *,
    hint: str | None = None,
    data_key: str | None = None,
    settings: EnvelopeSettings | None = None,
) -> dict[str, Any]:
    settings = settings or get_envelope_settings()
    key = select_data_key(settings, hint=hint, override=data_key)
    if key in RESERVED_DATA_KEYS:
        raise EnvelopeError(f'{key!r} is reserved inside envelopes and cannot hold the payload.')
    inner = {
        key: normalize_payload(payload, plural=key != settings.singular_data_key),
        META_KEY: copy.deepcopy(dict(meta)) if meta else {},
        MESSAGE_KEY: message,
    }
    return wrap(inner, settings)


def build_error_envelope(
    message: str = DEFAULT_ERROR_MESSAGE,
    errors: Any = None,
    *,
    settings: EnvelopeSettings | None = None,
) -> dict[str, Any]:
    settings = settings or get_envelope_settings()
    inner = {
        ERRORS_KEY: copy.deepcopy(errors),
        MESSAGE_KEY: message,
    }
    return wrap(inner, settings)


def unwrap(envelope: Mapping[str, Any]) -> dict[str, Any]:
    """Return the inner ``data`` mapping of a wrapped or unwrapped envelope."""
    root = envelope.get(ROOT_KEY)
    if isinstance(root, Mapping) and isinstance(root.get(DATA_KEY), Mapping):
        return dict(root[DATA_KEY])
    return dict(envelope)
