from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

logger = logging.getLogger(__name__)

SETTINGS_PREFIX = 'RESPONSE_ENVELOPE_'

DEFAULT_PLURAL_DATA_KEY = 'entities'
DEFAULT_SINGULAR_DATA_KEY = 'entity'
DEFAULT_METHODS_FOR_SINGULAR_KEY = frozenset({'show', 'update'})
DEFAULT_ACTION_ALIASES = {
    'retrieve': 'show',
    'list': 'index',
    'create': 'store',
    'partial_update': 'update',
    'destroy': 'destroy',
    'get': 'index',
    'post': 'store',
    'put': 'update',
    'patch': 'update',
    'delete': 'destroy',
}

ERRORS_KEY = 'errors'
META_KEY = 'meta'
MESSAGE_KEY = 'message'
RESERVED_DATA_KEYS = frozenset({ERRORS_KEY, META_KEY, MESSAGE_KEY})

TRUE_STRINGS = frozenset({'1', 'true', 'yes', 'on'})
FALSE_STRINGS = frozenset({'', '0', 'false', 'no', 'off'})


@dataclass(frozen=True)
class EnvelopeSettings:
    plural_data_key: str = DEFAULT_PLURAL_DATA_KEY
    singular_data_key: str = DEFAULT_SINGULAR_DATA_KEY
    using_for_rest: bool = True
    methods_for_singular_key: frozenset = DEFAULT_METHODS_FOR_SINGULAR_KEY
    force_json_response_header: bool = True
    without_wrapping: bool = False
    action_aliases: MappingProxyType = field(default_factory=lambda: MappingProxyType(dict(DEFAULT_ACTION_ALIASES)))

    def __post_init__(self):
        if self.plural_data_key == self.singular_data_key:
            raise ImproperlyConfigured(
                f'{SETTINGS_PREFIX}PLURAL_DATA_KEY and {SETTINGS_PREFIX}SINGULAR_DATA_KEY '
                f'must differ (both are {self.plural_data_key!r}).'
            )
        for key in (self.plural_data_key, self.singular_data_key):
            if key in RESERVED_DATA_KEYS:
                raise ImproperlyConfigured(f'{key!r} is reserved inside envelopes and cannot hold the payload.')

    def resolve_hint(self, hint: str | None) -> str:
        """Map a viewset action or HTTP method to its conventional REST name."""
        name = str(hint or '').strip().lower()
        return self.action_aliases.get(name, name)


def _get_setting(name: str, default):
    return getattr(settings, f'{SETTINGS_PREFIX}{name}', default)


def _get_key_setting(name: str, default: str) -> str:
    raw = str(_get_setting(name, default) or '').strip()
    if not raw:
        logger.warning('%s%s is blank, using %r', SETTINGS_PREFIX, name, default)
        return default
    return raw


def _get_flag_setting(name: str, default: bool) -> bool:
    raw = _get_setting(name, default)
    if isinstance(raw, str):
        value = raw.strip().lower()
        if value in TRUE_STRINGS:
            return True
        if value in FALSE_STRINGS:
            return False
        raise ImproperlyConfigured(f'{SETTINGS_PREFIX}{name} must be a boolean, got {raw!r}.')
    return bool(raw)


def _get_names_setting(name: str, default: frozenset) -> frozenset:
    raw = _get_setting(name, default)
    if raw is None:
        return default
    if isinstance(raw, str):
        raw = raw.split(',')
    return frozenset(str(item).strip().lower() for item in raw if str(item).strip())


def _get_aliases_setting(name: str, default: dict) -> MappingProxyType:
    raw = _get_setting(name, None)
    if raw is None:
        return MappingProxyType(dict(default))
    try:
        items = dict(raw).items()
    except (TypeError, ValueError) as exc:
        raise ImproperlyConfigured(f'{SETTINGS_PREFIX}{name} must be a mapping.') from exc
    return MappingProxyType({str(k).strip().lower(): str(v).strip().lower() for k, v in items})


def load_envelope_settings() -> EnvelopeSettings:
    return EnvelopeSettings(
        plural_data_key=_get_key_setting('PLURAL_DATA_KEY', DEFAULT_PLURAL_DATA_KEY),
        singular_data_key=_get_key_setting('SINGULAR_DATA_KEY', DEFAULT_SINGULAR_DATA_KEY),
        using_for_rest=_get_flag_setting('USING_FOR_REST', True),
        methods_for_singular_key=_get_names_setting('METHODS_FOR_SINGULAR_KEY', DEFAULT_METHODS_FOR_SINGULAR_KEY),
        force_json_response_header=_get_flag_setting('FORCE_JSON_RESPONSE_HEADER', True),
        without_wrapping=_get_flag_setting('WITHOUT_WRAPPING', False),
        action_aliases=_get_aliases_setting('ACTION_ALIASES', DEFAULT_ACTION_ALIASES),
    )


@lru_cache(maxsize=None)
def get_envelope_settings() -> EnvelopeSettings:
    return load_envelope_settings()


def reset_envelope_settings() -> None:
    get_envelope_settings.cache_clear()
