from __future__ import annotations

from functools import wraps

_MARK = '_response_data_key'
# Stored in place of a name when the configured singular key should be used.
SINGULAR = object()


def response_data_key(key: str | None = None):
    """
    Pin the data key used by envelopes built inside the decorated handler.

    ``@response_data_key()`` selects the configured singular key,
    ``@response_data_key('user')`` uses ``'user'`` verbatim.
    """
    mark = str(key).strip() if key is not None else ''

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            return func(*args, **kwargs)

        setattr(wrapper, _MARK, mark or SINGULAR)
        return wrapper

    return decorator


def get_response_data_key(func, singular_data_key: str) -> str | None:
    mark = getattr(func, _MARK, None)
    if mark is None:
        return None
    if mark is SINGULAR:
        return singular_data_key
    return mark
