from rest_framework.negotiation import DefaultContentNegotiation
from rest_framework.renderers import JSONRenderer

from .conf import get_envelope_settings


def json_renderer(renderers=()):
    """Return the first JSON renderer among ``renderers``, or a fresh one."""
    for renderer in renderers:
        if isinstance(renderer, JSONRenderer):
            return renderer
    return JSONRenderer()


class EnvelopeContentNegotiation(DefaultContentNegotiation):
    """
    Picks the JSON renderer whenever RESPONSE_ENVELOPE_FORCE_JSON_RESPONSE_HEADER
    is on, whatever the client asked for. Otherwise negotiates as usual.
    """

    def select_renderer(self, request, renderers, format_suffix=None):
        if get_envelope_settings().force_json_response_header:
            renderer = json_renderer(renderers)
            return renderer, renderer.media_type
        return super().select_renderer(request, renderers, format_suffix)
