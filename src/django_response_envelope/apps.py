from django.apps import AppConfig


class ResponseEnvelopeConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'django_response_envelope'
    verbose_name = 'Response envelope'

    def ready(self):
        from . import signals  # noqa: F401
        from .conf import get_envelope_settings

        get_envelope_settings()
