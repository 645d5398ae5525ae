from django.core.signals import setting_changed
from django.dispatch import receiver

from .conf import SETTINGS_PREFIX, reset_envelope_settings


@receiver(setting_changed)
def _reset_envelope_settings(sender, setting, **kwargs):
    if setting.startswith(SETTINGS_PREFIX):
        reset_envelope_settings()
