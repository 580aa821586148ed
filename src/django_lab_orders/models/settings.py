"""Lab order settings singleton model."""

import os

from django.db import models

from ..conf import get_setting
from .base import SingletonModel


class LabOrderSettings(SingletonModel):
    """Global lab order configuration.

    Singleton model. Access via LabOrderSettings.get_instance().

    The cancellation key is stored only as a password hash. When the
    database holds no hash, the environment variable named by
    LAB_ORDERS_CANCELLATION_KEY_ENV is used instead.
    """

    cancellation_key_hash = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text="Password hash of the order cancellation approval key",
    )

    class Meta:
        verbose_name = "Lab Order Settings"
        verbose_name_plural = "Lab Order Settings"

    def __str__(self):
        configured = "configured" if self.get_cancellation_key_hash() else "not configured"
        return f"LabOrderSettings (cancellation key {configured})"

    def get_cancellation_key_hash(self) -> str:
        """Stored hash, else the environment fallback, else empty string."""
        stored = (self.cancellation_key_hash or "").strip()
        if stored:
            return stored
        env_var = get_setting("CANCELLATION_KEY_ENV")
        if env_var:
            return os.environ.get(env_var, "").strip()
        return ""
