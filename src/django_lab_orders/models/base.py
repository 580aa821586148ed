"""Abstract base models shared by the lab order models.

- TimeStampedModel: created_at/updated_at bookkeeping
- SingletonModel: settings rows pinned to pk=1
"""

from django.db import IntegrityError, models, transaction


class TimeStampedModel(models.Model):
    """Abstract base model with created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class SingletonModel(models.Model):
    """
    Abstract base for singleton settings models.

    Enforces pk=1 and provides get_instance() for safe access.

    Usage:
        settings = LabOrderSettings.get_instance()
    """

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        self.pk = 1
        super().save(*args, **kwargs)

    @classmethod
    def get_instance(cls):
        """
        Get or create the singleton instance.

        Handles race conditions via IntegrityError retry.
        """
        try:
            with transaction.atomic():
                obj, _ = cls.objects.get_or_create(pk=1)
                return obj
        except IntegrityError:
            return cls.objects.get(pk=1)
