"""Cancellation approval key.

Order cancellation needs a separately configured approval key. Only a
password hash of the key is stored. Storage is reached through an
ApprovalKeyStore so callers and tests can inject their own provider:

    approval = CancellationApprovalKey()          # DB singleton store
    approval.set_key("s3cret-key")
    approval.verify("s3cret-key")                 # True

    approval = CancellationApprovalKey(store=InMemoryApprovalKeyStore())
"""

import logging
from typing import Optional, Protocol

from django.contrib.auth.hashers import check_password, make_password

from .conf import get_min_approval_key_length
from .exceptions import InvalidApprovalKey

logger = logging.getLogger(__name__)


class ApprovalKeyStore(Protocol):
    """Where the approval key hash lives."""

    def get_hash(self) -> str:
        ...

    def set_hash(self, value: str) -> None:
        ...


class SettingsApprovalKeyStore:
    """Store backed by the LabOrderSettings singleton."""

    def get_hash(self) -> str:
        from .models import LabOrderSettings

        return LabOrderSettings.get_instance().get_cancellation_key_hash()

    def set_hash(self, value: str) -> None:
        from .models import LabOrderSettings

        settings = LabOrderSettings.get_instance()
        settings.cancellation_key_hash = value
        settings.save()


class InMemoryApprovalKeyStore:
    """Process-local store, for tests and single-process tools."""

    def __init__(self, value: str = ""):
        self._value = value

    def get_hash(self) -> str:
        return self._value

    def set_hash(self, value: str) -> None:
        self._value = value


def _normalize(raw: Optional[str]) -> str:
    return (raw or "").strip()


class CancellationApprovalKey:
    """Sets and verifies the system-wide cancellation approval key."""

    def __init__(self, store: Optional[ApprovalKeyStore] = None):
        self.store = store if store is not None else SettingsApprovalKeyStore()

    def is_configured(self) -> bool:
        """Check whether a key hash is stored."""
        return bool(_normalize(self.store.get_hash()))

    def set_key(self, raw_key: str) -> None:
        """
        Hash and store a new approval key.

        Raises:
            InvalidApprovalKey: If the trimmed key is shorter than
                LAB_ORDERS_MIN_APPROVAL_KEY_LENGTH
        """
        normalized = _normalize(raw_key)
        min_length = get_min_approval_key_length()
        if len(normalized) < min_length:
            raise InvalidApprovalKey(min_length)
        self.store.set_hash(make_password(normalized))
        logger.info("Cancellation approval key updated")

    def verify(self, raw_key: Optional[str]) -> bool:
        """Check a candidate key; blank keys and an unset hash never verify."""
        normalized = _normalize(raw_key)
        if not normalized:
            return False
        stored = _normalize(self.store.get_hash())
        if not stored:
            return False
        return check_password(normalized, stored)
