from __future__ import annotations

from typing import Protocol

from .model import Notification


class NotificationRepository(Protocol):
    def insert(self, notification: Notification) -> int:
        """Returns notification id."""

        raise NotImplementedError
