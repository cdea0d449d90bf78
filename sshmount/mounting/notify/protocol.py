# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
from typing import Protocol, runtime_checkable

from sshmount.schemas.notification import Notification


@runtime_checkable
class Notifier(Protocol):
    """A destination for user-facing outcome notifications."""

    def notify(self, notification: Notification) -> None:
        """Show or record the notification, see available notifiers in /notifiers."""


class Confirmer(Protocol):
    """Asks the user a blocking yes/no question."""

    def confirm(self, title: str, message: str) -> bool: ...
