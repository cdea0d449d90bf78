# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
from sshmount.notifiers import register
from sshmount.schemas.notification import Notification


@register("do_nothing")
class DoNothing:
    """Placeholder Notifier"""

    def notify(self, notification: Notification) -> None:
        pass
