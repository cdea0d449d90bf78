# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import json
import os
from dataclasses import asdict

from sshmount.mounting.dataclass_utils import remove_none_dict_factory
from sshmount.mounting.utils.logger import init_logger
from sshmount.notifiers import register
from sshmount.schemas.notification import Notification


@register("file")
class File:
    """Append notifications to a file as JSON lines."""

    def __init__(self, *, file_path: str):
        path = os.path.abspath(os.path.expanduser(file_path))
        # notifications are records, not diagnostics
        self.logger, self.handler = init_logger(
            f"{__name__}:{path}", path, log_formatter=None, propagate=False
        )

    def notify(self, notification: Notification) -> None:
        payload = asdict(notification, dict_factory=remove_none_dict_factory)
        payload["style"] = notification.style.name
        self.logger.info(json.dumps(payload))
