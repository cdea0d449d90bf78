# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import click

from sshmount.notifiers import register
from sshmount.schemas.notification import Notification, Style

_COLORS = {
    Style.SUCCESS: "green",
    Style.FAILURE: "red",
}


@register("stdout")
class Stdout:
    """Print notifications to the terminal. Failures go to stderr."""

    def __init__(self, *, color: bool = True):
        self.color = color

    def notify(self, notification: Notification) -> None:
        title = notification.title
        if self.color:
            title = click.style(title, fg=_COLORS[notification.style], bold=True)
        click.echo(
            f"{title}: {notification.message}",
            err=notification.style is Style.FAILURE,
        )
