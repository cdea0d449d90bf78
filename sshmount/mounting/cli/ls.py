# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import click

from sshmount.mounting.cli.session import pass_session, Session
from sshmount.mounting.clock import isoformat_to_date
from sshmount.mounting.probe import is_mounted
from sshmount.mounting.utils.error import PersistenceError
from sshmount.schemas.notification import Notification, Style
from typeguard import typechecked


@click.command()
@pass_session
@typechecked
def main(session: Session) -> None:
    """List saved mount definitions and whether each is mounted."""
    try:
        definitions = session.registry.list()
    except PersistenceError as e:
        session.notifier.notify(
            Notification(Style.FAILURE, "Failed to load mount definitions", str(e))
        )
        definitions = []

    if not definitions:
        click.echo("No saved mount definitions. Create one with 'sshmount add'.")
        return

    mounts = session.probe.refresh()
    for definition in definitions:
        status = "mounted" if is_mounted(definition, mounts) else "-"
        click.echo(
            f"{definition.id}  {definition.name}  "
            f"{definition.target} -> {definition.local_path}  "
            f"{isoformat_to_date(definition.created_at)}  {status}"
        )
