# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import click

from sshmount.mounting.cli.session import pass_session, Session
from sshmount.mounting.utils.error import PersistenceError
from sshmount.schemas.notification import Notification, Style
from typeguard import typechecked


@click.command()
@click.argument("name")
@click.argument("local_path")
@click.argument("user")
@click.argument("host")
@click.argument("remote_path")
@pass_session
@typechecked
def main(
    session: Session,
    name: str,
    local_path: str,
    user: str,
    host: str,
    remote_path: str,
) -> None:
    """Save a new mount definition.

    \b
    Example:
      sshmount add dev ~/remote-server ubuntu 192.168.1.100 /home/ubuntu
    """
    try:
        definition = session.registry.add(
            name=name,
            local_path=local_path,
            user=user,
            host=host,
            remote_path=remote_path,
        )
    except ValueError as e:
        raise click.UsageError(str(e)) from e
    except PersistenceError as e:
        session.notifier.notify(
            Notification(Style.FAILURE, "Failed to save mount definitions", str(e))
        )
        raise SystemExit(1) from e

    session.notifier.notify(
        Notification(
            Style.SUCCESS, "Mount definition created", f"{definition.name} created"
        )
    )
    click.echo(definition.id)
