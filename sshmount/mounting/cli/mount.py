# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import click

from sshmount.mounting.cli.session import echo_active_mounts, pass_session, Session
from sshmount.mounting.utils.error import (
    DefinitionNotFoundError,
    MountInvocationError,
    PersistenceError,
)
from sshmount.schemas.notification import Notification, Style
from typeguard import typechecked


@click.command()
@click.argument("id_or_name")
@pass_session
@typechecked
def main(session: Session, id_or_name: str) -> None:
    """Mount a saved definition with sshfs."""
    try:
        definition = session.registry.get(id_or_name)
    except DefinitionNotFoundError as e:
        raise click.BadParameter(str(e), param_hint="ID_OR_NAME") from e
    except PersistenceError as e:
        session.notifier.notify(
            Notification(Style.FAILURE, "Failed to load mount definitions", str(e))
        )
        raise SystemExit(1) from e

    try:
        session.orchestrator.mount(definition)
    except MountInvocationError as e:
        # already reported by the orchestrator
        raise SystemExit(1) from e

    echo_active_mounts(session.probe.refresh())
