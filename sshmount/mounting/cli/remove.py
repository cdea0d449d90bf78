# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import click

from sshmount.mounting.cli.session import pass_session, Session
from sshmount.mounting.utils.error import DefinitionNotFoundError, PersistenceError
from sshmount.schemas.notification import Notification, Style
from typeguard import typechecked


@click.command()
@click.argument("id_or_name")
@pass_session
@typechecked
def main(session: Session, id_or_name: str) -> None:
    """Delete a saved mount definition. Does not unmount it."""
    try:
        definition = session.registry.get(id_or_name)
        if not session.confirmer.confirm(
            "Delete mount definition", f'Delete "{definition.name}"?'
        ):
            click.echo("Aborted.")
            return
        session.registry.remove(definition.id)
    except DefinitionNotFoundError as e:
        raise click.BadParameter(str(e), param_hint="ID_OR_NAME") from e
    except PersistenceError as e:
        session.notifier.notify(
            Notification(Style.FAILURE, "Failed to save mount definitions", str(e))
        )
        raise SystemExit(1) from e

    session.notifier.notify(
        Notification(
            Style.SUCCESS, "Mount definition deleted", f"{definition.name} deleted"
        )
    )
