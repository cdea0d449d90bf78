# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import click

from sshmount.mounting.cli.session import echo_active_mounts, pass_session, Session
from typeguard import typechecked


@click.command()
@pass_session
@typechecked
def main(session: Session) -> None:
    """Show the FUSE mounts currently in the OS mount table."""
    result = session.probe.snapshot()
    if result.degraded:
        click.echo(f"Could not determine mount state: {result.reason}", err=True)
    echo_active_mounts(result.mounts)
