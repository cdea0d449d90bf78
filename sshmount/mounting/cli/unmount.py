# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import click

from sshmount.mounting.cli.session import echo_active_mounts, pass_session, Session
from sshmount.mounting.utils.error import UnmountInvocationError
from typeguard import typechecked


@click.command()
@click.argument("path")
@click.option(
    "--force",
    "-f",
    is_flag=True,
    default=False,
    help="Skip the graceful attempt and force the unmount. Unflushed writes may be lost.",
)
@pass_session
@typechecked
def main(session: Session, path: str, force: bool) -> None:
    """Unmount PATH. If a graceful unmount fails you are asked whether to force it."""
    try:
        session.orchestrator.unmount(path, force=force)
    except UnmountInvocationError as e:
        # already reported by the orchestrator
        raise SystemExit(1) from e

    echo_active_mounts(session.probe.refresh())
