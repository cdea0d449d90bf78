# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
"""The `sshmount` command group. Subcommands live in sibling modules."""

import logging
import os
from typing import Literal, Tuple

import click

from sshmount._version import __version__
from sshmount.mounting.cli import active, add, guide, ls, mount, remove, unmount
from sshmount.mounting.cli.session import build_session, CliObject, CliObjectImpl
from sshmount.mounting.click import (
    get_docs_for_registry,
    log_folder_option,
    log_level_option,
    notifier_option,
    notifier_opts_option,
    stdout_option,
    store_option,
    toml_config_option,
    yes_option,
)
from sshmount.mounting.utils.logger import init_logger
from sshmount.notifiers import registry

LOGGER_NAME = "sshmount"
LOG_FILE_NAME = "sshmount.log"

# tests pass their own object to `CliRunner.invoke`
_default_obj: CliObject = CliObjectImpl()


@click.group(
    context_settings={"obj": _default_obj},
    epilog=get_docs_for_registry(registry) + f"\n\nsshmount version: {__version__}",
)
@toml_config_option("sshmount")
@store_option
@notifier_option
@notifier_opts_option
@log_level_option
@log_folder_option
@stdout_option
@yes_option
@click.version_option(__version__)
@click.pass_context
def main(
    ctx: click.Context,
    store: str,
    notifier: str,
    notifier_opts: Tuple[str, ...],
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    log_folder: str,
    stdout: bool,
    yes: bool,
) -> None:
    """Manage SSHFS mount definitions and mount or unmount them."""
    logger, handler = init_logger(
        LOGGER_NAME,
        None if stdout else os.path.join(os.path.expanduser(log_folder), LOG_FILE_NAME),
        log_level=getattr(logging, log_level),
    )
    ctx.call_on_close(lambda: logger.removeHandler(handler))
    ctx.call_on_close(handler.close)

    obj: CliObject = ctx.obj
    ctx.obj = build_session(
        obj,
        store=store,
        notifier=notifier,
        notifier_opts=notifier_opts,
        yes=yes,
    )


main.add_command(add.main, name="add")
main.add_command(ls.main, name="list")
main.add_command(remove.main, name="remove")
main.add_command(mount.main, name="mount")
main.add_command(unmount.main, name="unmount")
main.add_command(active.main, name="active")
main.add_command(guide.main, name="guide")

if __name__ == "__main__":
    main()
