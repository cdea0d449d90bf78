# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
"""Objects shared by the sshmount subcommands.

`CliObject` describes the process environment (clock, command runner, storage,
prompts) and can be replaced in tests. The group callback turns it into a `Session`
which subcommands receive through `pass_session`.
"""

import inspect
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Collection, List, Mapping, Protocol, runtime_checkable

import click
from omegaconf import OmegaConf as oc

from sshmount.mounting.clock import Clock, ClockImpl
from sshmount.mounting.notify.protocol import Confirmer, Notifier
from sshmount.mounting.notify.utils import explain_init_error, Factory
from sshmount.mounting.orchestrator import MountOrchestrator, UnmountCommands
from sshmount.mounting.probe import LiveMountProbe
from sshmount.mounting.registry import JsonFileStore, KeyValueStore, Registry
from sshmount.mounting.utils.shell import CommandRunner, SubprocessRunner
from sshmount.notifiers import registry as notifier_registry
from sshmount.schemas.active_mount import ActiveMount

logger = logging.getLogger(__name__)


class ClickConfirmer:
    """Prompt on the terminal, unless every question should be answered yes."""

    def __init__(self, assume_yes: bool = False):
        self.assume_yes = assume_yes

    def confirm(self, title: str, message: str) -> bool:
        if self.assume_yes:
            return True
        return click.confirm(f"{title}: {message}", default=False)


@runtime_checkable
class CliObject(Protocol):
    @property
    def clock(self) -> Clock: ...

    @property
    def runner(self) -> CommandRunner: ...

    @property
    def notifiers(self) -> Mapping[str, Factory[Notifier]]: ...

    def store(self, path: Path) -> KeyValueStore: ...

    def confirmer(self, assume_yes: bool) -> Confirmer: ...

    def unmount_commands(self) -> UnmountCommands: ...


@dataclass
class CliObjectImpl:
    clock: Clock = field(default_factory=ClockImpl)
    runner: CommandRunner = field(default_factory=SubprocessRunner)
    notifiers: Mapping[str, Factory[Notifier]] = field(
        default_factory=lambda: notifier_registry
    )

    def store(self, path: Path) -> KeyValueStore:
        return JsonFileStore(path)

    def confirmer(self, assume_yes: bool) -> Confirmer:
        return ClickConfirmer(assume_yes)

    def unmount_commands(self) -> UnmountCommands:
        return UnmountCommands.for_platform()


@dataclass
class Session:
    registry: Registry
    orchestrator: MountOrchestrator
    probe: LiveMountProbe
    notifier: Notifier
    confirmer: Confirmer


pass_session = click.make_pass_decorator(Session)


def make_notifier(
    notifiers: Mapping[str, Factory[Notifier]],
    name: str,
    notifier_opts: Collection[str],
) -> Notifier:
    try:
        factory = notifiers[name]
    except KeyError:
        raise click.UsageError(
            f"Notifier '{name}' could not be found. Here are the notifiers that are registered:\n\t{list(notifiers.keys())}"
        )
    kwargs = oc.to_container(oc.from_dotlist(list(notifier_opts)))
    assert isinstance(kwargs, dict)
    try:
        notifier = factory(**kwargs)
    except TypeError as e:
        msg = explain_init_error(e, name, factory, kwargs)
        if msg is None:
            raise
        raise click.UsageError(msg) from e

    if not isinstance(notifier, expected_proto := Notifier):
        notifier_module = inspect.getmodule(notifier)
        raise click.ClickException(
            f"Notifier '{name}' defined in\n"
            f"\t{notifier_module.__name__ if notifier_module else '?'}\n"
            f"does not appear to implement {expected_proto.__name__}"
        )
    logger.debug(f"will report outcomes to {name}")
    return notifier


def build_session(
    obj: CliObject,
    *,
    store: str,
    notifier: str,
    notifier_opts: Collection[str],
    yes: bool,
) -> Session:
    notifier_impl = make_notifier(obj.notifiers, notifier, notifier_opts)
    confirmer = obj.confirmer(yes)
    return Session(
        registry=Registry(obj.store(Path(store).expanduser()), clock=obj.clock),
        orchestrator=MountOrchestrator(
            obj.runner,
            notifier_impl,
            confirmer,
            unmount_commands=obj.unmount_commands(),
        ),
        probe=LiveMountProbe(obj.runner),
        notifier=notifier_impl,
        confirmer=confirmer,
    )


def echo_active_mounts(mounts: List[ActiveMount]) -> None:
    if not mounts:
        click.echo("No active SSHFS mounts.")
        return
    for mount in mounts:
        click.echo(f"{mount.device}  {mount.mount_point}  ({mount.filesystem_type})")
