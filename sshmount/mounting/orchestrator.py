# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import logging
import shutil
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from sshmount.mounting.notify.protocol import Confirmer, Notifier
from sshmount.mounting.unmount_state import next_state, UnmountEvent, UnmountState
from sshmount.mounting.utils.error import MountInvocationError, UnmountInvocationError
from sshmount.mounting.utils.shell import CommandRunner, error_text, ShellCommandOut
from sshmount.schemas.mount_definition import MountDefinition
from sshmount.schemas.notification import Notification, Style

logger = logging.getLogger(__name__)

SSHFS_COMMAND = "sshfs"
SERVER_ALIVE_INTERVAL_SECS = 15
SERVER_ALIVE_COUNT_MAX = 3
SSHFS_OPTIONS = ",".join(
    [
        "reconnect",
        f"ServerAliveInterval={SERVER_ALIVE_INTERVAL_SECS}",
        f"ServerAliveCountMax={SERVER_ALIVE_COUNT_MAX}",
    ]
)

FUSERMOUNT_COMMANDS = ("fusermount3", "fusermount")

ESCALATION_TITLE = "Force unmount"
ESCALATION_MESSAGE = "Unmounting {path} failed: {error}\nForce the unmount? Unflushed writes may be lost."


@dataclass(frozen=True)
class UnmountCommands:
    """The graceful and forced unmount commands of a platform, as
    (command, leading args); the mount path is appended.
    """

    graceful: Tuple[str, Tuple[str, ...]]
    forced: Tuple[str, Tuple[str, ...]]

    @classmethod
    def for_platform(
        cls,
        platform: str = sys.platform,
        which: Callable[[str], Optional[str]] = shutil.which,
    ) -> "UnmountCommands":
        if platform == "darwin":
            return cls(
                graceful=("umount", ()),
                forced=("diskutil", ("unmount", "force")),
            )
        # fuse3-only systems ship fusermount3 alone
        fusermount = next(
            (c for c in FUSERMOUNT_COMMANDS if which(c) is not None),
            FUSERMOUNT_COMMANDS[-1],
        )
        return cls(
            graceful=(fusermount, ("-u",)),
            forced=(fusermount, ("-u", "-z")),
        )


@dataclass
class UnmountOutcome:
    mount_point: str
    forced: bool
    states: List[UnmountState] = field(default_factory=list)


def _make_dirs(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def sshfs_args(definition: MountDefinition, local_path: Path) -> List[str]:
    return ["-o", SSHFS_OPTIONS, definition.target, str(local_path)]


class MountOrchestrator:
    """Mounts saved definitions with sshfs and unmounts mount points.

    Every outcome is reported through `notifier`; failures are also raised so the
    caller can skip dependent steps.
    """

    def __init__(
        self,
        runner: CommandRunner,
        notifier: Notifier,
        confirmer: Confirmer,
        *,
        make_dirs: Callable[[Path], None] = _make_dirs,
        unmount_commands: Optional[UnmountCommands] = None,
    ):
        self.runner = runner
        self.notifier = notifier
        self.confirmer = confirmer
        self.make_dirs = make_dirs
        self.unmount_commands = unmount_commands or UnmountCommands.for_platform()

    def _fail(self, title: str, message: str) -> None:
        logger.error(f"{title}: {message}")
        self.notifier.notify(Notification(Style.FAILURE, title, message))

    def _succeed(self, title: str, message: str) -> None:
        logger.info(f"{title}: {message}")
        self.notifier.notify(Notification(Style.SUCCESS, title, message))

    def mount(self, definition: MountDefinition) -> Path:
        local_path = definition.expanded_local_path()
        try:
            self.make_dirs(local_path)
        except OSError as e:
            message = e.strerror or str(e)
            self._fail("Mount failed", f"Could not create {local_path}: {message}")
            raise MountInvocationError(message) from e

        out = self.runner.run(SSHFS_COMMAND, sshfs_args(definition, local_path))
        if out.returncode != 0:
            message = error_text(out)
            self._fail("Mount failed", message)
            raise MountInvocationError(message)

        self._succeed("Mounted", f"{definition.name} mounted at {local_path}")
        return local_path

    def _run_unmount(self, path: str, forced: bool) -> ShellCommandOut:
        command, args = (
            self.unmount_commands.forced if forced else self.unmount_commands.graceful
        )
        return self.runner.run(command, [*args, path])

    def unmount(self, path: str, force: bool = False) -> UnmountOutcome:
        state = next_state(
            UnmountState.IDLE,
            UnmountEvent.START_FORCED if force else UnmountEvent.START,
        )
        states = [UnmountState.IDLE, state]
        failure: Optional[ShellCommandOut] = None
        forced = False

        while state is not UnmountState.DONE:
            if state is UnmountState.PROMPT_ESCALATION:
                if failure is None:
                    raise RuntimeError(
                        f"Unmount of {path} reached {state.name} without a failed attempt"
                    )
                accepted = self.confirmer.confirm(
                    ESCALATION_TITLE,
                    ESCALATION_MESSAGE.format(path=path, error=error_text(failure)),
                )
                logger.info(
                    f"Force unmount of {path} {'accepted' if accepted else 'declined'}"
                )
                event = UnmountEvent.ACCEPTED if accepted else UnmountEvent.DECLINED
            else:
                forced = state is UnmountState.ATTEMPTING_FORCED
                out = self._run_unmount(path, forced)
                if out.returncode == 0:
                    failure = None
                    event = UnmountEvent.SUCCEEDED
                else:
                    failure = out
                    event = UnmountEvent.FAILED
            state = next_state(state, event)
            states.append(state)

        if failure is not None:
            message = error_text(failure)
            self._fail("Unmount failed", message)
            raise UnmountInvocationError(message, [s.name for s in states])

        self._succeed("Unmounted", f"{path} unmounted")
        return UnmountOutcome(mount_point=path, forced=forced, states=states)
