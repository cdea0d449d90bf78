# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional

from sshmount.mounting.utils.error import log_error
from sshmount.mounting.utils.shell import CommandRunner, error_text
from sshmount.schemas.active_mount import ActiveMount
from sshmount.schemas.mount_definition import MountDefinition
from typeguard import typechecked

logger = logging.getLogger(__name__)

FUSE_MARKER = "fuse"

FINDMNT_COMMAND = "findmnt"
FINDMNT_ARGS = ["--json", "--list", "--output", "SOURCE,TARGET,FSTYPE"]
MOUNT_COMMAND = "mount"


class ProbeError(Exception):
    """Raised internally when a mount table source cannot be used."""


@dataclass
class ProbeResult:
    """Active FUSE mounts, and whether they could actually be determined.

    `degraded` is set if every mount table source failed; `mounts` is then empty.
    """

    mounts: List[ActiveMount] = field(default_factory=list)
    degraded: bool = False
    reason: Optional[str] = None


@typechecked
def as_active_mount(line: str) -> Optional[ActiveMount]:
    """Parse one line of `mount` output, e.g.

        user@host:/home/user on /mnt/dev type fuse.sshfs (rw,nosuid,nodev)

    Tokens 1, 3 and 5 are the device, mount point and filesystem type. Lines with
    fewer tokens yield `None`.
    """
    parts = line.split()
    if len(parts) < 5:
        return None
    return ActiveMount(device=parts[0], mount_point=parts[2], filesystem_type=parts[4])


def parse_mount_output(lines: Iterable[str]) -> List[ActiveMount]:
    mounts = []
    for line in lines:
        if FUSE_MARKER not in line or not line.strip():
            continue
        mount = as_active_mount(line)
        if mount is None:
            logger.debug(f"Skipping malformed mount line: {line!r}")
            continue
        mounts.append(mount)
    return mounts


def is_fuse_type(fstype: Any) -> bool:
    """`fuse` or `fuse.<subtype>`; `fusectl` and `fuseblk` are not user-space
    network mounts.
    """
    return isinstance(fstype, str) and (
        fstype == FUSE_MARKER or fstype.startswith(FUSE_MARKER + ".")
    )


def parse_findmnt_json(output: str) -> List[ActiveMount]:
    """Parse `findmnt --json --list` output, keeping FUSE filesystems only."""
    try:
        document: Any = json.loads(output)
        entries = document["filesystems"]
    except (ValueError, KeyError, TypeError) as e:
        raise ProbeError(f"Unexpected findmnt output: {e}") from e

    mounts = []
    for entry in entries:
        try:
            fstype = entry["fstype"]
            mount = ActiveMount(
                device=entry["source"],
                mount_point=entry["target"],
                filesystem_type=fstype,
            )
        except (KeyError, TypeError):
            logger.debug(f"Skipping malformed findmnt entry: {entry!r}")
            continue
        if not is_fuse_type(fstype):
            continue
        mounts.append(mount)
    return mounts


class LiveMountProbe:
    """Reads the OS mount table for FUSE mounts.

    `findmnt` is preferred since its JSON output survives whitespace in paths; the
    positional parsing of `mount` output is the fallback.
    """

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def _from_findmnt(self) -> List[ActiveMount]:
        out = self.runner.run(FINDMNT_COMMAND, FINDMNT_ARGS)
        if out.returncode != 0:
            raise ProbeError(f"findmnt failed: {error_text(out)}")
        return parse_findmnt_json(out.stdout)

    def _from_mount(self) -> List[ActiveMount]:
        out = self.runner.run(MOUNT_COMMAND, [])
        if out.returncode != 0:
            raise ProbeError(f"mount failed: {error_text(out)}")
        return parse_mount_output(out.stdout.splitlines())

    def snapshot(self) -> ProbeResult:
        reasons = []
        for source in (self._from_findmnt, self._from_mount):
            try:
                return ProbeResult(mounts=source())
            except Exception as e:
                logger.debug(f"Mount table source unavailable: {e}")
                reasons.append(str(e))
        return ProbeResult(degraded=True, reason="; ".join(reasons))

    @log_error(__name__, return_on_error=[])
    def refresh(self) -> List[ActiveMount]:
        """The currently active FUSE mounts. Never raises; any failure to read the
        mount table yields an empty list.
        """
        return self.snapshot().mounts


def _normalize(path: str) -> str:
    # no stat calls: the mount root of an unreachable remote blocks on stat
    return os.path.normpath(os.path.abspath(path))


def is_mounted(definition: MountDefinition, mounts: Iterable[ActiveMount]) -> bool:
    local_path = _normalize(str(definition.expanded_local_path()))
    return any(_normalize(m.mount_point) == local_path for m in mounts)
