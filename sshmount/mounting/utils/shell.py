# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import logging
import os
import subprocess
from typing import List, Optional, Protocol, Sequence

from sshmount.mounting.utils.error import UNKNOWN_ERROR

logger = logging.getLogger(__name__)

# conventional shell exit status for "command not found"
COMMAND_NOT_FOUND = 127


class ShellCommandOut(Protocol):
    args: List[str]
    returncode: int
    stdout: str
    stderr: str


class CommandRunner(Protocol):
    """Runs a single external command to completion."""

    def run(self, command: str, args: Sequence[str]) -> ShellCommandOut:
        """Run `command` with `args` and return its exit status and output. Failures
        are reported through the return code, never raised.
        """


class SubprocessRunner:
    def __init__(self, timeout_secs: Optional[int] = None):
        self.timeout_secs = timeout_secs

    def run(self, command: str, args: Sequence[str]) -> ShellCommandOut:
        cmd = [command, *args]
        logger.info(f"Running command '{' '.join(cmd)}'")
        try:
            return subprocess.run(
                cmd,
                encoding="utf-8",
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                timeout=self.timeout_secs,
            )
        except Exception as e:
            return handle_subprocess_exception(cmd, e)


def handle_subprocess_exception(cmd: List[str], exc: Exception) -> ShellCommandOut:
    if isinstance(exc, FileNotFoundError):
        path = os.environ.get("PATH", "")
        return subprocess.CompletedProcess(
            args=cmd,
            returncode=COMMAND_NOT_FOUND,
            stdout="",
            stderr=f"Could not find executable '{cmd[0]}'. Current PATH: {path}",
        )
    elif isinstance(exc, subprocess.TimeoutExpired):
        return subprocess.CompletedProcess(
            args=cmd,
            returncode=128,
            stdout="",
            stderr="Error command timeout because of timeout setting.",
        )
    else:
        return subprocess.CompletedProcess(
            args=cmd,
            returncode=2,
            stdout="",
            stderr=f"Error: Unknown subprocess exception was raised: {exc}",
        )


def error_text(out: ShellCommandOut) -> str:
    """The most specific error message available from a failed command.

    >>> import subprocess
    >>> error_text(subprocess.CompletedProcess([], 1, "", "Connection refused\\n"))
    'Connection refused'
    >>> error_text(subprocess.CompletedProcess([], 1, "", ""))
    'unknown error'
    """
    return (out.stderr or "").strip() or (out.stdout or "").strip() or UNKNOWN_ERROR
