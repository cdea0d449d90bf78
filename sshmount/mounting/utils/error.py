#!/usr/bin/env python3
# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
"""Error types and miscellaneous error-handling helpers."""

import logging
from functools import wraps
from typing import Callable, Optional, overload, Sequence, TypeVar, Union

from typing_extensions import ParamSpec

_T = TypeVar("_T")
_Tr_co = TypeVar("_Tr_co", covariant=True)
_P = ParamSpec("_P")

UNKNOWN_ERROR = "unknown error"


class SshmountError(Exception):
    """Base class for errors raised by sshmount."""


class PersistenceError(SshmountError):
    """Raised if the mount definition store could not be read or written."""


class ConcurrentModificationError(PersistenceError):
    """Raised if the store changed between reading it and saving over it."""


class DefinitionNotFoundError(SshmountError, KeyError):
    """Raised if no mount definition matches the requested id or name."""

    def __str__(self) -> str:
        return Exception.__str__(self)


class InvocationError(SshmountError):
    """Raised if an external command failed.

    Attributes:
        message: The error text reported by the command.
    """

    def __init__(self, message: Optional[str]):
        self.message = message or UNKNOWN_ERROR
        super().__init__(self.message)


class MountInvocationError(InvocationError):
    """Raised if creating the mount point or running sshfs failed."""


class UnmountInvocationError(InvocationError):
    """Raised if the unmount attempt(s) failed.

    Attributes:
        states: The names of the unmount states visited, in order.
    """

    def __init__(self, message: Optional[str], states: Sequence[str] = ()):
        super().__init__(message)
        self.states = list(states)


@overload
def log_error(
    logger_name: str,
) -> Callable[[Callable[_P, _Tr_co]], Callable[_P, Optional[_Tr_co]]]: ...


@overload
def log_error(
    logger_name: str, return_on_error: _T = ...
) -> Callable[[Callable[_P, _Tr_co]], Callable[_P, Union[None, _T, _Tr_co]]]: ...


def log_error(
    logger_name: str,
    return_on_error: Optional[_T] = None,
) -> Callable[[Callable[_P, _Tr_co]], Callable[_P, Union[None, _T, _Tr_co]]]:
    """Decorator which catches and writes all exceptions to the given logger."""

    def decorator(f: Callable[_P, _Tr_co]) -> Callable[_P, Union[None, _T, _Tr_co]]:
        @wraps(f)
        def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> Union[None, _T, _Tr_co]:
            try:
                return f(*args, **kwargs)
            except Exception:
                logging.getLogger(logger_name).exception("An exception occurred")
                return return_on_error

        return wrapper

    return decorator
