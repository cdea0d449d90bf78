# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
"""States of an unmount request.

A graceful unmount that fails is only escalated to a forced unmount after the user
accepts; a forced unmount that fails ends the request.
"""

from enum import auto, Enum
from typing import Dict, Tuple


class UnmountState(Enum):
    IDLE = auto()
    ATTEMPTING_GRACEFUL = auto()
    ATTEMPTING_FORCED = auto()
    PROMPT_ESCALATION = auto()
    DONE = auto()


class UnmountEvent(Enum):
    START = auto()
    START_FORCED = auto()
    SUCCEEDED = auto()
    FAILED = auto()
    ACCEPTED = auto()
    DECLINED = auto()


_TRANSITIONS: Dict[Tuple[UnmountState, UnmountEvent], UnmountState] = {
    (UnmountState.IDLE, UnmountEvent.START): UnmountState.ATTEMPTING_GRACEFUL,
    (UnmountState.IDLE, UnmountEvent.START_FORCED): UnmountState.ATTEMPTING_FORCED,
    (UnmountState.ATTEMPTING_GRACEFUL, UnmountEvent.SUCCEEDED): UnmountState.DONE,
    (
        UnmountState.ATTEMPTING_GRACEFUL,
        UnmountEvent.FAILED,
    ): UnmountState.PROMPT_ESCALATION,
    (
        UnmountState.PROMPT_ESCALATION,
        UnmountEvent.ACCEPTED,
    ): UnmountState.ATTEMPTING_FORCED,
    (UnmountState.PROMPT_ESCALATION, UnmountEvent.DECLINED): UnmountState.DONE,
    (UnmountState.ATTEMPTING_FORCED, UnmountEvent.SUCCEEDED): UnmountState.DONE,
    (UnmountState.ATTEMPTING_FORCED, UnmountEvent.FAILED): UnmountState.DONE,
}


def next_state(state: UnmountState, event: UnmountEvent) -> UnmountState:
    """Raises `ValueError` if `event` is not valid in `state`.

    >>> next_state(UnmountState.ATTEMPTING_GRACEFUL, UnmountEvent.FAILED)
    <UnmountState.PROMPT_ESCALATION: 4>
    """
    try:
        return _TRANSITIONS[(state, event)]
    except KeyError:
        raise ValueError(f"Invalid event {event.name} in state {state.name}") from None
