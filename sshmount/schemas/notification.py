# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
from dataclasses import dataclass
from enum import auto, Enum


class Style(Enum):
    SUCCESS = auto()
    FAILURE = auto()


@dataclass(frozen=True)
class Notification:
    style: Style
    title: str
    message: str
