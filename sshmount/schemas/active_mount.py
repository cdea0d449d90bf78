# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
from dataclasses import dataclass


@dataclass(frozen=True)
class ActiveMount:
    """A FUSE mount as currently reported by the OS mount table."""

    device: str
    mount_point: str
    filesystem_type: str
