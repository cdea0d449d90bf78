# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import os
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class MountDefinition:
    """A saved SSHFS mount. Definitions are never edited in place, only created and
    deleted.

    The `field_name` metadata is the key used in the persisted JSON document.
    """

    id: str
    name: str
    local_path: str = field(metadata={"field_name": "localPath"})
    remote_path: str = field(metadata={"field_name": "remotePath"})
    user: str
    host: str
    created_at: str = field(metadata={"field_name": "createdAt"})

    @property
    def target(self) -> str:
        """The remote endpoint in the form understood by sshfs."""
        return f"{self.user}@{self.host}:{self.remote_path}"

    def expanded_local_path(self) -> Path:
        return Path(os.path.expanduser(self.local_path))
