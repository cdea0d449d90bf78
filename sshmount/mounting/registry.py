# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import json
import logging
import os
import tempfile
import uuid
from pathlib import Path
from typing import Callable, Dict, List, Optional, Protocol, Sequence

from sshmount.mounting.clock import Clock, ClockImpl, unixtime_to_isoformat
from sshmount.mounting.coerce import ensure_list_of_dicts, ensure_str_dict
from sshmount.mounting.dataclass_utils import (
    asdict_with_field_names,
    check_str_fields,
    instantiate_dataclass,
)
from sshmount.mounting.utils.error import (
    ConcurrentModificationError,
    DefinitionNotFoundError,
    PersistenceError,
)
from sshmount.schemas.mount_definition import MountDefinition
from typeguard import TypeCheckError

logger = logging.getLogger(__name__)

STORAGE_KEY = "sshfs-mount-points"

# number of fresh ids to try before giving up on finding an unused one
_MAX_ID_ATTEMPTS = 16


class KeyValueStore(Protocol):
    """Durable string key/value storage.

    Both operations raise `PersistenceError` if the underlying storage fails.
    """

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class JsonFileStore:
    """A key/value store kept as a single JSON object in a file.

    Writes go to a temporary file which then replaces the store, so readers never
    observe a partial write.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        try:
            with self.path.open("r", encoding="utf-8") as f:
                return ensure_str_dict(json.load(f))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError, TypeCheckError) as e:
            raise PersistenceError(f"Could not read store {self.path}: {e}") from e

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        contents = self._load()
        contents[key] = value
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                delete=False,
            ) as f:
                tmp_name = f.name
                json.dump(contents, f, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceError(f"Could not write store {self.path}: {e}") from e


def decode_definitions(raw: Optional[str]) -> List[MountDefinition]:
    """Parse the stored JSON document into definitions, preserving order."""
    if not raw:
        return []
    try:
        records = ensure_list_of_dicts(json.loads(raw))
        definitions = []
        for record in records:
            definition = instantiate_dataclass(MountDefinition, record, logger=logger)
            check_str_fields(definition)
            definitions.append(definition)
    except (ValueError, TypeError, TypeCheckError) as e:
        raise PersistenceError(f"Stored mount definitions are malformed: {e}") from e
    return definitions


def encode_definitions(points: Sequence[MountDefinition]) -> str:
    return json.dumps([asdict_with_field_names(p) for p in points])


def _new_id() -> str:
    return uuid.uuid4().hex


class Registry:
    """CRUD access to the saved mount definitions.

    `definitions` reflects the store only as of the last successful `list` or
    `save`; a failed save leaves it untouched. Saves are rejected with
    `ConcurrentModificationError` if the stored value changed since it was last read.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        clock: Optional[Clock] = None,
        id_factory: Callable[[], str] = _new_id,
        key: str = STORAGE_KEY,
    ):
        self.store = store
        self.clock: Clock = clock if clock is not None else ClockImpl()
        self.id_factory = id_factory
        self.key = key
        self._definitions: List[MountDefinition] = []
        self._has_read = False
        self._last_raw: Optional[str] = None

    @property
    def definitions(self) -> List[MountDefinition]:
        return list(self._definitions)

    def list(self) -> List[MountDefinition]:
        raw = self.store.get(self.key)
        definitions = decode_definitions(raw)
        self._has_read = True
        self._last_raw = raw
        self._definitions = definitions
        return list(definitions)

    def save(self, points: Sequence[MountDefinition]) -> None:
        if self._has_read and self.store.get(self.key) != self._last_raw:
            raise ConcurrentModificationError(
                "Mount definitions were changed by another process; reload and try again."
            )
        raw = encode_definitions(points)
        self.store.set(self.key, raw)
        logger.debug(f"Saved {len(points)} mount definition(s)")
        self._has_read = True
        self._last_raw = raw
        self._definitions = list(points)

    def add(
        self, *, name: str, local_path: str, user: str, host: str, remote_path: str
    ) -> MountDefinition:
        fields = {
            "name": name,
            "local_path": local_path,
            "user": user,
            "host": host,
            "remote_path": remote_path,
        }
        empty = [k for k, v in fields.items() if not v.strip()]
        if empty:
            raise ValueError(f"Mount definition fields must not be empty: {empty}")

        current = self.list()
        definition = MountDefinition(
            id=self._unused_id({p.id for p in current}),
            created_at=unixtime_to_isoformat(self.clock.unixtime()),
            **fields,
        )
        self.save([*current, definition])
        logger.info(f"Added mount definition '{definition.name}' ({definition.id})")
        return definition

    def remove(self, id: str) -> Optional[MountDefinition]:
        current = self.list()
        remaining = [p for p in current if p.id != id]
        if len(remaining) == len(current):
            logger.debug(f"No mount definition with id {id}; nothing removed")
            return None
        removed = next(p for p in current if p.id == id)
        self.save(remaining)
        logger.info(f"Removed mount definition '{removed.name}' ({removed.id})")
        return removed

    def get(self, key: str) -> MountDefinition:
        """Find a definition by id, or else by name if exactly one has that name."""
        current = self.list()
        for p in current:
            if p.id == key:
                return p
        by_name = [p for p in current if p.name == key]
        if len(by_name) == 1:
            return by_name[0]
        if by_name:
            raise DefinitionNotFoundError(
                f"Name '{key}' is ambiguous; use one of the ids: {[p.id for p in by_name]}"
            )
        raise DefinitionNotFoundError(f"No mount definition with id or name '{key}'")

    def _unused_id(self, taken: set[str]) -> str:
        for _ in range(_MAX_ID_ATTEMPTS):
            candidate = self.id_factory()
            if candidate not in taken:
                return candidate
        raise RuntimeError(f"Could not generate an unused id after {_MAX_ID_ATTEMPTS} tries")
