# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import json
from itertools import count
from pathlib import Path
from typing import Callable, List

import pytest

from sshmount.mounting.registry import (
    decode_definitions,
    JsonFileStore,
    Registry,
    STORAGE_KEY,
)
from sshmount.mounting.utils.error import (
    ConcurrentModificationError,
    DefinitionNotFoundError,
    PersistenceError,
)
from sshmount.schemas.mount_definition import MountDefinition
from sshmount.tests.fakes import FakeClock, InMemoryStore
from typeguard import typechecked

DEV = MountDefinition(
    id="1700000000000",
    name="dev",
    local_path="~/dev",
    remote_path="/home/ubuntu",
    user="ubuntu",
    host="10.0.0.5",
    created_at="2023-11-14T22:13:20.000Z",
)
STAGING = MountDefinition(
    id="1700000000001",
    name="staging",
    local_path="/mnt/staging",
    remote_path="/srv",
    user="deploy",
    host="staging.example.com",
    created_at="2023-11-14T22:13:21.000Z",
)

# as written by earlier releases, with camelCase keys
DEV_RECORD = json.dumps(
    {
        "id": "1700000000000",
        "name": "dev",
        "localPath": "~/dev",
        "remotePath": "/home/ubuntu",
        "user": "ubuntu",
        "host": "10.0.0.5",
        "createdAt": "2023-11-14T22:13:20.000Z",
    }
)

DEV_FIELDS = dict(
    name="dev",
    local_path="~/dev",
    user="ubuntu",
    host="10.0.0.5",
    remote_path="/home/ubuntu",
)


def sequential_ids() -> Callable[[], str]:
    counter = count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def registry(store: InMemoryStore) -> Registry:
    return Registry(store, clock=FakeClock(), id_factory=sequential_ids())


def test_add_then_remove(registry: Registry) -> None:
    assert registry.list() == []

    definition = registry.add(**DEV_FIELDS)

    assert registry.list() == [definition]
    assert definition.id
    assert definition.name == "dev"
    assert definition.local_path == "~/dev"
    assert definition.user == "ubuntu"
    assert definition.host == "10.0.0.5"
    assert definition.remote_path == "/home/ubuntu"
    assert definition.created_at == "2022-11-11T20:19:11Z"

    assert registry.remove(definition.id) == definition
    assert registry.list() == []


@pytest.mark.parametrize(
    "points",
    [
        [],
        [DEV],
        [DEV, STAGING],
        [STAGING, DEV],
    ],
)
@typechecked
def test_save_then_list_round_trips(
    registry: Registry, points: List[MountDefinition]
) -> None:
    registry.save(points)
    assert registry.list() == points
    assert Registry(registry.store).list() == points


def test_add_preserves_insertion_order(registry: Registry) -> None:
    names = ["c", "a", "b"]
    for name in names:
        registry.add(**{**DEV_FIELDS, "name": name})
    assert [p.name for p in registry.list()] == names


def test_add_never_reuses_an_id(store: InMemoryStore) -> None:
    ids = iter(["same", "same", "other"])
    registry = Registry(store, clock=FakeClock(), id_factory=lambda: next(ids))

    first = registry.add(**DEV_FIELDS)
    second = registry.add(**DEV_FIELDS)

    assert (first.id, second.id) == ("same", "other")


def test_add_gives_up_when_ids_keep_colliding(store: InMemoryStore) -> None:
    registry = Registry(store, clock=FakeClock(), id_factory=lambda: "same")
    registry.add(**DEV_FIELDS)

    with pytest.raises(RuntimeError):
        registry.add(**DEV_FIELDS)
    assert len(registry.list()) == 1


@pytest.mark.parametrize("field", ["name", "local_path", "user", "host", "remote_path"])
def test_add_rejects_empty_fields(
    registry: Registry, store: InMemoryStore, field: str
) -> None:
    with pytest.raises(ValueError, match=field):
        registry.add(**{**DEV_FIELDS, field: " "})
    assert store.writes == 0


def test_remove_missing_id_leaves_set_unchanged(
    registry: Registry, store: InMemoryStore
) -> None:
    registry.save([DEV, STAGING])
    writes = store.writes

    assert registry.remove("does-not-exist") is None

    assert registry.list() == [DEV, STAGING]
    assert store.writes == writes


def test_failed_save_keeps_previous_view(
    registry: Registry, store: InMemoryStore
) -> None:
    registry.save([DEV])
    store.fail_writes = True

    with pytest.raises(PersistenceError):
        registry.save([DEV, STAGING])
    with pytest.raises(PersistenceError):
        registry.add(**DEV_FIELDS)

    assert registry.definitions == [DEV]
    store.fail_writes = False
    assert registry.list() == [DEV]


def test_list_propagates_read_failure(registry: Registry, store: InMemoryStore) -> None:
    store.fail_reads = True
    with pytest.raises(PersistenceError):
        registry.list()


def test_save_rejects_concurrent_modification(store: InMemoryStore) -> None:
    mine = Registry(store, clock=FakeClock(), id_factory=sequential_ids())
    theirs = Registry(store, clock=FakeClock(), id_factory=lambda: "theirs")
    mine.list()
    theirs.add(**{**DEV_FIELDS, "name": "theirs"})

    with pytest.raises(ConcurrentModificationError):
        mine.save([STAGING])

    # a fresh read-modify-save keeps the other writer's change
    mine.add(**DEV_FIELDS)
    assert [p.name for p in mine.list()] == ["theirs", "dev"]


def test_get_by_id_or_name(registry: Registry) -> None:
    registry.save([DEV, STAGING])
    assert registry.get(STAGING.id) == STAGING
    assert registry.get("dev") == DEV

    with pytest.raises(DefinitionNotFoundError):
        registry.get("prod")


def test_get_ambiguous_name(registry: Registry) -> None:
    twin = MountDefinition(**{**DEV.__dict__, "id": "twin"})
    registry.save([DEV, twin])

    with pytest.raises(DefinitionNotFoundError, match="ambiguous"):
        registry.get("dev")
    assert registry.get("twin") == twin


def test_reads_definitions_in_stored_wire_format() -> None:
    assert decode_definitions(f"[{DEV_RECORD}]") == [DEV]


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        json.dumps({"id": "1"}),
        json.dumps([{"id": "1", "name": "dev"}]),
        json.dumps([{**json.loads(DEV_RECORD), "id": 1}]),
    ],
)
def test_malformed_store_is_a_persistence_error(raw: str) -> None:
    with pytest.raises(PersistenceError):
        decode_definitions(raw)


class TestJsonFileStore:
    @staticmethod
    def test_missing_file_is_empty(tmp_path: Path) -> None:
        store = JsonFileStore(tmp_path / "store.json")
        assert store.get(STORAGE_KEY) is None
        assert Registry(store).list() == []

    @staticmethod
    def test_round_trip_keeps_other_keys(tmp_path: Path) -> None:
        path = tmp_path / "nested" / "store.json"
        store = JsonFileStore(path)
        store.set("other", "value")

        registry = Registry(store, clock=FakeClock(), id_factory=sequential_ids())
        definition = registry.add(**DEV_FIELDS)

        reopened = JsonFileStore(path)
        assert reopened.get("other") == "value"
        assert Registry(reopened).list() == [definition]
        # no temporary files left behind
        assert sorted(p.name for p in path.parent.iterdir()) == ["store.json"]

    @staticmethod
    def test_corrupt_file(tmp_path: Path) -> None:
        path = tmp_path / "store.json"
        path.write_text("{")
        with pytest.raises(PersistenceError):
            JsonFileStore(path).get(STORAGE_KEY)

    @staticmethod
    def test_non_string_values(tmp_path: Path) -> None:
        path = tmp_path / "store.json"
        path.write_text(json.dumps({STORAGE_KEY: [1, 2]}))
        with pytest.raises(PersistenceError):
            JsonFileStore(path).get(STORAGE_KEY)

    @staticmethod
    def test_failed_write_leaves_store_intact(tmp_path: Path) -> None:
        path = tmp_path / "store.json"
        store = JsonFileStore(path)
        registry = Registry(store, clock=FakeClock(), id_factory=sequential_ids())
        registry.save([DEV])

        # the parent of the store is now a file, so it cannot be written
        blocked = JsonFileStore(path / "store.json")
        with pytest.raises(PersistenceError):
            blocked.set(STORAGE_KEY, "[]")

        assert registry.list() == [DEV]
