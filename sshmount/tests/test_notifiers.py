# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import json
from pathlib import Path
from typing import Dict

import click
import pytest

from sshmount.mounting.cli.session import make_notifier
from sshmount.mounting.notify.protocol import Notifier
from sshmount.mounting.notify.utils import Factory, make_register
from sshmount.notifiers import registry
from sshmount.notifiers.do_nothing import DoNothing
from sshmount.notifiers.file import File
from sshmount.notifiers.stdout import Stdout
from sshmount.schemas.notification import Notification, Style

MOUNTED = Notification(Style.SUCCESS, "Mounted", "dev mounted at /home/me/dev")
FAILED = Notification(Style.FAILURE, "Mount failed", "read: Connection refused")


def test_registry_contains_builtin_notifiers() -> None:
    assert registry == {"do_nothing": DoNothing, "file": File, "stdout": Stdout}


def test_register_rejects_duplicate_names() -> None:
    r: Dict[str, Factory[Notifier]] = {}
    register = make_register(r)
    register("a")(DoNothing)

    with pytest.raises(RuntimeError, match="already registered"):
        register("a")(Stdout)


def test_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    notifier = Stdout(color=False)

    notifier.notify(MOUNTED)
    notifier.notify(FAILED)

    captured = capsys.readouterr()
    assert captured.out == "Mounted: dev mounted at /home/me/dev\n"
    assert captured.err == "Mount failed: read: Connection refused\n"


def test_file(tmp_path: Path) -> None:
    path = tmp_path / "notifications" / "out.jsonl"
    notifier = File(file_path=str(path))

    notifier.notify(MOUNTED)
    notifier.notify(FAILED)

    records = [json.loads(line) for line in path.read_text().splitlines()]
    assert records == [
        {
            "style": "SUCCESS",
            "title": "Mounted",
            "message": "dev mounted at /home/me/dev",
        },
        {
            "style": "FAILURE",
            "title": "Mount failed",
            "message": "read: Connection refused",
        },
    ]


def test_do_nothing(capsys: pytest.CaptureFixture[str]) -> None:
    DoNothing().notify(FAILED)
    assert capsys.readouterr() == ("", "")


class TestMakeNotifier:
    @staticmethod
    def test_passes_options() -> None:
        notifier = make_notifier(registry, "stdout", ["color=false"])
        assert isinstance(notifier, Stdout)
        assert notifier.color is False

    @staticmethod
    def test_unknown_name() -> None:
        with pytest.raises(click.UsageError, match="could not be found"):
            make_notifier(registry, "slack", [])

    @staticmethod
    def test_unrecognized_option() -> None:
        with pytest.raises(click.UsageError, match="colour"):
            make_notifier(registry, "stdout", ["colour=false"])

    @staticmethod
    def test_missing_option() -> None:
        with pytest.raises(click.UsageError, match="file_path"):
            make_notifier(registry, "file", [])

    @staticmethod
    def test_rejects_non_notifiers() -> None:
        with pytest.raises(click.ClickException, match="does not appear to implement"):
            make_notifier({"bad": object}, "bad", [])
