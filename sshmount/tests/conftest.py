# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import os
from pathlib import Path

import pytest
from dotenv import load_dotenv

from sshmount.tests.config import Config


@pytest.fixture
def config() -> Config:
    # loads .env file if any
    load_dotenv()
    try:
        return Config.from_env(os.environ)
    except KeyError as e:
        pytest.skip(f"Test host is not configured, missing environment variable {e}")


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the home directory at a temporary directory."""
    home = tmp_path / "home"
    monkeypatch.setenv("HOME", str(home))
    return home


def pytest_configure(config: "pytest.Config") -> None:
    config.addinivalue_line("markers", "slow: the test takes some time to run")
