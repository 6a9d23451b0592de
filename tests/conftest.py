"""Global pytest configuration isolating tests from the user's environment."""

from __future__ import annotations

import os
import pathlib
import sys

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest


@pytest.fixture(autouse=True)
def user_home(tmp_path, monkeypatch) -> pathlib.Path:
    """Point HOME at an empty directory and clear changeenv variables.

    ``os.environ`` is replaced by a copy for the duration of the test, so
    variables written by dotenv loading are discarded afterwards.
    """

    monkeypatch.setattr(os, "environ", os.environ.copy())

    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("CHANGEENV_DOTENV", str(tmp_path / "absent.env"))
    for name in (
        "CENV_ENVIRONMENTS",
        "CENV_CONFIG",
        "CHANGEENV_HISTORY_PATH",
        "CHANGEENV_LOG_LEVEL",
        "ZDOTDIR",
    ):
        monkeypatch.delenv(name, raising=False)
    return home
