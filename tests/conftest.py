"""Shared fixtures: keep every test away from real config files and env."""

import os

import pytest

from lightfn import reset_settings


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point all config sources at an empty temp directory."""
    home = tmp_path / "home"
    home.mkdir()
    user_config_dir = tmp_path / "user_config"

    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(
        "lightfn.config.platformdirs.user_config_dir",
        lambda appname=None, appauthor=None: str(user_config_dir),
    )
    for key in list(os.environ):
        if key.startswith("LIGHTFN_"):
            monkeypatch.delenv(key)

    reset_settings()
    yield user_config_dir
    reset_settings()
