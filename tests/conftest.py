"""Shared fixtures for codepaint tests."""

import logging

import pytest

import codepaint.logging_setup


@pytest.fixture(autouse=True)
def tmp_settings(tmp_path, monkeypatch):
    """Redirect the settings file so a user's real config never leaks in."""
    settings_file = tmp_path / "config" / "settings.json"
    monkeypatch.setattr(
        "codepaint.settings.get_config_path",
        lambda: settings_file,
    )
    return settings_file


@pytest.fixture(autouse=True)
def reset_logging(monkeypatch):
    """Undo logging_setup.configure() so caplog keeps seeing codepaint records."""
    logger = logging.getLogger("codepaint")
    saved = (logger.level, logger.propagate, list(logger.handlers))
    monkeypatch.setattr(codepaint.logging_setup, "_RUNTIME", None)
    yield
    for handler in logger.handlers:
        if handler not in saved[2]:
            handler.close()
    logger.setLevel(saved[0])
    logger.propagate = saved[1]
    logger.handlers[:] = saved[2]
