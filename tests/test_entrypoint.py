"""Tests for postgate/__main__.py."""

from __future__ import annotations

from unittest.mock import patch

from postgate import __main__ as entrypoint


def test_main_runs_uvicorn_with_settings(monkeypatch):
    monkeypatch.setattr(entrypoint.settings, "port", 9001)
    monkeypatch.setattr(entrypoint.settings, "environment", "production")
    with patch.object(entrypoint.uvicorn, "run") as run:
        entrypoint.main()

    args, kwargs = run.call_args
    assert args == ("postgate.main:app",)
    assert kwargs["port"] == 9001
    assert kwargs["reload"] is False
    assert kwargs["log_config"] is None
