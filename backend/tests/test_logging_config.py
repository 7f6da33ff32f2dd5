import logging

from agent_sandbox.logging_config import resolve_level, uvicorn_level


def test_resolve_level():
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level("WARN") == logging.WARNING
    assert resolve_level("nonsense") == logging.INFO


def test_uvicorn_level_uses_long_spelling():
    assert uvicorn_level("warn") == "warning"
    assert uvicorn_level("error") == "error"
