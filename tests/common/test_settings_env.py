from __future__ import annotations

import logging

import pytest

from common import settings
from common.env import env_bool, env_str
from common.logging import setup_default_logging


@pytest.mark.parametrize(
    "raw,expected",
    [("1", True), ("0", False), ("true", True), ("Off", False), ("yes", True), ("maybe", True)],
)
def test_env_bool_parsing(monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool) -> None:
    monkeypatch.setenv("WVP_TEST_FLAG", raw)
    # 解釈できない値は既定値
    assert env_bool("WVP_TEST_FLAG", True) is expected


def test_env_bool_unset_uses_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("WVP_TEST_FLAG", raising=False)
    assert env_bool("WVP_TEST_FLAG", False) is False


def test_env_str_blank_is_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WVP_TEST_STR", "   ")
    assert env_str("WVP_TEST_STR", "x") == "x"
    monkeypatch.setenv("WVP_TEST_STR", " value ")
    assert env_str("WVP_TEST_STR") == "value"


def test_reload_from_env(restore_settings) -> None:
    restore_settings.setenv("WVP_LOG_LEVEL", "debug")
    restore_settings.setenv("WVP_UNIFORM_ALIGN_CHECK", "false")
    restore_settings.setenv("WVP_DEBUG_UNIFORMS", "1")
    restore_settings.setenv("WVP_CONFIG", "/tmp/scene.yaml")
    settings.reload_from_env()
    s = settings.get()
    assert s.LOG_LEVEL == "DEBUG"
    assert s.UNIFORM_ALIGN_CHECK is False
    assert s.DEBUG_UNIFORMS is True
    assert s.CONFIG_PATH == "/tmp/scene.yaml"


def test_defaults_without_env(restore_settings) -> None:
    for name in ("WVP_LOG_LEVEL", "WVP_UNIFORM_ALIGN_CHECK", "WVP_DEBUG_UNIFORMS", "WVP_CONFIG"):
        restore_settings.delenv(name, raising=False)
    settings.reload_from_env()
    s = settings.get()
    assert (s.LOG_LEVEL, s.UNIFORM_ALIGN_CHECK, s.DEBUG_UNIFORMS, s.CONFIG_PATH) == (
        "INFO",
        True,
        False,
        None,
    )


def test_setup_default_logging_is_noop_when_configured(monkeypatch: pytest.MonkeyPatch) -> None:
    root = logging.getLogger()
    handler = logging.NullHandler()
    monkeypatch.setattr(root, "handlers", [handler])
    monkeypatch.setattr(root, "level", logging.WARNING)
    setup_default_logging("DEBUG")
    assert root.handlers == [handler]
    assert root.level == logging.WARNING
