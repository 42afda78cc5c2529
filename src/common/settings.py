"""
どこで: `common.settings`
何を: プロジェクトの環境変数を型付きで一元管理し、起動時に読み込む。
なぜ: `os.getenv` の散在を解消し、既定値/型の一貫性とテスト容易性を高めるため。
"""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_bool, env_str


@dataclass
class _Settings:
    # Logging
    LOG_LEVEL: str = "INFO"

    # Uniform packing
    UNIFORM_ALIGN_CHECK: bool = True
    DEBUG_UNIFORMS: bool = False

    # Config
    CONFIG_PATH: str | None = None


_settings = _Settings()


def reload_from_env() -> None:
    """環境変数から設定を再読込。

    - bool は `env_bool`、文字列は `env_str` を使用。
    - ログレベルは大文字へ正規化する。
    """
    _settings.LOG_LEVEL = (env_str("WVP_LOG_LEVEL", "INFO") or "INFO").upper()
    _settings.UNIFORM_ALIGN_CHECK = env_bool("WVP_UNIFORM_ALIGN_CHECK", True)
    _settings.DEBUG_UNIFORMS = env_bool("WVP_DEBUG_UNIFORMS", False)
    _settings.CONFIG_PATH = env_str("WVP_CONFIG", None)


def get() -> _Settings:
    """現在の設定スナップショットを返す。"""
    return _settings


# 初期ロード
reload_from_env()


__all__ = ["get", "reload_from_env", "_Settings"]
