"""
运行时配置

遵循安全协议：从不读取 .env 文件，只从系统环境变量获取配置。
相对路径统一从 backend 目录解析。
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

# backend/ 目录
PROJECT_ROOT = Path(__file__).parent.parent.parent


def _resolve_path(raw: str) -> str:
    """将相对路径解析为基于 backend 目录的绝对路径"""
    if os.path.isabs(raw):
        return raw
    return str(PROJECT_ROOT / raw)


@dataclass
class Settings:
    """应用配置"""

    # SQLite 数据库文件路径
    database_path: str = field(default_factory=lambda: _resolve_path("database.db"))

    # 上传文件的存储目录
    upload_dir: str = field(default_factory=lambda: _resolve_path("uploads"))

    # LLM 配置文件路径
    llm_config_path: str = field(default_factory=lambda: _resolve_path("llm_config.json"))

    # processing 状态超过该秒数视为崩溃遗留，允许重新进入分析
    analysis_stale_seconds: int = 600

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """
        从系统环境变量构建配置

        Returns:
            Settings 实例，未设置的项使用默认值
        """
        defaults = cls()
        return cls(
            database_path=_resolve_path(os.environ.get("DATABASE_PATH", defaults.database_path)),
            upload_dir=_resolve_path(os.environ.get("UPLOAD_DIR", defaults.upload_dir)),
            llm_config_path=_resolve_path(os.environ.get("LLM_CONFIG_PATH", defaults.llm_config_path)),
            analysis_stale_seconds=int(
                os.environ.get("ANALYSIS_STALE_SECONDS", defaults.analysis_stale_seconds)
            ),
            log_level=os.environ.get("LOG_LEVEL", defaults.log_level).upper(),
        )


def configure_logging(level: str = None) -> None:
    """
    配置根日志记录器

    Args:
        level: 日志级别，为 None 时读取 LOG_LEVEL 环境变量
    """
    level = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# 全局配置实例
settings = Settings.from_env()
