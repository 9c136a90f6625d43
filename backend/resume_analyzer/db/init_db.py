"""
数据库初始化脚本
负责创建数据库引擎和表结构
"""

import logging
import os

from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from resume_analyzer.core.config import settings

# 导入模型以注册到 SQLModel.metadata
from resume_analyzer.models.resume import ResumeRecord  # noqa: F401

logger = logging.getLogger(__name__)


def get_database_url() -> str:
    """
    获取数据库连接 URL
    优先使用 DATABASE_PATH 环境变量，否则使用 backend 目录下的 SQLite 文件
    """
    db_path = os.environ.get("DATABASE_PATH", settings.database_path)
    if db_path == ":memory:":
        return "sqlite:///:memory:"
    return f"sqlite:///{db_path}"


def get_engine(database_url: str = None):
    """
    创建并返回数据库引擎

    Args:
        database_url: 数据库 URL，为 None 时使用 get_database_url()
    """
    database_url = database_url or get_database_url()
    kwargs = {}
    if database_url.endswith(":memory:"):
        # 内存库：所有会话共享同一个连接，否则每个连接都是一个空库
        kwargs["poolclass"] = StaticPool
    engine = create_engine(
        database_url,
        echo=False,  # 设置为 True 可查看 SQL 语句
        connect_args={"check_same_thread": False},  # SQLite 特有配置
        **kwargs
    )
    return engine


def create_tables(engine) -> None:
    """
    创建所有数据库表
    SQLModel 会自动根据模型创建表结构
    """
    SQLModel.metadata.create_all(engine)
    logger.info("[DB] Database tables created at %s", engine.url)


def init_db(engine=None):
    """
    完整的数据库初始化流程

    Returns:
        已建表的数据库引擎
    """
    engine = engine or get_engine()
    create_tables(engine)
    return engine


if __name__ == "__main__":
    # 直接运行此脚本时，执行数据库初始化
    logging.basicConfig(level=logging.INFO)
    init_db()
