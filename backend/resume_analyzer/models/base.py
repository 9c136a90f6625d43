"""
基础数据库配置模块
提供所有模型共用的基础类和时间工具
"""

from datetime import datetime, timezone
from typing import Optional

from sqlmodel import SQLModel, Field


def utc_now() -> datetime:
    """返回 timezone-aware 的当前 UTC 时间"""
    return datetime.now(timezone.utc)


class TimestampModel(SQLModel):
    """时间戳基类，为所有模型提供 created_at 和 updated_at 字段

    updated_at 在每次 ORM 更新时自动刷新，状态迁移依赖它判断 processing 是否过期
    """
    created_at: Optional[datetime] = Field(
        default_factory=utc_now,
        nullable=False,
        index=True
    )
    updated_at: Optional[datetime] = Field(
        default_factory=utc_now,
        nullable=False,
        sa_column_kwargs={"onupdate": utc_now}
    )
