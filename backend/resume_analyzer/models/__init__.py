"""
数据库模型模块
导出表模型、生命周期状态和投影
"""

from .resume import (
    ResumeRecord,
    ResumeStatus,
    ResumeSummary,
    UploadSummary,
    FileMeta,
    ResumeStatistics,
    Uploaded,
    Processing,
    Completed,
    Failed,
    LifecycleState,
    ALLOWED_TRANSITIONS,
)

# 基础模型
from .base import TimestampModel

__all__ = [
    "ResumeRecord", "ResumeStatus", "ResumeSummary", "UploadSummary", "FileMeta", "ResumeStatistics",
    "Uploaded", "Processing", "Completed", "Failed", "LifecycleState",
    "ALLOWED_TRANSITIONS",
    "TimestampModel"
]
