"""
简历域模型 - 简历记录表及其生命周期状态

状态机：uploaded -> processing -> completed | failed
completed / failed 可以重新进入 processing（重新分析）。
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from sqlalchemy import Text
from sqlmodel import SQLModel, Field, Column, JSON

from resume_analyzer.core.errors import InvalidTransition
from .base import TimestampModel, utc_now


class ResumeStatus(str, Enum):
    """简历处理状态枚举"""
    UPLOADED = "uploaded"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


# ==================== 生命周期状态（标签变体） ====================

@dataclass(frozen=True)
class Uploaded:
    """已上传，尚未分析"""
    status = ResumeStatus.UPLOADED


@dataclass(frozen=True)
class Processing:
    """分析进行中"""
    status = ResumeStatus.PROCESSING


@dataclass(frozen=True)
class Completed:
    """分析完成：必须携带分析结果和耗时"""
    analysis: Dict[str, Any]
    duration_ms: int
    status = ResumeStatus.COMPLETED

    def __post_init__(self):
        if not isinstance(self.analysis, dict):
            raise ValueError("Completed 必须携带分析结果")
        if not isinstance(self.duration_ms, int) or self.duration_ms < 0:
            raise ValueError(f"duration_ms 必须是非负整数: {self.duration_ms!r}")


@dataclass(frozen=True)
class Failed:
    """分析失败：必须携带 {message, code}"""
    error: Dict[str, Any]
    status = ResumeStatus.FAILED

    def __post_init__(self):
        if not isinstance(self.error, dict) or not self.error.get("message") or not self.error.get("code"):
            raise ValueError(f"Failed 必须携带非空的 message 和 code: {self.error!r}")


LifecycleState = Union[Uploaded, Processing, Completed, Failed]

# 合法迁移表
# processing -> processing 仅用于崩溃遗留记录的重新进入，由服务层判定是否过期
ALLOWED_TRANSITIONS = {
    ResumeStatus.UPLOADED: {ResumeStatus.PROCESSING},
    ResumeStatus.PROCESSING: {
        ResumeStatus.PROCESSING,
        ResumeStatus.COMPLETED,
        ResumeStatus.FAILED,
    },
    ResumeStatus.COMPLETED: {ResumeStatus.PROCESSING},
    ResumeStatus.FAILED: {ResumeStatus.PROCESSING},
}


class ResumeRecord(TimestampModel, table=True):
    """
    简历记录表
    一份上传文件及其分析生命周期的持久化单元
    """
    __tablename__ = "resumes"

    # 主键：UUID 字符串
    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        primary_key=True
    )

    # 归属用户（由认证层提供的不透明主体 ID）
    # 索引优化：按用户查询历史列表
    owner_id: str = Field(index=True, nullable=False)

    # 创建后不可变的文件元数据
    original_name: str = Field(nullable=False)
    file_name: str = Field(nullable=False)
    file_path: str = Field(nullable=False)
    file_size: int = Field(nullable=False)
    mime_type: str = Field(nullable=False)

    # 规范化后的提取文本
    extracted_text: str = Field(sa_column=Column(Text, nullable=False))

    # 以下字段只允许通过 transition_to 修改
    status: ResumeStatus = Field(
        default=ResumeStatus.UPLOADED,
        index=True,
        nullable=False
    )
    analysis: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    processing_time_ms: Optional[int] = Field(default=None)
    error: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))

    @property
    def state(self) -> LifecycleState:
        """当前生命周期状态"""
        status = ResumeStatus(self.status)
        if status == ResumeStatus.COMPLETED:
            return Completed(analysis=self.analysis, duration_ms=self.processing_time_ms)
        if status == ResumeStatus.FAILED:
            return Failed(error=self.error)
        if status == ResumeStatus.PROCESSING:
            return Processing()
        return Uploaded()

    def transition_to(self, state: LifecycleState) -> None:
        """
        迁移到新的生命周期状态

        status、analysis、processing_time_ms、error 四个字段一起写入，
        保证 analysis 仅在 completed 时非空、error 仅在 failed 时非空。
        updated_at 显式刷新：processing -> processing 时其余字段不变，ORM 不会触发 onupdate。

        Args:
            state: 目标状态

        Raises:
            InvalidTransition: 迁移不在 ALLOWED_TRANSITIONS 中
        """
        current = ResumeStatus(self.status)
        target = state.status
        if target not in ALLOWED_TRANSITIONS.get(current, set()):
            raise InvalidTransition(current.value, target.value)

        self.status = target
        self.analysis = state.analysis if isinstance(state, Completed) else None
        self.processing_time_ms = state.duration_ms if isinstance(state, Completed) else None
        self.error = dict(state.error) if isinstance(state, Failed) else None
        self.updated_at = utc_now()

    @property
    def file_type(self) -> str:
        """文件子类型，例如 application/pdf -> pdf"""
        return self.mime_type.split("/")[-1]

    def analysis_summary(self) -> Optional[Dict[str, Any]]:
        """
        分析结果摘要

        Returns:
            各子集合的计数和匹配度，未完成分析时返回 None
        """
        if not self.analysis:
            return None

        skill_match = self.analysis.get("skillMatch") or {}
        return {
            "total_strengths": len(self.analysis.get("strengths") or []),
            "total_missing_skills": len(self.analysis.get("missingSkills") or []),
            "skill_match_percentage": skill_match.get("matchPercentage") or 0,
            "total_suggestions": len(self.analysis.get("suggestions") or []),
        }


class ResumeSummary(SQLModel):
    """
    历史列表投影
    不包含 extracted_text，减少传输量并避免泄露全文
    """
    id: str
    owner_id: str
    original_name: str
    file_name: str
    file_size: int
    mime_type: str
    status: ResumeStatus
    analysis: Optional[Dict[str, Any]] = None
    processing_time_ms: Optional[int] = None
    error: Optional[Dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: ResumeRecord) -> "ResumeSummary":
        """从完整记录构建投影"""
        return cls(
            id=record.id,
            owner_id=record.owner_id,
            original_name=record.original_name,
            file_name=record.file_name,
            file_size=record.file_size,
            mime_type=record.mime_type,
            status=record.status,
            analysis=record.analysis,
            processing_time_ms=record.processing_time_ms,
            error=record.error,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class FileMeta(SQLModel):
    """上传文件的存储元数据，创建记录时一次性写入"""
    original_name: str
    file_name: str
    file_path: str
    file_size: int
    mime_type: str


class ResumeStatistics(SQLModel):
    """全局统计（管理端分析面板）"""
    total: int = 0
    by_status: Dict[str, int] = {}
    average_processing_time_ms: Optional[float] = None
    average_match_percentage: Optional[float] = None
    top_target_jobs: List[Dict[str, Any]] = []


class UploadSummary(SQLModel):
    """上传成功后返回给调用方的摘要"""
    id: str
    original_name: str
    file_size: int
    status: ResumeStatus
    created_at: datetime
