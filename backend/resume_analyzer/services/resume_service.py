"""
简历服务层

封装简历文档处理流水线：
1. 上传：存储字节 -> 提取文本 -> 规范化 -> 长度校验 -> 创建记录 (uploaded)
2. 分析：通过 LangGraph 工作流驱动 processing -> completed | failed
3. 历史查询、单条读取、删除
4. 要点生成和技能匹配（不修改记录）

所有按记录的操作都校验归属，不存在或不属于当前用户统一报 NotFound。
"""

import logging
import math
from datetime import timedelta
from typing import Any, Dict, List, Optional

from pydantic import BaseModel
from sqlmodel import Session

from resume_analyzer.agent.analysis_provider import AnalysisProvider
from resume_analyzer.agent.graph import analysis_graph
from resume_analyzer.agent.models import AnalysisResult, SkillMatchReport
from resume_analyzer.agent.prompts import DEFAULT_ROLE
from resume_analyzer.core.config import settings
from resume_analyzer.core.errors import NotFound
from resume_analyzer.db.init_db import get_engine
from resume_analyzer.extraction.skill_recognizer import recognize_skills
from resume_analyzer.extraction.text_extractor import (
    ensure_sufficient_text,
    extract_text,
    normalize_text,
)
from resume_analyzer.models.resume import (
    FileMeta,
    ResumeRecord,
    ResumeStatistics,
    ResumeStatus,
    ResumeSummary,
    UploadSummary,
)
from resume_analyzer.repositories.resume_repository import ResumeRepository
from resume_analyzer.services.file_storage import FileStorage

logger = logging.getLogger(__name__)

BULLET_POINT_CATEGORIES = ("experience", "skills", "achievements", "education")
MAX_BULLET_POINTS = 10
DEFAULT_BULLET_POINTS = 5


class AnalysisOutcome(BaseModel):
    """一次分析请求的返回值"""
    analysis: AnalysisResult
    processing_time_ms: int


class HistoryPage(BaseModel):
    """分页历史（不含提取文本）"""
    records: List[ResumeSummary]
    pagination: Dict[str, int]


def _require_text(value: Optional[str], name: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError(f"{name} 不能为空")
    return value


class ResumeService:
    """
    简历服务类

    LLM 适配器由调用方显式构造并注入，进程内复用；
    每个操作使用独立的数据库会话。

    使用示例：
        service = ResumeService(provider=AnalysisProvider())
        summary = service.upload("user-1", data, "application/pdf", "cv.pdf", len(data))
        outcome = service.request_analysis(summary.id, "user-1", "Backend Developer")
    """

    def __init__(
        self,
        provider: AnalysisProvider,
        engine=None,
        storage: FileStorage = None,
        stale_after_seconds: int = None
    ):
        """
        Args:
            provider: 分析提供方
            engine: 数据库引擎，为 None 时使用 get_engine()
            storage: 文件存储，为 None 时使用 settings.upload_dir
            stale_after_seconds: processing 超过该秒数视为崩溃遗留，允许重新分析
        """
        self.provider = provider
        self.engine = engine if engine is not None else get_engine()
        self.storage = storage or FileStorage(settings.upload_dir)
        if stale_after_seconds is None:
            stale_after_seconds = settings.analysis_stale_seconds
        self.stale_after = timedelta(seconds=stale_after_seconds)

    # ==================== 内部工具 ====================

    def _get_owned(self, repo: ResumeRepository, record_id: str, owner_id: str) -> ResumeRecord:
        record = repo.get_owned(record_id, owner_id)
        if record is None:
            raise NotFound(record_id)
        return record

    def _discard_file(self, file_path: str) -> None:
        """尽力删除文件，失败只记录日志"""
        try:
            self.storage.remove(file_path)
        except OSError as e:
            logger.warning("[ResumeService] Failed to delete file %s: %s", file_path, e)

    # ==================== 上传 ====================

    def upload(
        self,
        owner_id: str,
        data: bytes,
        mime_type: str,
        original_name: str,
        file_size: int
    ) -> UploadSummary:
        """
        上传并创建简历记录

        Returns:
            UploadSummary {id, original_name, file_size, status, created_at}

        Raises:
            UnsupportedMediaType / ExtractionFailed / InsufficientText:
                提取阶段失败，已写入的文件会被删除，不创建任何记录
        """
        file_name, file_path = self.storage.save(data, original_name)

        try:
            extracted = extract_text(data, mime_type)
            text = ensure_sufficient_text(normalize_text(extracted.text))

            with Session(self.engine) as session:
                record = ResumeRepository(session).create(
                    owner_id=owner_id,
                    file_meta=FileMeta(
                        original_name=original_name,
                        file_name=file_name,
                        file_path=file_path,
                        file_size=file_size,
                        mime_type=mime_type
                    ),
                    extracted_text=text
                )
                summary = UploadSummary(
                    id=record.id,
                    original_name=record.original_name,
                    file_size=record.file_size,
                    status=record.status,
                    created_at=record.created_at
                )
        except Exception:
            self._discard_file(file_path)
            raise

        logger.info("[ResumeService] Uploaded %s for owner %s", summary.id, owner_id)
        return summary

    # ==================== 分析 ====================

    def request_analysis(
        self,
        record_id: str,
        owner_id: str,
        target_job: str = DEFAULT_ROLE
    ) -> AnalysisOutcome:
        """
        请求 AI 分析

        允许对 completed / failed 记录重新分析，新结果覆盖旧结果；
        记录正在 processing 时拒绝，除非已超过 stale_after（崩溃遗留）。
        归属校验和 processing 占用由工作流入口节点在同一个会话中完成。

        Raises:
            NotFound: 记录不存在或不属于该用户（不做任何修改）
            AnalysisInProgress: 记录正在分析中
            AnalysisFailed / MalformedProviderResponse / IncompleteAnalysis:
                失败详情已持久化到记录后重新抛出
        """
        target_job = _require_text(target_job, "target_job")

        final_state = analysis_graph.invoke(
            {"record_id": record_id, "owner_id": owner_id, "target_job": target_job},
            config={"configurable": {
                "engine": self.engine,
                "provider": self.provider,
                "stale_after": self.stale_after
            }}
        )

        error = final_state.get("error")
        if error is not None:
            raise error

        return AnalysisOutcome(
            analysis=AnalysisResult.model_validate(final_state["analysis"]),
            processing_time_ms=final_state["duration_ms"]
        )

    # ==================== 查询与删除 ====================

    def get(self, record_id: str, owner_id: str) -> ResumeRecord:
        """
        获取完整记录（含提取文本）

        Raises:
            NotFound: 记录不存在或不属于该用户
        """
        with Session(self.engine) as session:
            return self._get_owned(ResumeRepository(session), record_id, owner_id)

    def list_history(
        self,
        owner_id: str,
        page: int = 1,
        limit: int = 10,
        status: Optional[ResumeStatus] = None
    ) -> HistoryPage:
        """
        分页历史，按创建时间倒序，不含提取文本

        Returns:
            HistoryPage {records, pagination{page, limit, total, pages}}
        """
        if page < 1:
            raise ValueError("page 必须大于等于 1")
        if limit < 1:
            raise ValueError("limit 必须大于等于 1")
        if status is not None:
            status = ResumeStatus(status)

        with Session(self.engine) as session:
            records, total = ResumeRepository(session).list_by_owner(owner_id, page, limit, status)
            summaries = [ResumeSummary.from_record(record) for record in records]

        return HistoryPage(
            records=summaries,
            pagination={
                "page": page,
                "limit": limit,
                "total": total,
                "pages": math.ceil(total / limit)
            }
        )

    def delete(self, record_id: str, owner_id: str) -> None:
        """
        删除记录及其文件

        先尽力删除文件（失败只记录日志），再删除记录；两者不是原子操作。

        Raises:
            NotFound: 记录不存在或不属于该用户
        """
        with Session(self.engine) as session:
            repo = ResumeRepository(session)
            record = self._get_owned(repo, record_id, owner_id)
            self._discard_file(record.file_path)
            repo.delete(record)

        logger.info("[ResumeService] Deleted %s", record_id)

    # ==================== 派生分析（不修改记录） ====================

    def generate_bullet_points(
        self,
        record_id: str,
        owner_id: str,
        category: str,
        count: int = DEFAULT_BULLET_POINTS
    ) -> List[str]:
        """
        为指定分类生成简历要点

        Returns:
            至多 count 条要点（LLM 返回更少时不补齐）
        """
        if category not in BULLET_POINT_CATEGORIES:
            raise ValueError(f"category 必须是 {', '.join(BULLET_POINT_CATEGORIES)} 之一")
        if not 1 <= count <= MAX_BULLET_POINTS:
            raise ValueError(f"count 必须在 1 到 {MAX_BULLET_POINTS} 之间")

        with Session(self.engine) as session:
            record = self._get_owned(ResumeRepository(session), record_id, owner_id)
            text = record.extracted_text

        return self.provider.generate_bullet_points(text, category)[:count]

    def match_skills(self, record_id: str, owner_id: str, target_job: str) -> SkillMatchReport:
        """
        技能匹配：用本地识别的技能与岗位技能表比对

        技能从已存储的规范化文本中识别，不重新提取文件
        """
        target_job = _require_text(target_job, "target_job")

        with Session(self.engine) as session:
            record = self._get_owned(ResumeRepository(session), record_id, owner_id)
            text = record.extracted_text

        skills = recognize_skills(text)
        return self.provider.match_skills(skills, target_job)

    def get_statistics(self) -> ResumeStatistics:
        """全局统计（管理端使用）"""
        with Session(self.engine) as session:
            return ResumeRepository(session).get_statistics()
