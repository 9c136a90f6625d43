"""
简历记录 Repository
提供 resumes 表的增删改查，所有按用户的查询都同时校验归属
"""

from collections import Counter
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func, or_, update
from sqlmodel import Session, select, col

from resume_analyzer.extraction.text_extractor import ensure_sufficient_text
from resume_analyzer.models.base import utc_now
from resume_analyzer.models.resume import (
    ALLOWED_TRANSITIONS,
    FileMeta,
    ResumeRecord,
    ResumeStatistics,
    ResumeStatus,
)

# 统计面板中展示的热门目标岗位数
TOP_TARGET_JOBS = 10


class ResumeRepository:
    """
    简历记录数据访问对象
    封装所有与 resumes 表相关的数据库操作
    """

    def __init__(self, session: Session):
        """
        初始化 Repository

        Args:
            session: SQLModel 数据库会话
        """
        self.session = session

    def create(self, owner_id: str, file_meta: FileMeta, extracted_text: str) -> ResumeRecord:
        """
        创建新简历记录（初始状态 uploaded）

        文本长度在持久化之前校验，不合格的文本不会产生任何记录。

        Args:
            owner_id: 归属用户 ID
            file_meta: 文件存储元数据
            extracted_text: 规范化后的提取文本

        Returns:
            创建的 ResumeRecord 对象

        Raises:
            InsufficientText: 文本少于 50 个字符
        """
        ensure_sufficient_text(extracted_text)

        record = ResumeRecord(
            owner_id=owner_id,
            original_name=file_meta.original_name,
            file_name=file_meta.file_name,
            file_path=file_meta.file_path,
            file_size=file_meta.file_size,
            mime_type=file_meta.mime_type,
            extracted_text=extracted_text,
            status=ResumeStatus.UPLOADED
        )
        self.session.add(record)
        self.session.commit()
        self.session.refresh(record)
        return record

    def get_by_id(self, record_id: str) -> Optional[ResumeRecord]:
        """根据 ID 获取记录，不校验归属"""
        return self.session.get(ResumeRecord, record_id)

    def get_owned(self, record_id: str, owner_id: str) -> Optional[ResumeRecord]:
        """
        获取属于指定用户的记录

        Returns:
            ResumeRecord 对象，不存在或不属于该用户时返回 None
        """
        statement = select(ResumeRecord).where(
            ResumeRecord.id == record_id,
            ResumeRecord.owner_id == owner_id
        )
        return self.session.exec(statement).first()

    def list_by_owner(
        self,
        owner_id: str,
        page: int = 1,
        limit: int = 10,
        status: Optional[ResumeStatus] = None
    ) -> Tuple[List[ResumeRecord], int]:
        """
        分页获取用户的记录（按创建时间倒序）

        Args:
            owner_id: 用户 ID
            page: 页码，从 1 开始
            limit: 每页数量
            status: 状态过滤（可选）

        Returns:
            (当前页记录列表, 满足条件的总数)
        """
        conditions = [ResumeRecord.owner_id == owner_id]
        if status is not None:
            conditions.append(ResumeRecord.status == status)

        statement = (
            select(ResumeRecord)
            .where(*conditions)
            .order_by(col(ResumeRecord.created_at).desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        records = self.session.exec(statement).all()

        count_statement = select(func.count()).select_from(ResumeRecord).where(*conditions)
        total = self.session.exec(count_statement).one()

        return list(records), total

    def claim_for_processing(self, record_id: str, owner_id: str, stale_before: datetime) -> bool:
        """
        以单条条件 UPDATE 把记录置为 processing（比较并交换）

        只有记录不在 processing，或 processing 的 updated_at 早于 stale_before 时才写入；
        并发请求中只有一个能命中。写入的字段与 transition_to(Processing()) 一致。

        Args:
            record_id: 记录 ID
            owner_id: 归属用户 ID
            stale_before: processing 记录被视为崩溃遗留的时间点

        Returns:
            是否成功占用
        """
        claimable = [
            status for status, targets in ALLOWED_TRANSITIONS.items()
            if ResumeStatus.PROCESSING in targets and status != ResumeStatus.PROCESSING
        ]
        statement = (
            update(ResumeRecord)
            .where(
                ResumeRecord.id == record_id,
                ResumeRecord.owner_id == owner_id,
                or_(
                    col(ResumeRecord.status).in_(claimable),
                    col(ResumeRecord.updated_at) < stale_before
                )
            )
            .values(
                status=ResumeStatus.PROCESSING,
                analysis=None,
                processing_time_ms=None,
                error=None,
                updated_at=utc_now()
            )
        )
        result = self.session.connection().execute(statement)
        self.session.commit()
        return result.rowcount == 1

    def save(self, record: ResumeRecord) -> ResumeRecord:
        """
        提交记录的修改（状态迁移后调用）

        同一记录的并发写入为后写覆盖，不做乐观锁
        """
        self.session.add(record)
        self.session.commit()
        self.session.refresh(record)
        return record

    def delete(self, record: ResumeRecord) -> None:
        """删除记录"""
        self.session.delete(record)
        self.session.commit()

    def get_statistics(self) -> ResumeStatistics:
        """
        全局统计

        Returns:
            总数、各状态计数、平均处理耗时、平均匹配度和热门目标岗位
        """
        status_rows = self.session.exec(
            select(ResumeRecord.status, func.count()).group_by(ResumeRecord.status)
        ).all()
        by_status = {status.value: 0 for status in ResumeStatus}
        for status, count in status_rows:
            by_status[ResumeStatus(status).value] = count

        average_time = self.session.exec(
            select(func.avg(ResumeRecord.processing_time_ms)).where(
                ResumeRecord.status == ResumeStatus.COMPLETED
            )
        ).one()

        # 匹配度和目标岗位存在 JSON 列中，在 Python 侧汇总
        analyses = self.session.exec(
            select(ResumeRecord.analysis).where(ResumeRecord.status == ResumeStatus.COMPLETED)
        ).all()
        percentages = []
        jobs = Counter()
        for analysis in analyses:
            skill_match = (analysis or {}).get("skillMatch") or {}
            if skill_match.get("matchPercentage") is not None:
                percentages.append(skill_match["matchPercentage"])
            if skill_match.get("targetJob"):
                jobs[skill_match["targetJob"]] += 1

        return ResumeStatistics(
            total=sum(by_status.values()),
            by_status=by_status,
            average_processing_time_ms=float(average_time) if average_time is not None else None,
            average_match_percentage=(
                sum(percentages) / len(percentages) if percentages else None
            ),
            top_target_jobs=[
                {"target_job": job, "count": count}
                for job, count in jobs.most_common(TOP_TARGET_JOBS)
            ]
        )
