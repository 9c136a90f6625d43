"""
简历分析生命周期节点

每个节点都打开独立的数据库会话，状态迁移立即提交：
- start_processing_node：校验归属并占用记录，uploaded/completed/failed -> processing（在调用 LLM 之前持久化）
- run_analysis_node：调用 AnalysisProvider 并计时，捕获所有失败
- complete_node：processing -> completed
- fail_node：processing -> failed，记录 {message, code=ANALYSIS_FAILED}

依赖（engine、provider、可选的 stale_after）通过 config["configurable"] 注入。
"""

import logging
import time
from datetime import timedelta
from typing import Any, Dict

from langchain_core.runnables import RunnableConfig
from sqlmodel import Session

from resume_analyzer.agent.state import AnalysisState
from resume_analyzer.core.config import settings
from resume_analyzer.core.errors import AnalysisInProgress, NotFound
from resume_analyzer.models.base import utc_now
from resume_analyzer.models.resume import Completed, Failed
from resume_analyzer.repositories.resume_repository import ResumeRepository

logger = logging.getLogger(__name__)

# 失败记录统一使用的错误码
FAILED_ERROR_CODE = "ANALYSIS_FAILED"


def _get_dependency(config: RunnableConfig, name: str) -> Any:
    """
    从 LangGraph config 中获取注入的依赖

    Raises:
        ValueError: 依赖未注入
    """
    configurable = config.get("configurable", {})
    dependency = configurable.get(name)
    if dependency is None:
        raise ValueError(f"config['configurable'] 中缺少 '{name}'")
    return dependency


def _load_record(repo: ResumeRepository, record_id: str):
    record = repo.get_by_id(record_id)
    if record is None:
        raise NotFound(record_id)
    return record


def start_processing_node(state: AnalysisState, config: RunnableConfig) -> Dict[str, Any]:
    """
    校验归属并占用记录（置为 processing 后立即提交）

    归属校验和占用在同一个会话中完成，占用是单条条件 UPDATE，
    并发请求只有一个能进入分析，其余报 AnalysisInProgress。
    进程在 LLM 调用期间崩溃时，记录会停留在 processing，超过 stale_after 后才允许重新进入。

    Raises:
        NotFound: 记录不存在或不属于 owner_id（不做任何修改）
        AnalysisInProgress: 记录正在分析中
    """
    engine = _get_dependency(config, "engine")
    stale_after = config.get("configurable", {}).get(
        "stale_after", timedelta(seconds=settings.analysis_stale_seconds)
    )
    record_id = state["record_id"]

    with Session(engine) as session:
        repo = ResumeRepository(session)
        record = repo.get_owned(record_id, state["owner_id"])
        if record is None:
            raise NotFound(record_id)
        if not repo.claim_for_processing(record_id, state["owner_id"], utc_now() - stale_after):
            raise AnalysisInProgress(record_id)
        resume_text = record.extracted_text

    logger.info("[Lifecycle] %s -> processing", record_id)
    return {"resume_text": resume_text, "analysis": None, "duration_ms": None, "error": None}


def run_analysis_node(state: AnalysisState, config: RunnableConfig) -> Dict[str, Any]:
    """
    调用分析提供方

    任何失败都写入 state["error"] 而不是直接抛出，以便 fail_node 先持久化失败详情
    """
    provider = _get_dependency(config, "provider")

    started = time.monotonic()
    try:
        result = provider.analyze(state["resume_text"], state["target_job"])
    except Exception as e:
        logger.warning("[Lifecycle] analysis of %s failed: %s", state["record_id"], e)
        return {"error": e}

    duration_ms = int((time.monotonic() - started) * 1000)
    return {"analysis": result.to_document(), "duration_ms": duration_ms}


def route_after_analysis(state: AnalysisState) -> str:
    """路由决策：有错误走 fail_node，否则走 complete_node"""
    if state.get("error") is not None:
        return "fail_node"
    return "complete_node"


def complete_node(state: AnalysisState, config: RunnableConfig) -> Dict[str, Any]:
    """保存分析结果和耗时，processing -> completed"""
    engine = _get_dependency(config, "engine")

    with Session(engine) as session:
        repo = ResumeRepository(session)
        record = _load_record(repo, state["record_id"])
        record.transition_to(Completed(analysis=state["analysis"], duration_ms=state["duration_ms"]))
        repo.save(record)

    logger.info("[Lifecycle] %s -> completed (%sms)", state["record_id"], state["duration_ms"])
    return {}


def fail_node(state: AnalysisState, config: RunnableConfig) -> Dict[str, Any]:
    """保存错误详情，processing -> failed"""
    engine = _get_dependency(config, "engine")
    error = state["error"]
    message = getattr(error, "message", None) or str(error) or "Analysis failed"

    with Session(engine) as session:
        repo = ResumeRepository(session)
        record = _load_record(repo, state["record_id"])
        record.transition_to(Failed(error={"message": message, "code": FAILED_ERROR_CODE}))
        repo.save(record)

    logger.info("[Lifecycle] %s -> failed: %s", state["record_id"], message)
    return {}
