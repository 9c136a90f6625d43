"""
LangGraph 分析工作流状态定义
"""

from typing import Any, Dict, Optional, TypedDict


class AnalysisState(TypedDict, total=False):
    """
    分析工作流状态

    贯穿 start_processing -> run_analysis -> complete | fail 四个节点。
    不使用 checkpointer，error 字段可以直接保存异常对象。
    """

    # 输入
    record_id: str
    owner_id: str
    target_job: str

    # start_processing_node 读出的规范化文本
    resume_text: str

    # run_analysis_node 成功时写入
    analysis: Optional[Dict[str, Any]]
    duration_ms: Optional[int]

    # run_analysis_node 失败时写入，由服务层重新抛出
    error: Optional[BaseException]
