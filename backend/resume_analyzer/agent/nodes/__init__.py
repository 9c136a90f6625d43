"""
LangGraph 节点模块
"""

from .lifecycle import (
    start_processing_node,
    run_analysis_node,
    route_after_analysis,
    complete_node,
    fail_node,
)

__all__ = [
    "start_processing_node",
    "run_analysis_node",
    "route_after_analysis",
    "complete_node",
    "fail_node",
]
