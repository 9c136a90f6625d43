"""
LangGraph 工作流定义

简历分析生命周期：
start_processing_node -> run_analysis_node -> (complete_node | fail_node) -> END
"""

from langgraph.graph import StateGraph, END

from resume_analyzer.agent.state import AnalysisState
from resume_analyzer.agent.nodes.lifecycle import (
    start_processing_node,
    run_analysis_node,
    route_after_analysis,
    complete_node,
    fail_node,
)


def create_analysis_graph():
    """
    创建简历分析工作流图

    工作流说明：
    1. start_processing_node (入口) - 持久化 processing 状态
    2. run_analysis_node - 调用 LLM 分析并计时
    3. route_after_analysis - 根据是否出错决策下一步
    4. complete_node / fail_node - 持久化终态

    调用时需在 config["configurable"] 中提供 engine 和 provider。

    Returns:
        编译后的 LangGraph 应用
    """
    workflow = StateGraph(AnalysisState)

    workflow.add_node("start_processing_node", start_processing_node)
    workflow.add_node("run_analysis_node", run_analysis_node)
    workflow.add_node("complete_node", complete_node)
    workflow.add_node("fail_node", fail_node)

    workflow.set_entry_point("start_processing_node")
    workflow.add_edge("start_processing_node", "run_analysis_node")

    workflow.add_conditional_edges(
        "run_analysis_node",
        route_after_analysis,
        {
            "complete_node": "complete_node",
            "fail_node": "fail_node"
        }
    )

    workflow.add_edge("complete_node", END)
    workflow.add_edge("fail_node", END)

    return workflow.compile()


# 创建全局图实例（无状态，依赖在调用时注入）
analysis_graph = create_analysis_graph()
