"""
Agent 模块 - LLM 分析适配器和分析工作流
"""

from .analysis_provider import AnalysisProvider
from .llm_factory import LLMFactory
from .models import AnalysisResult, SkillMatchReport
from .state import AnalysisState

__all__ = [
    "AnalysisProvider",
    "LLMFactory",
    "AnalysisResult",
    "SkillMatchReport",
    "AnalysisState"
]
