"""
核心模块
提供配置和领域异常
"""

from .config import Settings, settings, configure_logging
from .errors import (
    ResumeAnalyzerError,
    UnsupportedMediaType,
    ExtractionFailed,
    InsufficientText,
    NotFound,
    InvalidTransition,
    AnalysisInProgress,
    ProviderUnavailable,
    MalformedProviderResponse,
    IncompleteAnalysis,
    AnalysisFailed,
)

__all__ = [
    "Settings", "settings", "configure_logging",
    "ResumeAnalyzerError",
    "UnsupportedMediaType", "ExtractionFailed", "InsufficientText",
    "NotFound", "InvalidTransition", "AnalysisInProgress",
    "ProviderUnavailable", "MalformedProviderResponse",
    "IncompleteAnalysis", "AnalysisFailed",
]
