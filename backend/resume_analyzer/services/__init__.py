"""
服务层模块
提供业务逻辑的抽象层，封装简历处理流水线
"""

from .file_storage import FileStorage
from .resume_service import ResumeService, AnalysisOutcome, HistoryPage

__all__ = [
    "FileStorage",
    "ResumeService",
    "AnalysisOutcome",
    "HistoryPage"
]
