"""
Repository (DAO) 模块
提供数据库操作的抽象层，封装 CRUD 逻辑
"""

from .resume_repository import ResumeRepository

__all__ = [
    "ResumeRepository"
]
