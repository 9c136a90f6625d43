"""
提取模块
文本提取、规范化和技能识别
"""

from .text_extractor import (
    ExtractedText,
    MIN_TEXT_LENGTH,
    extract_text,
    normalize_text,
    ensure_sufficient_text,
)
from .skill_recognizer import (
    SKILL_PATTERNS,
    recognize_skills,
    recognize_skills_by_category,
)

__all__ = [
    "ExtractedText", "MIN_TEXT_LENGTH",
    "extract_text", "normalize_text", "ensure_sufficient_text",
    "SKILL_PATTERNS", "recognize_skills", "recognize_skills_by_category",
]
