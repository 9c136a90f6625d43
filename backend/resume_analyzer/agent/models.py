"""
Agent 数据模型 - LLM 结构化输出模式

定义分析结果的结构，LLM 返回的 JSON 必须能校验为这些模型。
JSON 键使用 camelCase（通过别名），Python 属性使用 snake_case。
"""

from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

Priority = Literal["high", "medium", "low"]

# 分析结果必须包含的顶层字段（允许为空集合）
REQUIRED_ANALYSIS_FIELDS = (
    "strengths",
    "missingSkills",
    "skillMatch",
    "suggestions",
    "bulletPoints",
)


def clamp_percentage(value) -> float:
    """将匹配度钳制到 [0, 100]，超出范围不报错"""
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"matchPercentage 不是数值: {value!r}")
    return max(0.0, min(100.0, number))


def _dedupe(values: List[str]) -> List[str]:
    """保序去重"""
    return list(dict.fromkeys(values))


class _ResultModel(BaseModel):
    """允许按字段名或别名填充"""
    model_config = ConfigDict(populate_by_name=True)


class Strength(_ResultModel):
    """优势项"""
    skill: str
    confidence: float = Field(ge=0.0, le=1.0, description="置信度 0-1")
    description: str = ""


class MissingSkill(_ResultModel):
    """缺失技能"""
    skill: str
    importance: Priority
    suggestion: str = ""

    @field_validator("importance", mode="before")
    @classmethod
    def _lower_importance(cls, value):
        return value.lower() if isinstance(value, str) else value


class SkillMatch(_ResultModel):
    """目标岗位的技能匹配"""
    target_job: str = Field(alias="targetJob")
    match_percentage: float = Field(alias="matchPercentage")
    matched_skills: List[str] = Field(default_factory=list, alias="matchedSkills")
    missing_skills: List[str] = Field(default_factory=list, alias="missingSkills")

    @field_validator("match_percentage", mode="before")
    @classmethod
    def _clamp_percentage(cls, value):
        return clamp_percentage(value)

    @field_validator("matched_skills", "missing_skills")
    @classmethod
    def _unique_skills(cls, value):
        return _dedupe(value)


class Suggestion(_ResultModel):
    """改进建议"""
    category: str
    title: str
    description: str = ""
    priority: Priority

    @field_validator("priority", mode="before")
    @classmethod
    def _lower_priority(cls, value):
        return value.lower() if isinstance(value, str) else value


class BulletPointGroup(_ResultModel):
    """按分类分组的简历要点"""
    category: str
    points: List[str] = Field(default_factory=list)


class AnalysisResult(_ResultModel):
    """
    简历分析结果

    五个子集合必须全部存在（可以为空），缺失由 AnalysisProvider 报告为 IncompleteAnalysis。
    """
    strengths: List[Strength]
    missing_skills: List[MissingSkill] = Field(alias="missingSkills")
    skill_match: SkillMatch = Field(alias="skillMatch")
    suggestions: List[Suggestion]
    bullet_points: List[BulletPointGroup] = Field(alias="bulletPoints")

    def to_document(self) -> dict:
        """转换为可存入 JSON 列的 camelCase 字典"""
        return self.model_dump(by_alias=True)


class SkillMatchReport(_ResultModel):
    """
    基于本地识别技能的技能匹配结果
    不持久化，直接返回给调用方
    """
    match_percentage: float = Field(alias="matchPercentage")
    matched_skills: List[str] = Field(default_factory=list, alias="matchedSkills")
    missing_skills: List[str] = Field(default_factory=list, alias="missingSkills")
    explanation: str = ""

    @field_validator("match_percentage", mode="before")
    @classmethod
    def _clamp_percentage(cls, value):
        return clamp_percentage(value)

    @field_validator("matched_skills", "missing_skills")
    @classmethod
    def _unique_skills(cls, value):
        return _dedupe(value)
