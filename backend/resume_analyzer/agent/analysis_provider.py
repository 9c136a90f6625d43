"""
分析提供方适配器

封装对外部 LLM 的三类调用：
1. analyze：全量简历分析（前 3000 字符，temperature 0.3）
2. generate_bullet_points：要点生成（前 2000 字符，temperature 0.4）
3. match_skills：基于本地识别技能的技能匹配（temperature 0.2）

LLM 客户端在构造时一次性创建并在进程内复用；凭证缺失在构造期即失败。
任何调用都不重试。
"""

import json
import logging
import re
from typing import Any, Iterable, List

from langchain_core.messages import HumanMessage, SystemMessage
from pydantic import ValidationError

from resume_analyzer.agent.llm_factory import LLMFactory
from resume_analyzer.agent.models import (
    REQUIRED_ANALYSIS_FIELDS,
    AnalysisResult,
    SkillMatchReport,
)
from resume_analyzer.agent.prompts import (
    ANALYSIS_PROMPT_TEMPLATE,
    ANALYSIS_SYSTEM_PROMPT,
    ANALYSIS_TEXT_LIMIT,
    BULLET_POINTS_PROMPT_TEMPLATE,
    BULLET_POINTS_SYSTEM_PROMPT,
    BULLET_POINTS_TEXT_LIMIT,
    DEFAULT_ROLE,
    SKILL_MATCH_PROMPT_TEMPLATE,
    SKILL_MATCH_SYSTEM_PROMPT,
    get_default_skills_for_role,
    truncate_text,
)
from resume_analyzer.core.errors import (
    AnalysisFailed,
    IncompleteAnalysis,
    MalformedProviderResponse,
    ProviderUnavailable,
)

logger = logging.getLogger(__name__)

# (temperature, max_tokens)
ANALYSIS_PARAMS = (0.3, 2000)
BULLET_POINTS_PARAMS = (0.4, 1000)
SKILL_MATCH_PARAMS = (0.2, 500)

_CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def _message_text(response: Any) -> str:
    """取出 LLM 响应的文本内容（兼容分段返回的 content）"""
    content = getattr(response, "content", response)
    if isinstance(content, list):
        content = "".join(
            part.get("text", "") if isinstance(part, dict) else str(part)
            for part in content
        )
    if not isinstance(content, str):
        raise MalformedProviderResponse(f"unexpected content type {type(content).__name__}")
    return content


def parse_json_content(content: str) -> Any:
    """
    将 LLM 文本解析为 JSON，容忍外层的 Markdown 代码块

    Raises:
        MalformedProviderResponse: 不是合法 JSON
    """
    text = content.strip()
    fenced = _CODE_FENCE_RE.match(text)
    if fenced:
        text = fenced.group(1)
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedProviderResponse(str(e))


def validate_analysis(data: Any) -> AnalysisResult:
    """
    校验分析结果

    - 五个顶层字段必须存在（允许为空集合），否则 IncompleteAnalysis
    - matchPercentage 钳制到 [0, 100]
    - 其余结构错误视为 MalformedProviderResponse
    """
    if not isinstance(data, dict):
        raise MalformedProviderResponse("analysis must be a JSON object")

    for field_name in REQUIRED_ANALYSIS_FIELDS:
        if data.get(field_name) is None:
            raise IncompleteAnalysis(field_name)

    try:
        return AnalysisResult.model_validate(data)
    except ValidationError as e:
        raise MalformedProviderResponse(str(e))


class AnalysisProvider:
    """
    外部分析服务适配器

    使用示例：
        provider = AnalysisProvider(LLMFactory())
        result = provider.analyze(resume_text, "Backend Developer")
    """

    def __init__(self, llm_factory: LLMFactory = None):
        """
        创建三个 LLM 客户端

        Args:
            llm_factory: LLM 工厂，为 None 时使用默认配置

        Raises:
            ProviderUnavailable: 配置文件缺失、格式错误、模型类型不支持或凭证未设置
        """
        factory = llm_factory or LLMFactory()
        try:
            self.analysis_llm = factory.create_llm(*ANALYSIS_PARAMS)
            self.bullet_points_llm = factory.create_llm(*BULLET_POINTS_PARAMS)
            self.skill_match_llm = factory.create_llm(*SKILL_MATCH_PARAMS)
        except (FileNotFoundError, json.JSONDecodeError, NotImplementedError) as e:
            raise ProviderUnavailable(str(e)) from e

        logger.info("[AnalysisProvider] LLM clients ready")

    def _invoke_json(self, llm: Any, system_prompt: str, prompt: str, operation: str) -> Any:
        """调用 LLM 并解析 JSON；调用本身的异常统一包装为 AnalysisFailed"""
        messages = [SystemMessage(content=system_prompt), HumanMessage(content=prompt)]
        try:
            response = llm.invoke(messages)
        except Exception as e:
            logger.error("[AnalysisProvider] %s call failed: %s", operation, e)
            raise AnalysisFailed(e, operation) from e

        return parse_json_content(_message_text(response))

    def analyze(self, text: str, target_job: str = DEFAULT_ROLE) -> AnalysisResult:
        """
        全量简历分析

        Args:
            text: 规范化后的简历文本（只发送前 3000 字符）
            target_job: 目标岗位

        Returns:
            校验并钳制后的 AnalysisResult

        Raises:
            AnalysisFailed / MalformedProviderResponse / IncompleteAnalysis
        """
        prompt = ANALYSIS_PROMPT_TEMPLATE.format(
            target_job=target_job,
            resume_text=truncate_text(text, ANALYSIS_TEXT_LIMIT)
        )
        data = self._invoke_json(self.analysis_llm, ANALYSIS_SYSTEM_PROMPT, prompt, "analysis")
        return validate_analysis(data)

    def generate_bullet_points(self, text: str, category: str) -> List[str]:
        """
        为指定分类生成简历要点

        Returns:
            LLM 返回的要点列表（数量由 LLM 决定，不补齐）
        """
        prompt = BULLET_POINTS_PROMPT_TEMPLATE.format(
            category=category,
            resume_text=truncate_text(text, BULLET_POINTS_TEXT_LIMIT)
        )
        data = self._invoke_json(
            self.bullet_points_llm, BULLET_POINTS_SYSTEM_PROMPT, prompt, "bullet point generation"
        )

        if not isinstance(data, list) or not all(isinstance(point, str) for point in data):
            raise MalformedProviderResponse("bullet points must be a JSON array of strings")
        return data

    def match_skills(self, candidate_skills: Iterable[str], target_job: str) -> SkillMatchReport:
        """
        将候选人技能与岗位默认技能表比对

        Args:
            candidate_skills: 本地识别出的技能
            target_job: 目标岗位，未知岗位使用 Software Engineer 技能表
        """
        prompt = SKILL_MATCH_PROMPT_TEMPLATE.format(
            target_job=target_job,
            candidate_skills=", ".join(sorted(candidate_skills)),
            required_skills=", ".join(get_default_skills_for_role(target_job))
        )
        data = self._invoke_json(self.skill_match_llm, SKILL_MATCH_SYSTEM_PROMPT, prompt, "skill matching")

        if not isinstance(data, dict):
            raise MalformedProviderResponse("skill match must be a JSON object")
        if data.get("matchPercentage") is None:
            raise IncompleteAnalysis("matchPercentage")
        try:
            return SkillMatchReport.model_validate(data)
        except ValidationError as e:
            raise MalformedProviderResponse(str(e))
