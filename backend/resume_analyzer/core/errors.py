"""
领域异常定义

所有异常都携带稳定的错误码 (code) 和可读消息 (message)，
失败记录只持久化 {message, code}，不暴露内部堆栈。
"""

from typing import Any, Dict, Optional


class ResumeAnalyzerError(Exception):
    """简历分析系统的异常基类"""

    code = "INTERNAL_ERROR"

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_dict(self) -> Dict[str, Any]:
        """转换为可持久化的错误详情"""
        return {"message": self.message, "code": self.code}


# ==================== 提取阶段 ====================

class UnsupportedMediaType(ResumeAnalyzerError):
    """声明的文件类型既不是 PDF 也不是 Word 文档"""

    code = "UNSUPPORTED_MEDIA_TYPE"

    def __init__(self, mime_type: str):
        super().__init__(f"Unsupported file type: {mime_type}")
        self.mime_type = mime_type


class ExtractionFailed(ResumeAnalyzerError):
    """底层解析库抛出异常（文件损坏、加密等）"""

    code = "EXTRACTION_FAILED"

    def __init__(self, cause: BaseException):
        super().__init__(f"Text extraction failed: {cause}")
        self.cause = cause


class InsufficientText(ResumeAnalyzerError):
    """规范化后的文本过短，视为无有效内容"""

    code = "INSUFFICIENT_TEXT"

    def __init__(self, length: int, minimum: int):
        super().__init__(
            f"Could not extract meaningful text from the file "
            f"({length} characters, at least {minimum} required)"
        )
        self.length = length
        self.minimum = minimum


# ==================== 记录访问 ====================

class NotFound(ResumeAnalyzerError):
    """记录不存在，或不属于当前用户"""

    code = "NOT_FOUND"

    def __init__(self, record_id: str):
        super().__init__("Resume not found")
        self.record_id = record_id


class InvalidTransition(ResumeAnalyzerError):
    """状态机不允许的状态迁移"""

    code = "INVALID_TRANSITION"

    def __init__(self, current: str, target: str):
        super().__init__(f"Illegal status transition: {current} -> {target}")
        self.current = current
        self.target = target


class AnalysisInProgress(ResumeAnalyzerError):
    """记录正在分析中，拒绝并发重入"""

    code = "CONFLICT"

    def __init__(self, record_id: str):
        super().__init__("Analysis already in progress for this resume")
        self.record_id = record_id


# ==================== 分析阶段 ====================

class ProviderUnavailable(ResumeAnalyzerError, ValueError):
    """LLM 凭证缺失或配置错误，构造期即失败"""

    code = "PROVIDER_UNAVAILABLE"


class MalformedProviderResponse(ResumeAnalyzerError):
    """LLM 返回内容无法解析为预期的结构化数据"""

    code = "MALFORMED_PROVIDER_RESPONSE"

    def __init__(self, detail: str):
        super().__init__(f"Malformed provider response: {detail}")


class IncompleteAnalysis(ResumeAnalyzerError):
    """分析结果缺少必需的顶层字段"""

    code = "INCOMPLETE_ANALYSIS"

    def __init__(self, missing_field: str):
        super().__init__(f"Missing required field: {missing_field}")
        self.missing_field = missing_field


class AnalysisFailed(ResumeAnalyzerError):
    """LLM 调用本身失败（网络、限流、超时等），不重试"""

    code = "ANALYSIS_FAILED"

    def __init__(self, cause: BaseException, operation: str = "analysis"):
        super().__init__(f"LLM {operation} failed: {cause}")
        self.cause = cause
