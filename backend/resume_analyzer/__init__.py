"""
简历分析后端

上传简历 -> 提取文本 -> LLM 分析 -> 持久化结构化结果
"""

__version__ = "1.0.0"
