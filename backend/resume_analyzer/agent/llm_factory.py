"""LLM 工厂模块

根据配置文件创建 LLM 实例。
遵循安全协议：从不读取 .env 文件，只从系统环境变量获取密钥。
"""

import json
import os
from typing import Any, Dict, Optional

from langchain_openai import ChatOpenAI
from langchain_google_genai import ChatGoogleGenerativeAI

from resume_analyzer.core.config import settings
from resume_analyzer.core.errors import ProviderUnavailable

# 使用 OpenAI 兼容接口的提供方
OPENAI_COMPATIBLE_MODELS = ("moonshot", "openai_official")


class LLMFactory:
    """LLM 工厂类，负责按当前激活的模型配置创建 LLM 实例"""

    def __init__(self, config_path: str = None):
        """初始化工厂

        Args:
            config_path: 配置文件路径，为 None 时使用 settings.llm_config_path
        """
        self.config_path = config_path or settings.llm_config_path
        self._loaded_config = None

    def _load_config(self) -> Dict[str, Any]:
        """加载配置文件

        Returns:
            配置字典

        Raises:
            FileNotFoundError: 配置文件不存在
            json.JSONDecodeError: JSON 格式错误
        """
        if self._loaded_config is None:
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    self._loaded_config = json.load(f)
            except FileNotFoundError:
                raise FileNotFoundError(f"配置文件不存在: {self.config_path}")
            except json.JSONDecodeError as e:
                raise json.JSONDecodeError(f"JSON 格式错误: {e}", e.doc, e.pos)

        return self._loaded_config

    @property
    def active_model(self) -> str:
        """当前激活的模型名"""
        active_model = self._load_config().get("active_model")
        if not active_model:
            raise ProviderUnavailable("配置文件中缺少 active_model 字段")
        return active_model

    def get_active_model_config(self) -> Dict[str, Any]:
        """获取当前激活的模型配置

        Raises:
            ProviderUnavailable: active_model 或对应的 provider 配置不存在
        """
        active_model = self.active_model

        providers = self._load_config().get("providers")
        if not providers:
            raise ProviderUnavailable("配置文件中缺少 providers 字段")

        model_config = providers.get(active_model)
        if not model_config:
            raise ProviderUnavailable(f"providers 中找不到 '{active_model}' 的配置")

        return model_config

    def _get_api_key(self, env_key: str) -> str:
        """从系统环境变量获取 API Key

        Raises:
            ProviderUnavailable: 环境变量不存在或为空
        """
        api_key = os.getenv(env_key)
        if not api_key:
            raise ProviderUnavailable(f"环境变量 '{env_key}' 未设置或为空，无法初始化 LLM")

        return api_key

    def create_llm(
        self,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> Any:
        """创建并返回 LLM 实例

        Args:
            temperature: 覆盖配置中的温度，为 None 时使用配置值（默认 0.7）
            max_tokens: 响应长度上限，为 None 时不限制

        Returns:
            LangChain LLM 对象 (ChatOpenAI 或 ChatGoogleGenerativeAI)

        Raises:
            ProviderUnavailable: 配置错误或密钥缺失
            NotImplementedError: 不支持的模型类型
        """
        model_config = self.get_active_model_config()

        env_key_map = model_config.get("env_key_map")
        if not env_key_map:
            raise ProviderUnavailable("模型配置中缺少 env_key_map 字段")

        api_key = self._get_api_key(env_key_map)

        base_url = model_config.get("base_url")
        model_name = model_config.get("model_name")
        if temperature is None:
            temperature = model_config.get("temperature", 0.7)

        if not model_name:
            raise ProviderUnavailable("模型配置中缺少 model_name 字段")

        active_model = self.active_model

        if active_model in OPENAI_COMPATIBLE_MODELS:
            return ChatOpenAI(
                api_key=api_key,
                base_url=base_url,
                model=model_name,
                temperature=temperature,
                max_tokens=max_tokens
            )
        elif active_model == "gemini":
            return ChatGoogleGenerativeAI(
                google_api_key=api_key,
                model=model_name,
                temperature=temperature,
                max_output_tokens=max_tokens
            )
        else:
            raise NotImplementedError(f"不支持的模型类型: {active_model}")
