"""搜索服务的静态配置。

本模块集中维护：

- 请求体中固定的客户端身份字段（ClientIdentity）。
- 支持的模型 / 搜索引擎 / 语言清单（仅用于 getConfig 展示，不做校验）。
- 语言标签到接口语言名的映射。"""

from typing import Dict, Mapping, Tuple

from search_core.domain.models import ClientIdentity


DEFAULT_IDENTITY = ClientIdentity(
    bee="6C44A6E0-63D4-1F9E-2EA2-3FCEA2615972",
    device="android",
    app_version="833",
    system_version="30",
    pkg="com.google.android.googlequicksearchbox",
    session_id="3783f0ca-2d83-4fe2-b1b9-d8f8ee41b2b41331",
    logid="456e60e7-8e36-41ac-8a09-1e756013",
)

SUPPORTED_LLM_MODELS: Tuple[str, ...] = ("gpt3.5", "gpt4", "gpt4o", "gpt4o-mini")
SUPPORTED_SEARCH_ENGINES: Tuple[str, ...] = ("Bing", "Google", "SearXNG", "Yahoo")
SUPPORTED_LANGUAGES: Tuple[str, ...] = ("English", "Chinese", "Japanese")

DEFAULT_LANGUAGE = "English"

LANGUAGE_MAP: Mapping[str, str] = {
    "zh": "Chinese",
    "ja": "Japanese",
}


def map_language(tag: str) -> str:
    """把工具参数里的语言标签转换为接口语言名，未知标签一律回退到 English。"""

    return LANGUAGE_MAP.get(tag, DEFAULT_LANGUAGE)


def catalogue() -> Dict[str, list]:
    return {
        "supported_llm_models": list(SUPPORTED_LLM_MODELS),
        "supported_search_engines": list(SUPPORTED_SEARCH_ENGINES),
        "supported_languages": list(SUPPORTED_LANGUAGES),
    }
