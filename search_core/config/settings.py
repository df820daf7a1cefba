"""配置管理模块。

支持从环境变量、.env 以及 config.yaml 加载配置。

优先级（高 → 低）：构造参数 > 环境变量 > .env > config.yaml。
"""

import os
import warnings
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_config_from_yaml() -> Dict[str, Any]:
    """从 config.yaml 加载配置（若存在）。"""
    candidates = []
    explicit = os.getenv("SEARCH_CONFIG_FILE")
    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.append(Path.cwd() / "config.yaml")

    seen: set[Path] = set()
    for path in candidates:
        if path in seen:
            continue
        seen.add(path)
        try:
            if path.exists():
                data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
                if isinstance(data, dict):
                    return data
                warnings.warn(f"Config file {path} is not a mapping, ignored")
        except (OSError, yaml.YAMLError) as exc:
            warnings.warn(f"Failed to read config file {path}: {exc}")
    return {}


class Settings(BaseSettings):
    """配置设置（使用 Pydantic）。

    字段名即环境变量名（不区分大小写），例如 search_api_url <- SEARCH_API_URL。
    """

    # ---- 远端搜索服务 ----
    search_api_url: Optional[str] = Field(default=None, description="WebSocket 搜索接口地址")
    search_api_key: Optional[str] = Field(default=None, description="搜索接口 apikey")
    search_timeout: float = Field(default=30.0, ge=1.0, description="单次交换的最长时间（秒）")
    search_engine: str = Field(default="Bing", description="搜索引擎")
    search_llm_name: str = Field(default="gpt4o", description="回答生成模型")

    # ---- 结果保存 ----
    search_save_dir: Optional[str] = Field(default=None, description="结果保存目录")
    search_save_format: str = Field(default="json", description="结果文件格式：json 或 yaml")
    search_persist_best_effort: bool = Field(
        default=False,
        description="为 True 时保存失败只记录日志，不影响答案返回",
    )

    # ---- 日志 ----
    log_level: str = Field(default="INFO", description="日志级别")
    log_dir: Optional[str] = Field(default=None, description="日志目录，未设置时只输出到 stderr")
    log_redact_content: bool = Field(default=False, description="是否脱敏日志内容")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @staticmethod
    def _config_source() -> Dict[str, Any]:
        return _load_config_from_yaml()

    @field_validator("search_save_format")
    @classmethod
    def normalize_format(cls, v: str) -> str:
        return (v or "json").strip().lower()

    @field_validator("log_level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        return (v or "INFO").strip().upper()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            cls._config_source,
            file_secret_settings,
        )


def load_settings(**overrides: Any) -> Settings:
    """读取一次配置。进程启动时调用，之后只使用 RuntimeConfig。"""

    return Settings(**overrides)
