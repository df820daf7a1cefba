"""进程级运行配置。

Settings 只在启动时读取一次，随后解析成不可变的 RuntimeConfig，
由入口显式传给 SearchService / SearchStreamClient / ResultStore。
"""

from __future__ import annotations

import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from search_core.config.settings import Settings
from search_core.infrastructure.logging.logger import logger

DEFAULT_SAVE_SUBDIR = "search-results"


@dataclass(frozen=True)
class RuntimeConfig:
    """启动后不再变化的配置快照。"""

    api_url: Optional[str]
    api_key: Optional[str]
    save_dir: Path
    save_format: str = "json"
    timeout_seconds: float = 30.0
    search_engine: str = "Bing"
    llm_name: str = "gpt4o"
    persist_best_effort: bool = False


def resolve_save_dir(explicit: Optional[str], configured: Optional[str]) -> Path:
    """按优先级确定保存目录：命令行参数 > SEARCH_SAVE_DIR > 临时目录。

    目录不存在时自动创建；创建失败则退回系统临时目录。
    """

    raw = explicit or configured
    target = Path(raw).expanduser() if raw else Path(tempfile.gettempdir()) / DEFAULT_SAVE_SUBDIR
    if not target.exists():
        try:
            target.mkdir(parents=True, exist_ok=True)
            logger.info("config.save_dir_created", extra={"extra": {"path": str(target)}})
        except OSError as e:
            fallback = Path(tempfile.gettempdir())
            logger.warning(
                "config.save_dir_failed",
                extra={"extra": {"path": str(target), "error": str(e), "fallback": str(fallback)}},
            )
            target = fallback
    return target.resolve()


def resolve_runtime_config(settings: Settings, save_dir: Optional[str] = None) -> RuntimeConfig:
    return RuntimeConfig(
        api_url=settings.search_api_url,
        api_key=settings.search_api_key,
        save_dir=resolve_save_dir(save_dir, settings.search_save_dir),
        save_format=settings.search_save_format,
        timeout_seconds=settings.search_timeout,
        search_engine=settings.search_engine,
        llm_name=settings.search_llm_name,
        persist_best_effort=settings.search_persist_best_effort,
    )
