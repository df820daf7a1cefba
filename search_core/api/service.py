"""对外 API 服务模块。

提供 answerQuestion / getConfig 两个工具背后的实现，
MCP 层只负责参数编组，不包含业务逻辑。
"""

import json
from dataclasses import dataclass
from typing import Optional

from search_core.api.answer import derive_answer
from search_core.config.runtime import RuntimeConfig
from search_core.domain.exceptions import BusinessError, StorageError
from search_core.domain.models import SearchRequest
from search_core.infrastructure.logging.logger import logger
from search_core.infrastructure.storage.result_store import ResultStore
from search_core.providers import create_client
from search_core.providers.base import ExchangeClient
from search_core.providers.registry import DEFAULT_IDENTITY, catalogue, map_language

ERROR_PREFIX = "搜索服务错误"
UNSAVED_MARKER = "未保存"


@dataclass
class ToolResponse:
    """工具调用结果：一段文本、一行摘要和错误标记。"""

    text: str
    summary: Optional[str] = None
    is_error: bool = False


def _short(question: str, limit: int = 30) -> str:
    return question if len(question) <= limit else question[:limit] + "..."


class SearchService:
    """一次问答 = 一次交换 + 一次落盘 + 答案提取。"""

    def __init__(
        self,
        config: RuntimeConfig,
        client: Optional[ExchangeClient] = None,
        store: Optional[ResultStore] = None,
    ):
        self._config = config
        self._client = client or create_client(config)
        self._store = store or ResultStore(config.save_dir)

    def build_request(self, question: str, language: str) -> SearchRequest:
        return SearchRequest(
            identity=DEFAULT_IDENTITY,
            query=question,
            language=map_language(language),
            search_engine=self._config.search_engine,
            llm_name=self._config.llm_name,
        )

    def answer_question(self, question: str, language: str = "zh") -> ToolResponse:
        """执行一次问答。

        Args:
            question: 用户问题
            language: 回答语言标签（zh / ja，其余按 English 处理）

        Returns:
            ToolResponse；任何业务异常都转换为 is_error=True 的结果，不向外抛出。
        """
        logger.info("service.answer_question", extra={"extra": {"question": _short(question), "language": language}})
        try:
            req = self.build_request(question, language)
            result = self._client.exchange(req)
            artifact_path = self._persist(result.raw_messages())
            answer = derive_answer(result, artifact_path)
        except BusinessError as e:
            logger.error(f"answer_question failed: {e.message}", extra={"extra": {"code": e.code}})
            return ToolResponse(text=f"{ERROR_PREFIX}: {e.message}", is_error=True)
        return ToolResponse(text=answer, summary=f'查询: "{question}" (结果文件: {artifact_path})')

    def _persist(self, raw_messages: list) -> str:
        try:
            return self._store.save(raw_messages, fmt=self._config.save_format)
        except StorageError as e:
            if not self._config.persist_best_effort:
                raise
            logger.warning("service.persist_skipped", extra={"extra": {"error": e.message}})
            return UNSAVED_MARKER

    def get_config(self) -> ToolResponse:
        config = {
            "api_url": self._config.api_url,
            "save_directory": str(self._config.save_dir),
            "save_format": self._config.save_format,
            "timeout_seconds": self._config.timeout_seconds,
            "search_engine": self._config.search_engine,
            "llm_name": self._config.llm_name,
            **catalogue(),
        }
        return ToolResponse(text=json.dumps(config, ensure_ascii=False, indent=2))
