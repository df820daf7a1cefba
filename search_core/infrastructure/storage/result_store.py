import json
import os
import time
from pathlib import Path
from typing import Any, Callable, Dict
from uuid import uuid4

import yaml

from search_core.domain.exceptions import StorageError, ValidationError
from search_core.infrastructure.logging.logger import logger


def _dump_json(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2)


def _dump_yaml(data: Any) -> str:
    return yaml.safe_dump(data, allow_unicode=True, sort_keys=False)


SERIALIZERS: Dict[str, Callable[[Any], str]] = {
    "json": _dump_json,
    "yaml": _dump_yaml,
}


class ResultStore:
    """把一次交换的完整消息日志写成独立文件，只写不改。

    文件名为 search-<毫秒时间戳>.<format>；同一毫秒内的两次写入会互相覆盖。
    """

    def __init__(self, root: str | Path):
        self._root = Path(root).resolve()

    @property
    def root(self) -> Path:
        return self._root

    def save(self, data: Any, fmt: str = "json") -> str:
        """序列化 data 并写入保存目录，返回文件绝对路径。"""

        serializer = SERIALIZERS.get(fmt)
        if serializer is None:
            raise ValidationError(code="UNSUPPORTED_FORMAT", message=f"unsupported result format: {fmt}")
        timestamp = time.time_ns() // 1_000_000
        path = self._root / f"search-{timestamp}.{fmt}"
        tmp_path = self._root / f".search-{timestamp}.{uuid4().hex}.tmp"
        try:
            tmp_path.write_text(serializer(data), encoding="utf-8")
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError, yaml.YAMLError) as e:
            logger.error("store.write_failed", extra={"extra": {"path": str(path), "error": str(e)}})
            tmp_path.unlink(missing_ok=True)
            raise StorageError(code="STORE_WRITE_ERROR", message=str(e), path=str(path))
        logger.info("store.saved", extra={"extra": {"path": str(path)}})
        return str(path)
