"""单次流式交换的状态机。

状态：connecting → streaming → settled。

驱动事件：open / message / close / error / timeout。settled 之后的任何事件都是空操作，
因此一次交换只会产生一个结果：close 得到 ExchangeResult，error 得到异常。
timeout 本身不结束交换，它只要求调用方主动关闭连接，随后走 close 路径。
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Union

from search_core.domain.exceptions import BusinessError
from search_core.domain.models import ExchangeResult, InboundMessage, MessageDecodeError, decode_message
from search_core.infrastructure.logging.logger import logger

PREVIEW_CHARS = 100


class ExchangeState(str, Enum):
    CONNECTING = "connecting"
    STREAMING = "streaming"
    SETTLED = "settled"


def _preview(raw: Union[str, bytes]) -> str:
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8", errors="replace")
    return raw[:PREVIEW_CHARS]


class ExchangeSession:
    """累积消息并保证只结算一次。"""

    def __init__(self) -> None:
        self.state = ExchangeState.CONNECTING
        self.messages: List[InboundMessage] = []
        self._parts: List[str] = []
        self._result: Optional[ExchangeResult] = None
        self._error: Optional[BusinessError] = None

    @property
    def settled(self) -> bool:
        return self.state is ExchangeState.SETTLED

    def on_open(self) -> None:
        if self.state is not ExchangeState.CONNECTING:
            return
        self.state = ExchangeState.STREAMING
        logger.info("exchange.open")

    def on_message(self, raw: Union[str, bytes]) -> None:
        if self.settled:
            return
        logger.info("exchange.message", extra={"extra": {"preview": _preview(raw)}})
        try:
            message = decode_message(raw)
        except MessageDecodeError as e:
            logger.warning(
                "exchange.decode_failed",
                extra={"extra": {"error": str(e), "preview": _preview(raw)}},
            )
            return

        self.messages.append(message)
        if message.is_ok:
            if message.content:
                self._parts.append(message.content)
        elif message.is_end_of_stream:
            logger.info("exchange.end_of_stream")
        else:
            logger.warning("exchange.anomaly", extra={"extra": {"errno": message.errno}})

    def on_timeout(self) -> bool:
        """超时回调。返回 True 表示连接仍在流式阶段，调用方需要主动关闭。"""

        if self.state is not ExchangeState.STREAMING:
            return False
        logger.warning("exchange.timeout_close", extra={"extra": {"messages": len(self.messages)}})
        return True

    def on_close(self) -> None:
        if self.settled:
            return
        self._result = ExchangeResult(messages=list(self.messages), combined_content="".join(self._parts))
        self.state = ExchangeState.SETTLED
        logger.info(
            "exchange.close",
            extra={"extra": {"messages": len(self.messages), "content_chars": len(self._result.combined_content)}},
        )

    def on_error(self, error: BusinessError) -> None:
        if self.settled:
            return
        self._error = error
        self.state = ExchangeState.SETTLED
        logger.error("exchange.error", extra={"extra": {"code": error.code, "error": error.message}})

    def outcome(self) -> ExchangeResult:
        """返回结算结果；失败时抛出对应异常。只能在 settled 之后调用。"""

        if not self.settled:
            raise RuntimeError("exchange not settled yet")
        if self._error is not None:
            raise self._error
        assert self._result is not None
        return self._result
