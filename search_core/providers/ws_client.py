"""WebSocket 搜索服务适配器。

本模块负责：

1. 接收 SearchRequest，建立一条 WebSocket 连接（apikey 放在请求头）。
2. 连接建立后第一件事是发送 JSON 请求体。
3. 持续接收消息并交给 ExchangeSession 分类、累积。
4. 连接关闭（任意一方）或超时后返回 ExchangeResult；
   连接失败、握手被拒、流中途断开且未收到关闭帧则抛出 NetworkError；
   对端发来关闭帧时无论关闭码是多少都按正常关闭结算。

超时从连接建立时开始计算，到点后主动关闭连接，并按正常关闭处理，
已经收到的消息全部保留。
"""

import json
import time

from websockets.exceptions import ConnectionClosedError, ConnectionClosedOK, WebSocketException
from websockets.sync import client as ws_client

from search_core.config.runtime import RuntimeConfig
from search_core.domain.exceptions import NetworkError, ValidationError
from search_core.domain.models import ExchangeResult, SearchRequest
from search_core.infrastructure.logging.logger import logger
from search_core.providers.session import ExchangeSession


def _describe(e: Exception) -> str:
    return str(e) or type(e).__name__


class SearchStreamClient:
    """搜索服务客户端实现。

    - name: 客户端名称（供日志/调试使用）。
    - exchange: 对外统一调用入口，阻塞直到交换结算。
    """

    name = "search-ws"

    def __init__(self, config: RuntimeConfig):
        self._config = config

    def exchange(self, req: SearchRequest) -> ExchangeResult:
        """执行一次请求/多消息交换。"""

        url = self._config.api_url
        if not url:
            raise ValidationError(code="MISSING_API_URL", message="SEARCH_API_URL not set")
        if not self._config.api_key:
            raise ValidationError(code="MISSING_API_KEY", message="SEARCH_API_KEY not set")

        timeout = self._config.timeout_seconds
        session = ExchangeSession()
        headers = {
            "Content-Type": "application/json",
            "apikey": self._config.api_key,
        }
        logger.info("exchange.connect", extra={"extra": {"url": url}})
        try:
            conn = ws_client.connect(url, additional_headers=headers, open_timeout=timeout)
        except (OSError, WebSocketException) as e:
            # DNS 失败、拒绝连接、握手状态码非 101 等
            session.on_error(NetworkError(code="CONNECT_ERROR", message=_describe(e), url=url))
            return session.outcome()

        with conn:
            session.on_open()
            deadline = time.monotonic() + timeout
            try:
                conn.send(json.dumps(req.to_payload(), ensure_ascii=False))
                while not session.settled:
                    remaining = deadline - time.monotonic()
                    if remaining <= 0:
                        if session.on_timeout():
                            conn.close()
                        session.on_close()
                        break
                    try:
                        raw = conn.recv(timeout=remaining)
                    except TimeoutError:
                        continue
                    session.on_message(raw)
            except ConnectionClosedOK:
                session.on_close()
            except ConnectionClosedError as e:
                if e.rcvd is not None:
                    # 对端发来了关闭帧，无论关闭码是多少都按正常关闭结算
                    logger.info("exchange.close_frame", extra={"extra": {"code": e.rcvd.code, "reason": e.rcvd.reason}})
                    session.on_close()
                else:
                    session.on_error(NetworkError(code="STREAM_ERROR", message=_describe(e), url=url))
            except (OSError, WebSocketException) as e:
                session.on_error(NetworkError(code="STREAM_ERROR", message=_describe(e), url=url))
        return session.outcome()
