"""交换客户端抽象接口。

SearchService 不直接依赖 websockets，而是依赖此协议：

- 默认实现是 SearchStreamClient（WebSocket）。
- 测试里可以用任意实现了 exchange() 的桩对象替换。
"""

from typing import Protocol

from search_core.domain.models import ExchangeResult, SearchRequest


class ExchangeClient(Protocol):
    """流式搜索客户端协议。

    实现者需要提供：
    - name: 客户端名称，用于日志。
    - exchange(req): 发送一次请求并阻塞到交换结算，返回 ExchangeResult；
      传输层失败时抛出 NetworkError。
    """

    name: str

    def exchange(self, req: SearchRequest) -> ExchangeResult:
        ...
