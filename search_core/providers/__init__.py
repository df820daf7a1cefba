"""远端搜索服务集成层。

该包下的模块负责：
- 定义交换客户端抽象接口 (base)。
- 维护客户端身份与支持清单 (registry)。
- 单次交换的状态机 (session) 与 WebSocket 实现 (ws_client)。
"""

from search_core.config.runtime import RuntimeConfig
from search_core.providers.base import ExchangeClient
from search_core.providers.ws_client import SearchStreamClient


def create_client(config: RuntimeConfig) -> ExchangeClient:
    """根据运行配置创建默认的交换客户端。"""

    return SearchStreamClient(config)
