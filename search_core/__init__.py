"""Search Core 顶层包。

该包把远端流式搜索/问答服务包装成 MCP 工具，
包括配置加载、领域模型、WebSocket 交换客户端、
答案提取、结果落盘以及 stdio 服务入口。
"""

from search_core.api.service import SearchService, ToolResponse

__all__ = ["SearchService", "ToolResponse"]
