"""MCP 工具服务入口（stdio）。

注册两个工具：

- answerQuestion: 把问题转发给远端流式搜索服务，返回答案文本与结果文件位置。
- getConfig: 返回当前生效的配置和支持清单。

stdout 是 MCP 协议通道，所有日志都写 stderr。
"""

import argparse
from typing import Annotated, List, Optional

from anyio import to_thread
from mcp.server.fastmcp import FastMCP
from mcp.types import CallToolResult, TextContent
from pydantic import Field

from search_core.api.service import SearchService, ToolResponse
from search_core.config.runtime import resolve_runtime_config
from search_core.config.settings import load_settings
from search_core.infrastructure.logging.logger import logger, setup_logger

SERVER_NAME = "SearchStreaming"


def to_call_tool_result(response: ToolResponse) -> CallToolResult:
    """把 ToolResponse 转成 MCP 的 CallToolResult。"""

    structured = {"result": response.summary} if response.summary else None
    return CallToolResult(
        content=[TextContent(type="text", text=response.text)],
        structuredContent=structured,
        isError=response.is_error,
    )


def build_server(service: SearchService) -> FastMCP:
    mcp = FastMCP(SERVER_NAME)

    @mcp.tool(name="answerQuestion", description="向流式搜索服务提问并返回答案，完整响应会保存到结果目录")
    async def answer_question(
        question: Annotated[str, Field(description="用户的问题")],
        language: Annotated[str, Field(description="回答的语言 (zh 或 ja)")] = "zh",
    ):
        # 交换是阻塞调用，放到工作线程里，避免卡住 stdio 事件循环
        response = await to_thread.run_sync(service.answer_question, question, language)
        return to_call_tool_result(response)

    @mcp.tool(name="getConfig", description="查看当前配置：接口地址、保存目录、支持的模型/搜索引擎/语言")
    async def get_config():
        return to_call_tool_result(service.get_config())

    return mcp


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="search-core", description="Streaming search MCP server (stdio)")
    ap.add_argument("--save-dir", default=None, help="结果保存目录，优先级高于 SEARCH_SAVE_DIR")
    return ap


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    settings = load_settings()
    setup_logger(settings.log_level, settings.log_dir, settings.log_redact_content)
    config = resolve_runtime_config(settings, save_dir=args.save_dir)
    logger.info(
        "server.start",
        extra={"extra": {"api_url": config.api_url, "save_dir": str(config.save_dir)}},
    )
    server = build_server(SearchService(config))
    try:
        server.run()
    except Exception as e:
        logger.error(f"server failed: {e}")
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()
