"""从交换结果中提取人类可读的答案。

按固定顺序尝试，命中即停止：

1. 拼接后的内容（去掉首尾空白后非空）。
2. 消息日志中第一条内容片段非空白的消息（任意 errno）。
3. 第一条带建议问题列表的消息。
4. 第一条带查询拆解列表的消息。
5. 第一条带搜索卡片的消息（以 JSON 形式输出）。
6. 都没有时给出提示，说明收到的消息条数与结果文件位置。
"""

import json
from typing import Iterable, Optional, Type

from search_core.domain.models import (
    ContentFragment,
    ExchangeResult,
    InboundMessage,
    P,
    SearchCardList,
    SubQueryList,
    SuggestionList,
)

SUGGESTION_LABEL = "建议问题："
SUB_QUERY_LABEL = "查询拆解结果："
SEARCH_CARD_LABEL = "搜索结果："


def _first(messages: Iterable[InboundMessage], kind: Type[P]) -> Optional[P]:
    for message in messages:
        payload = message.find(kind)
        if payload is not None:
            return payload
    return None


def render_list(label: str, items: Iterable[object]) -> str:
    lines = [f"- {item}" for item in items]
    return "\n".join([label, *lines])


def no_answer_notice(message_count: int, artifact_path: str) -> str:
    return f"未能提取到答案内容。已收到 {message_count} 条消息，请查看 {artifact_path} 获取完整响应细节。"


def derive_answer(result: ExchangeResult, artifact_path: str) -> str:
    if result.combined_content.strip():
        return result.combined_content

    messages = result.messages
    for message in messages:
        fragment = message.find(ContentFragment)
        if fragment is not None and fragment.text.strip():
            return fragment.text
    suggestions = _first(messages, SuggestionList)
    if suggestions:
        return render_list(SUGGESTION_LABEL, suggestions.items)
    sub_queries = _first(messages, SubQueryList)
    if sub_queries:
        return render_list(SUB_QUERY_LABEL, sub_queries.items)
    cards = _first(messages, SearchCardList)
    if cards:
        return f"{SEARCH_CARD_LABEL}\n{json.dumps(list(cards.cards), ensure_ascii=False, indent=2)}"
    return no_answer_notice(len(messages), artifact_path)
