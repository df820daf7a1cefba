"""搜索交换的数据模型。

本模块定义了一次流式交换中在各层之间传递的标准数据结构：

- SearchRequest: 发给远端搜索服务的请求体（每次交换只发送一次）。
- InboundMessage: 流中收到的一条消息，按 errno 分类，并带有已识别的载荷形态。
- ExchangeResult: 连接结束后的完整消息日志与拼接后的内容。

载荷形态用一组冻结 dataclass 表示（ContentFragment / SuggestionList /
SubQueryList / SearchCardList），都识别不出时给出 UnrecognizedPayload，
上层按类型匹配，不再直接探测原始字典的字段。
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar, Union


@dataclass(frozen=True)
class ClientIdentity:
    """随每个请求发送的客户端/设备信息。"""

    bee: str
    device: str
    app_version: str
    system_version: str
    pkg: str
    session_id: str
    logid: str


# errno 取值
ERRNO_OK = 0
ERRNO_END_OF_STREAM = 5


@dataclass(frozen=True)
class SearchRequest:
    """一次交换的请求体，构造后不可修改。"""

    identity: ClientIdentity
    query: str
    language: str
    search_engine: str
    llm_name: str

    def to_payload(self) -> Dict[str, Any]:
        """转成接口需要的 JSON 字段。"""

        return {
            "bee": self.identity.bee,
            "device": self.identity.device,
            "app_version": self.identity.app_version,
            "system_version": self.identity.system_version,
            "pkg": self.identity.pkg,
            "session_id": self.identity.session_id,
            "logid": self.identity.logid,
            "query": self.query,
            "search_engine": self.search_engine,
            "llm_name": self.llm_name,
            "language": self.language,
        }


@dataclass(frozen=True)
class ContentFragment:
    text: str


@dataclass(frozen=True)
class SuggestionList:
    items: Tuple[Any, ...]


@dataclass(frozen=True)
class SubQueryList:
    items: Tuple[Any, ...]


@dataclass(frozen=True)
class SearchCardList:
    cards: Tuple[Any, ...]


@dataclass(frozen=True)
class UnrecognizedPayload:
    """消息上没有任何已知载荷，keys 记录原始字段名便于排查。"""

    keys: Tuple[str, ...]


Payload = Union[ContentFragment, SuggestionList, SubQueryList, SearchCardList, UnrecognizedPayload]
P = TypeVar("P", ContentFragment, SuggestionList, SubQueryList, SearchCardList, UnrecognizedPayload)


class MessageDecodeError(ValueError):
    """单条消息无法解析（非 JSON 或不是 JSON 对象）。只影响这一条消息。"""


@dataclass
class InboundMessage:
    """流中收到的一条消息。

    - errno: 状态码，0 为正常内容，5 为流结束，其余视为异常信号（缺失时为 None）。
    - raw: 原始 JSON 对象，落盘时原样写出。
    - payloads: 按固定顺序识别出的载荷形态，至少有一项。
    """

    errno: Optional[int]
    raw: Dict[str, Any]
    payloads: Tuple[Payload, ...]

    @property
    def is_ok(self) -> bool:
        return self.errno == ERRNO_OK

    @property
    def is_end_of_stream(self) -> bool:
        return self.errno == ERRNO_END_OF_STREAM

    def find(self, kind: Type[P]) -> Optional[P]:
        """返回第一个指定类型的载荷，没有则返回 None。"""

        for payload in self.payloads:
            if isinstance(payload, kind):
                return payload
        return None

    @property
    def content(self) -> Optional[str]:
        fragment = self.find(ContentFragment)
        return fragment.text if fragment else None


def _as_items(value: Any) -> Optional[Tuple[Any, ...]]:
    if isinstance(value, list) and value:
        return tuple(value)
    return None


def classify_payloads(obj: Dict[str, Any]) -> Tuple[Payload, ...]:
    """识别一条消息上携带的全部载荷形态。"""

    found: List[Payload] = []
    data = obj.get("data")
    if isinstance(data, dict):
        content = data.get("content")
        if isinstance(content, str) and content:
            found.append(ContentFragment(content))
    sug = _as_items(obj.get("sug_list"))
    if sug:
        found.append(SuggestionList(sug))
    sub = _as_items(obj.get("sub_query_list"))
    if sub:
        found.append(SubQueryList(sub))
    cards = _as_items(obj.get("search_card_list"))
    if cards:
        found.append(SearchCardList(cards))
    if not found:
        found.append(UnrecognizedPayload(tuple(obj.keys())))
    return tuple(found)


def decode_message(raw: Union[str, bytes]) -> InboundMessage:
    """把一帧原始数据解析为 InboundMessage，失败抛 MessageDecodeError。"""

    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MessageDecodeError(f"invalid utf-8: {e}") from e
    try:
        obj = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MessageDecodeError(str(e)) from e
    if not isinstance(obj, dict):
        raise MessageDecodeError(f"expected JSON object, got {type(obj).__name__}")

    errno = obj.get("errno")
    # bool 是 int 的子类，不能当作状态码
    if not isinstance(errno, int) or isinstance(errno, bool):
        errno = None
    return InboundMessage(errno=errno, raw=obj, payloads=classify_payloads(obj))


@dataclass
class ExchangeResult:
    """一次交换结束后的结果。

    - messages: 按到达顺序保存的全部已解析消息。
    - combined_content: errno == 0 消息中内容片段按顺序拼接的结果。
    """

    messages: List[InboundMessage] = field(default_factory=list)
    combined_content: str = ""

    def raw_messages(self) -> List[Dict[str, Any]]:
        return [m.raw for m in self.messages]
