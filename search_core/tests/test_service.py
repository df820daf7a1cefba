import json
import tempfile
from pathlib import Path

from search_core.api.service import SearchService
from search_core.config.runtime import RuntimeConfig
from search_core.domain.exceptions import NetworkError, StorageError
from search_core.domain.models import ExchangeResult, decode_message
from search_core.infrastructure.storage.result_store import ResultStore


def make_config(save_dir, **kw):
    return RuntimeConfig(
        api_url="wss://search.test/ws",
        api_key="secret-key",
        save_dir=Path(save_dir),
        **kw,
    )


class ClientStub:
    name = "stub"

    def __init__(self, frames=(), error=None):
        self._frames = list(frames)
        self._error = error
        self.requests = []

    def exchange(self, req):
        self.requests.append(req)
        if self._error:
            raise self._error
        messages = [decode_message(f) for f in self._frames]
        combined = "".join(m.content or "" for m in messages if m.is_ok)
        return ExchangeResult(messages=messages, combined_content=combined)


class FailingStore:
    def __init__(self):
        self.calls = 0

    def save(self, data, fmt="json"):
        self.calls += 1
        raise StorageError(code="STORE_WRITE_ERROR", message="disk full")


def test_answer_question_example_scenario():
    with tempfile.TemporaryDirectory() as d:
        client = ClientStub(['{"errno": 0, "data": {"content": "晴"}}', '{"errno": 5}'])
        service = SearchService(make_config(d), client=client, store=ResultStore(d))
        resp = service.answer_question("今天天气", "zh")

        assert not resp.is_error
        assert resp.text == "晴"
        assert client.requests[0].language == "Chinese"
        assert client.requests[0].to_payload()["query"] == "今天天气"
        files = list(Path(d).iterdir())
        assert len(files) == 1
        assert json.loads(files[0].read_text(encoding="utf-8")) == [
            {"errno": 0, "data": {"content": "晴"}},
            {"errno": 5},
        ]
        assert resp.summary == f'查询: "今天天气" (结果文件: {files[0].resolve()})'


def test_answer_question_language_mapping():
    with tempfile.TemporaryDirectory() as d:
        client = ClientStub()
        service = SearchService(make_config(d), client=client, store=ResultStore(d))
        for tag in ["zh", "ja", "en", "", "fr"]:
            service.answer_question("q", tag)
        assert [r.language for r in client.requests] == ["Chinese", "Japanese", "English", "English", "English"]


def test_answer_question_persists_empty_log():
    with tempfile.TemporaryDirectory() as d:
        service = SearchService(make_config(d), client=ClientStub(), store=ResultStore(d))
        resp = service.answer_question("q")
        files = list(Path(d).iterdir())
        assert len(files) == 1
        assert json.loads(files[0].read_text(encoding="utf-8")) == []
        assert "已收到 0 条消息" in resp.text


def test_answer_question_uses_suggestions_when_no_content():
    with tempfile.TemporaryDirectory() as d:
        client = ClientStub(['{"errno": 0, "sug_list": ["明天呢"]}', '{"errno": 5}'])
        service = SearchService(make_config(d), client=client, store=ResultStore(d))
        assert service.answer_question("q").text == "建议问题：\n- 明天呢"


def test_exchange_failure_skips_persistence():
    with tempfile.TemporaryDirectory() as d:
        store = FailingStore()
        client = ClientStub(error=NetworkError(code="CONNECT_ERROR", message="connection refused"))
        resp = SearchService(make_config(d), client=client, store=store).answer_question("q")
        assert resp.is_error
        assert resp.text == "搜索服务错误: connection refused"
        assert resp.summary is None
        assert store.calls == 0


def test_persistence_failure_fails_answer():
    with tempfile.TemporaryDirectory() as d:
        store = FailingStore()
        client = ClientStub(['{"errno": 0, "data": {"content": "晴"}}'])
        resp = SearchService(make_config(d), client=client, store=store).answer_question("q")
        assert resp.is_error
        assert resp.text == "搜索服务错误: disk full"
        assert store.calls == 1


def test_persistence_failure_best_effort():
    with tempfile.TemporaryDirectory() as d:
        client = ClientStub(['{"errno": 0, "data": {"content": "晴"}}'])
        service = SearchService(
            make_config(d, persist_best_effort=True), client=client, store=FailingStore()
        )
        resp = service.answer_question("q")
        assert not resp.is_error
        assert resp.text == "晴"
        assert "未保存" in resp.summary


def test_configured_engine_and_model():
    with tempfile.TemporaryDirectory() as d:
        client = ClientStub()
        config = make_config(d, search_engine="Google", llm_name="gpt4o-mini")
        SearchService(config, client=client, store=ResultStore(d)).answer_question("q")
        payload = client.requests[0].to_payload()
        assert payload["search_engine"] == "Google"
        assert payload["llm_name"] == "gpt4o-mini"


def test_get_config_hides_api_key():
    with tempfile.TemporaryDirectory() as d:
        service = SearchService(make_config(d), client=ClientStub(), store=ResultStore(d))
        resp = service.get_config()
        data = json.loads(resp.text)
        assert data["api_url"] == "wss://search.test/ws"
        assert data["save_directory"] == str(Path(d))
        assert data["supported_languages"] == ["English", "Chinese", "Japanese"]
        assert data["supported_search_engines"] == ["Bing", "Google", "SearXNG", "Yahoo"]
        assert data["supported_llm_models"] == ["gpt3.5", "gpt4", "gpt4o", "gpt4o-mini"]
        assert "secret-key" not in resp.text
