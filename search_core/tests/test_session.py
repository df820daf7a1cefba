import pytest

from search_core.domain.exceptions import NetworkError
from search_core.providers.session import ExchangeSession, ExchangeState


def streaming_session():
    s = ExchangeSession()
    s.on_open()
    return s


def test_session_states():
    s = ExchangeSession()
    assert s.state is ExchangeState.CONNECTING
    s.on_open()
    assert s.state is ExchangeState.STREAMING
    s.on_close()
    assert s.state is ExchangeState.SETTLED


def test_content_only_from_ok_messages():
    s = streaming_session()
    for raw in [
        '{"errno": 0, "data": {"content": "一"}}',
        '{"errno": 1, "data": {"content": "x"}}',
        '{"errno": 0, "data": {}}',
        '{"errno": 5, "data": {"content": "y"}}',
        '{"data": {"content": "z"}}',
        '{"errno": 0, "data": {"content": "二"}}',
    ]:
        s.on_message(raw)
    s.on_close()
    result = s.outcome()
    assert result.combined_content == "一二"
    assert [m.errno for m in result.messages] == [0, 1, 0, 5, None, 0]


def test_settles_only_once():
    s = streaming_session()
    s.on_message('{"errno": 0, "data": {"content": "a"}}')
    s.on_close()
    s.on_message('{"errno": 0, "data": {"content": "late"}}')
    s.on_error(NetworkError(code="STREAM_ERROR", message="late error"))
    s.on_close()
    result = s.outcome()
    assert result.combined_content == "a"
    assert len(result.messages) == 1


def test_error_settles_as_failure():
    s = streaming_session()
    s.on_message('{"errno": 0, "data": {"content": "a"}}')
    s.on_error(NetworkError(code="STREAM_ERROR", message="boom"))
    s.on_close()
    with pytest.raises(NetworkError):
        s.outcome()


def test_timeout_requests_close_only_while_streaming():
    s = ExchangeSession()
    assert s.on_timeout() is False
    s.on_open()
    assert s.on_timeout() is True
    s.on_close()
    assert s.on_timeout() is False


def test_outcome_before_settlement():
    with pytest.raises(RuntimeError):
        streaming_session().outcome()
