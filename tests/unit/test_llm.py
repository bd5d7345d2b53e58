"""
Unit tests for LLM response parsing, retries and provider selection.

No network calls: providers are only constructed far enough to fail on
configuration.
"""

import pytest

from tailor.utils import llm
from tailor.utils.llm import LLMResponseError, get_provider, parse_json_object


class _Transient(Exception):
    pass


@pytest.mark.unit
class TestParseJsonObject:
    def test_plain_json(self):
        assert parse_json_object('{"summary": {"text": "x"}}') == {"summary": {"text": "x"}}

    def test_json_in_code_fence(self):
        text = 'Here you go:\n```json\n{"skills": [{"id": "skill-1"}]}\n```'
        assert parse_json_object(text) == {"skills": [{"id": "skill-1"}]}

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_empty_response_raises(self, text):
        with pytest.raises(LLMResponseError, match="No JSON"):
            parse_json_object(text)

    @pytest.mark.parametrize("text", ["not json at all", "[1, 2, 3]", "{broken"])
    def test_non_object_raises(self, text):
        with pytest.raises(LLMResponseError):
            parse_json_object(text)

    def test_llm_response_error_is_value_error(self):
        assert issubclass(LLMResponseError, ValueError)


@pytest.mark.unit
class TestRetry:
    def test_retries_transient_errors(self, monkeypatch):
        monkeypatch.setattr(llm.time, "sleep", lambda _delay: None)
        attempts = []

        def flaky():
            attempts.append(1)
            if len(attempts) < 3:
                raise _Transient()
            return "ok"

        assert llm._retry_with_backoff(flaky, _Transient, "busy") == "ok"
        assert len(attempts) == 3

    def test_gives_up_after_max_retries(self, monkeypatch):
        monkeypatch.setattr(llm.time, "sleep", lambda _delay: None)

        def always_fails():
            raise _Transient()

        with pytest.raises(_Transient):
            llm._retry_with_backoff(always_fails, _Transient, "busy")

    def test_other_errors_propagate_immediately(self):
        attempts = []

        def broken():
            attempts.append(1)
            raise KeyError("bad")

        with pytest.raises(KeyError):
            llm._retry_with_backoff(broken, _Transient, "busy")
        assert len(attempts) == 1


@pytest.mark.unit
class TestGetProvider:
    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unknown provider"):
            get_provider("mystery")

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with pytest.raises(ValueError, match="OPENAI_API_KEY"):
            get_provider("openai")
