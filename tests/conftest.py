from types import SimpleNamespace

import pytest

from config.settings import Settings
from providers import llm_providers
from schemas.llm_types import LLMResponse


class FakeOpenAI:
    instances = []

    def __init__(self, api_key=None):
        self.api_key = api_key
        self.requests = []
        self.error = None
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))
        FakeOpenAI.instances.append(self)

    def _create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(
            id="chatcmpl-1",
            system_fingerprint="fp_1",
            choices=[
                SimpleNamespace(
                    message=SimpleNamespace(content="openai says hi"),
                    finish_reason="stop",
                )
            ],
            usage=SimpleNamespace(prompt_tokens=1000, completion_tokens=500, total_tokens=1500),
        )


class FakeAnthropic:
    instances = []

    def __init__(self, api_key=None):
        self.api_key = api_key
        self.requests = []
        self.messages = SimpleNamespace(create=self._create)
        FakeAnthropic.instances.append(self)

    def _create(self, **kwargs):
        self.requests.append(kwargs)
        return SimpleNamespace(
            id="msg_1",
            stop_reason="end_turn",
            content=[
                SimpleNamespace(type="text", text="claude "),
                SimpleNamespace(type="tool_use", text="ignored"),
                SimpleNamespace(type="text", text="says hi"),
            ],
            usage=SimpleNamespace(input_tokens=20, output_tokens=10),
        )


class FakeGenaiClient:
    instances = []

    def __init__(self, api_key=None):
        self.api_key = api_key
        self.requests = []
        self.models = SimpleNamespace(generate_content=self._generate_content)
        FakeGenaiClient.instances.append(self)

    def _generate_content(self, **kwargs):
        self.requests.append(kwargs)
        return SimpleNamespace(
            text="gemini says hi",
            usage_metadata=SimpleNamespace(
                prompt_token_count=3, candidates_token_count=4, total_token_count=7
            ),
            candidates=[SimpleNamespace(finish_reason="STOP")],
        )


@pytest.fixture
def fake_sdks(monkeypatch):
    """Replace every SDK client constructor used by the providers."""
    for fake in (FakeOpenAI, FakeAnthropic, FakeGenaiClient):
        fake.instances = []
    monkeypatch.setattr(llm_providers.openai, "OpenAI", FakeOpenAI)
    monkeypatch.setattr(llm_providers.anthropic, "Anthropic", FakeAnthropic)
    monkeypatch.setattr(llm_providers.genai, "Client", FakeGenaiClient)
    return SimpleNamespace(openai=FakeOpenAI, anthropic=FakeAnthropic, gemini=FakeGenaiClient)


@pytest.fixture
def settings():
    return Settings(
        openai_api_key="sk-test",
        anthropic_api_key="ak-test",
        gemini_api_key="gk-test",
    )


@pytest.fixture
def make_response():
    def _make(**overrides):
        values = dict(
            content="hello",
            model_name="gpt-4o-mini",
            provider="openai",
            latency_ms=123.4,
            token_usage={"prompt_tokens": 1000, "completion_tokens": 500, "total_tokens": 1500},
            cost=0.00045,
        )
        values.update(overrides)
        return LLMResponse(**values)

    return _make
