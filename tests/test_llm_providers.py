from types import SimpleNamespace

import pytest

from providers.llm_providers import (
    AnthropicProvider,
    GeminiProvider,
    OpenAIProvider,
    split_system_messages,
)
from schemas.llm_types import ConfigurationError, LLMConfig, ProviderError


MESSAGES = [
    {"role": "system", "content": "Be terse."},
    {"role": "user", "content": "Say hi"},
]


def _config(provider, model, **kwargs):
    return LLMConfig(provider=provider, model_name=model, **kwargs)


def test_openai_provider_returns_text_usage_and_cost(fake_sdks):
    provider = OpenAIProvider(_config("openai", "gpt-4o-mini", temperature=0.3), "sk-test")

    response = provider.generate(MESSAGES, max_tokens=64)

    client = fake_sdks.openai.instances[0]
    assert client.api_key == "sk-test"
    request = client.requests[0]
    assert request["model"] == "gpt-4o-mini"
    assert request["messages"] == MESSAGES
    assert request["temperature"] == 0.3
    assert request["max_tokens"] == 64

    assert response.content == "openai says hi"
    assert response.provider == "openai"
    assert response.token_usage == {
        "prompt_tokens": 1000,
        "completion_tokens": 500,
        "total_tokens": 1500,
    }
    assert response.cost == pytest.approx(0.00045)
    assert response.metadata["finish_reason"] == "stop"
    assert response.latency_ms >= 0


def test_sdk_errors_propagate_unmodified(fake_sdks):
    class AuthenticationFailure(Exception):
        pass

    provider = OpenAIProvider(_config("openai", "gpt-4o-mini"), "sk-bad")
    error = AuthenticationFailure("invalid api key")
    fake_sdks.openai.instances[0].error = error

    with pytest.raises(AuthenticationFailure) as excinfo:
        provider.generate(MESSAGES)

    assert excinfo.value is error


def test_openai_without_choices_is_provider_error(fake_sdks):
    provider = OpenAIProvider(_config("openai", "gpt-4o-mini"), "sk-test")
    provider.client.chat.completions.create = lambda **kwargs: SimpleNamespace(
        choices=[], usage=None
    )

    with pytest.raises(ProviderError):
        provider.generate(MESSAGES)


def test_anthropic_provider_moves_system_prompt(fake_sdks):
    provider = AnthropicProvider(_config("anthropic", "claude-3-5-haiku-20241022"), "ak-test")

    response = provider.generate(
        [
            {"role": "system", "content": "Be terse."},
            {"role": "system", "content": "No emoji."},
            {"role": "user", "content": "Say hi"},
            {"role": "assistant", "content": "Hi"},
            {"role": "user", "content": "Again"},
        ]
    )

    request = fake_sdks.anthropic.instances[0].requests[0]
    assert request["system"] == "Be terse.\n\nNo emoji."
    assert [m["role"] for m in request["messages"]] == ["user", "assistant", "user"]
    assert request["max_tokens"] == 1024

    assert response.content == "claude says hi"
    assert response.prompt_tokens == 20
    assert response.completion_tokens == 10
    assert response.total_tokens == 30
    assert response.metadata["finish_reason"] == "end_turn"


def test_anthropic_omits_system_when_absent(fake_sdks):
    provider = AnthropicProvider(_config("anthropic", "claude-3-5-haiku-20241022"), "ak-test")

    provider.generate([{"role": "user", "content": "Say hi"}])

    assert "system" not in fake_sdks.anthropic.instances[0].requests[0]


def test_gemini_provider_maps_roles_and_config(fake_sdks):
    provider = GeminiProvider(_config("gemini", "gemini-2.5-flash", max_tokens=200), "gk-test")

    response = provider.generate(
        [
            {"role": "system", "content": "Be terse."},
            {"role": "user", "content": "Say hi"},
            {"role": "assistant", "content": "Hi"},
            {"role": "user", "content": "Again"},
        ]
    )

    request = fake_sdks.gemini.instances[0].requests[0]
    assert request["model"] == "gemini-2.5-flash"
    assert [c.role for c in request["contents"]] == ["user", "model", "user"]
    assert request["config"].max_output_tokens == 200
    assert request["config"].system_instruction == "Be terse."

    assert response.content == "gemini says hi"
    assert response.total_tokens == 7
    assert response.cost == round((3 * 0.30 + 4 * 2.50) / 1_000_000, 6)


def test_missing_api_key_is_configuration_error(fake_sdks):
    with pytest.raises(ConfigurationError):
        OpenAIProvider(_config("openai", "gpt-4o-mini"), "")

    assert fake_sdks.openai.instances == []


@pytest.mark.parametrize(
    "messages",
    [
        [],
        [{"role": "robot", "content": "hi"}],
        [{"role": "user", "content": None}],
    ],
)
def test_malformed_messages_rejected_before_call(fake_sdks, messages):
    provider = OpenAIProvider(_config("openai", "gpt-4o-mini"), "sk-test")

    with pytest.raises(ValueError):
        provider.generate(messages)

    assert fake_sdks.openai.instances[0].requests == []


def test_system_only_conversation_rejected_by_anthropic(fake_sdks):
    provider = AnthropicProvider(_config("anthropic", "claude-3-5-haiku-20241022"), "ak-test")

    with pytest.raises(ValueError):
        provider.generate([{"role": "system", "content": "Be terse."}])


def test_split_system_messages():
    system, turns = split_system_messages(MESSAGES)

    assert system == "Be terse."
    assert turns == [{"role": "user", "content": "Say hi"}]
    assert split_system_messages(turns) == (None, turns)
