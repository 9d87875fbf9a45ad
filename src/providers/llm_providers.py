"""
LLM provider implementations for OpenAI, Anthropic and Google Gemini.
Each provider owns exactly one SDK client and translates the shared message format.
"""

from typing import Any, Dict, List, Optional, Tuple

import anthropic
import openai
from google import genai
from google.genai import types

from base.base_llm import BaseLLMProvider
from config.config import Providers
from schemas.llm_types import Message, ProviderError


def split_system_messages(messages: List[Message]) -> Tuple[Optional[str], List[Message]]:
    """
    Separate system messages from the conversation turns.

    Returns:
        (system_text or None, remaining messages). Multiple system messages are
        joined by a blank line.
    """
    system_parts = [m["content"] for m in messages if m["role"] == "system"]
    turns = [m for m in messages if m["role"] != "system"]
    system = "\n\n".join(system_parts) if system_parts else None
    return system, turns


class OpenAIProvider(BaseLLMProvider):
    name = Providers.OPENAI

    def _initialize_client(self, api_key: str) -> Any:
        return openai.OpenAI(api_key=api_key)

    def _call(self, messages: List[Message], params: Dict[str, Any]) -> Dict[str, Any]:
        response = self.client.chat.completions.create(
            model=self.config.model_name,
            messages=[{"role": m["role"], "content": m["content"]} for m in messages],
            **params,
        )

        if not response.choices:
            raise ProviderError("OpenAI returned no choices")

        choice = response.choices[0]
        usage = response.usage
        return {
            "content": choice.message.content,
            "prompt_tokens": usage.prompt_tokens if usage else 0,
            "completion_tokens": usage.completion_tokens if usage else 0,
            "total_tokens": usage.total_tokens if usage else 0,
            "metadata": {
                "id": getattr(response, "id", None),
                "finish_reason": choice.finish_reason,
                "system_fingerprint": getattr(response, "system_fingerprint", None),
            },
        }


class AnthropicProvider(BaseLLMProvider):
    name = Providers.ANTHROPIC

    def _initialize_client(self, api_key: str) -> Any:
        return anthropic.Anthropic(api_key=api_key)

    def _call(self, messages: List[Message], params: Dict[str, Any]) -> Dict[str, Any]:
        system, turns = split_system_messages(messages)
        if not turns:
            raise ValueError("Anthropic requires at least one user or assistant message")

        request = {
            "model": self.config.model_name,
            "messages": [{"role": m["role"], "content": m["content"]} for m in turns],
            **params,
        }
        if system:
            request["system"] = system

        response = self.client.messages.create(**request)

        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        return {
            "content": text,
            "prompt_tokens": response.usage.input_tokens,
            "completion_tokens": response.usage.output_tokens,
            "metadata": {
                "id": getattr(response, "id", None),
                "finish_reason": response.stop_reason,
            },
        }


class GeminiProvider(BaseLLMProvider):
    name = Providers.GEMINI

    def _initialize_client(self, api_key: str) -> Any:
        return genai.Client(api_key=api_key)

    def content_builder(self, turns: List[Message]) -> list:
        """
        Build the content structure for Gemini API calls.
        Assistant turns are sent with Gemini's 'model' role.
        """
        return [
            types.Content(
                role="model" if m["role"] == "assistant" else "user",
                parts=[types.Part.from_text(text=m["content"])],
            )
            for m in turns
        ]

    def config_builder(self, system: Optional[str], params: Dict[str, Any]):
        config_params = dict(params)
        config_params["max_output_tokens"] = config_params.pop("max_tokens")
        if system:
            config_params["system_instruction"] = system
        return types.GenerateContentConfig(**config_params)

    def _call(self, messages: List[Message], params: Dict[str, Any]) -> Dict[str, Any]:
        system, turns = split_system_messages(messages)
        if not turns:
            raise ValueError("Gemini requires at least one user or assistant message")

        response = self.client.models.generate_content(
            model=self.config.model_name,
            contents=self.content_builder(turns),
            config=self.config_builder(system, params),
        )

        usage = response.usage_metadata
        finish_reason = None
        if response.candidates:
            finish_reason = str(response.candidates[0].finish_reason)

        return {
            "content": response.text,
            "prompt_tokens": (usage.prompt_token_count or 0) if usage else 0,
            "completion_tokens": (usage.candidates_token_count or 0) if usage else 0,
            "total_tokens": (usage.total_token_count or 0) if usage else 0,
            "metadata": {"finish_reason": finish_reason},
        }
