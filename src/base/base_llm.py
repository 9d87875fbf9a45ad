# base class for LLM providers

import time
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from common.logging import get_logger
from schemas.llm_types import (
    ConfigurationError,
    LLMConfig,
    LLMResponse,
    Message,
    validate_messages,
)
from util.pricing import calculate_cost

logger = get_logger(__name__)


class BaseLLMProvider(ABC):
    """
    Abstract base class for LLM providers.
    Stateless - no session management. Each call is independent.

    Credentials are injected separately from config, by the caller.
    """

    name: str = ""

    def __init__(self, config: LLMConfig, api_key: str):
        if not api_key:
            raise ConfigurationError(f"API key required for provider '{self.name}'")
        self.config = config
        self._validate_config()
        self.client = self._initialize_client(api_key)
        logger.debug(
            "Provider initialized", extra={"provider": self.name, "model": config.model_name}
        )

    def _validate_config(self) -> None:
        """
        Validate config-specific requirements.
        Raise ConfigurationError if invalid.
        """
        pass

    @abstractmethod
    def _initialize_client(self, api_key: str) -> Any:
        """
        Initialize the third-party SDK client.
        """
        pass

    @abstractmethod
    def _call(self, messages: List[Message], params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Perform the SDK call.

        Returns:
            dict with keys 'content', 'prompt_tokens', 'completion_tokens' and
            optionally 'total_tokens' and 'metadata'.
        """
        pass

    def generate(self, messages: List[Message], **kwargs) -> LLMResponse:
        """
        Generate a completion for a message list.

        Args:
            messages: Conversation as role/content mappings.
            **kwargs: Runtime overrides (temperature, max_tokens).

        Returns:
            LLMResponse with standardized output.

        Raises:
            ValueError: If the message list is malformed.
            Exception: SDK errors (authentication, network, rate limits) are re-raised unmodified.
        """
        validate_messages(messages)
        params = self._merge_params(**kwargs)
        model = self.config.model_name

        start_time = time.time()
        try:
            result = self._call(messages, params)
        except Exception as e:
            logger.error(
                "LLM provider call failed",
                extra={"provider": self.name, "model": model, "error": str(e)},
            )
            raise
        duration_ms = (time.time() - start_time) * 1000

        prompt_tokens = int(result.get("prompt_tokens") or 0)
        completion_tokens = int(result.get("completion_tokens") or 0)
        total_tokens = int(result.get("total_tokens") or prompt_tokens + completion_tokens)

        return LLMResponse(
            content=result.get("content") or "",
            model_name=model,
            provider=self.name,
            latency_ms=round(duration_ms, 2),
            token_usage={
                "prompt_tokens": prompt_tokens,
                "completion_tokens": completion_tokens,
                "total_tokens": total_tokens,
            },
            cost=calculate_cost(model, prompt_tokens, completion_tokens),
            metadata=result.get("metadata") or {},
        )

    def _merge_params(self, **kwargs) -> dict:
        """
        Merge runtime kwargs with config defaults.
        Runtime kwargs take precedence.
        """
        return {
            **self.config.extra,
            **kwargs,
            "temperature": kwargs.get("temperature", self.config.temperature),
            "max_tokens": kwargs.get("max_tokens", self.config.max_tokens),
        }
