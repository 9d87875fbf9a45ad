"""
Stateless LLM service with provider factory, prompt pre-processing and response post-processing.
Provider switching is a configuration change; callers keep using the same service object.
"""

from typing import Callable, List, Optional

from base.base_llm import BaseLLMProvider
from common.logging import get_logger
from config.settings import Settings
from schemas.llm_types import ConfigurationError, LLMConfig, LLMResponse, Message
from util.llm_util import get_provider, normalize_provider, resolve_model

logger = get_logger(__name__)


class LLMService:
    """
    LLM client wrapper used by notebooks.

    Features:
    - Provider factory keyed by a provider identifier string
    - Runtime provider switching
    - Pre-processors applied to user message content
    - Post-processors applied to every response
    """

    def __init__(
        self,
        settings: Settings,
        provider: Optional[str] = None,
        model_name: Optional[str] = None,
    ):
        """
        Args:
            settings: Resolved settings holding API keys and defaults.
            provider: Provider identifier. Defaults to settings.default_llm_provider.
            model_name: Model identifier. Resolved from settings when omitted.
        """
        self.settings = settings
        self._provider_instance: Optional[BaseLLMProvider] = None

        self.pre_process_pipeline: List[Callable[[str], str]] = []
        self.post_process_pipeline: List[Callable[[LLMResponse], LLMResponse]] = []

        self._reload_provider(provider or settings.default_llm_provider, model_name)

    @property
    def provider(self) -> str:
        return self._provider_instance.name

    @property
    def model_name(self) -> str:
        return self._provider_instance.config.model_name

    @property
    def client(self):
        """The underlying SDK client of the active provider."""
        return self._provider_instance.client

    def _reload_provider(self, provider: str, model_name: Optional[str] = None) -> None:
        """Factory logic to instantiate the correct provider"""
        provider_name = normalize_provider(provider)
        api_key = self.settings.api_key_for(provider_name)
        if not api_key:
            raise ConfigurationError(
                f"{provider_name.upper()}_API_KEY is not configured for provider '{provider_name}'"
            )

        llm_config = LLMConfig(
            provider=provider_name,
            model_name=resolve_model(provider_name, self.settings, model_name),
            temperature=self.settings.llm_temperature,
            max_tokens=self.settings.llm_max_tokens,
        )

        self._provider_instance = get_provider(provider_name)(llm_config, api_key)
        logger.info(
            "LLM service using provider",
            extra={"provider": provider_name, "model": llm_config.model_name},
        )

    def switch_provider(self, provider: str, model_name: Optional[str] = None) -> None:
        """
        Replace the active provider.

        Args:
            provider: New provider identifier.
            model_name: Optional model; the provider default is used otherwise.
        """
        self._reload_provider(provider, model_name)

    def add_pre_processor(self, func: Callable[[str], str]) -> None:
        """Add a function to modify user prompts before sending to the LLM"""
        self.pre_process_pipeline.append(func)

    def add_post_processor(self, func: Callable[[LLMResponse], LLMResponse]) -> None:
        """Add a function applied to each response"""
        self.post_process_pipeline.append(func)

    def _pre_process(self, messages: List[Message]) -> List[Message]:
        if not self.pre_process_pipeline:
            return list(messages)

        processed = []
        for message in messages:
            if message.get("role") == "user" and isinstance(message.get("content"), str):
                content = message["content"]
                for step in self.pre_process_pipeline:
                    content = step(content)
                message = {**message, "content": content}
            processed.append(message)
        return processed

    def chat(self, messages: List[Message], **kwargs) -> LLMResponse:
        """
        Main execution method.

        1. Runs pre-processors
        2. Calls the active provider
        3. Runs post-processors

        SDK errors propagate unchanged.
        """
        current = self._pre_process(messages)

        logger.debug(
            "Sending messages to provider",
            extra={"provider": self.provider, "model": self.model_name, "messages": len(current)},
        )

        response = self._provider_instance.generate(current, **kwargs)

        for step in self.post_process_pipeline:
            response = step(response)

        logger.info(
            "LLM request successful",
            extra={
                "provider": response.provider,
                "model": response.model_name,
                "latency_ms": response.latency_ms,
                "total_tokens": response.total_tokens,
                "cost": response.cost,
            },
        )
        return response

    def complete(self, prompt: str, system: Optional[str] = None, **kwargs) -> LLMResponse:
        """
        Single-prompt convenience wrapper around chat().

        Args:
            prompt: User prompt text.
            system: Optional system prompt.
        """
        messages: List[Message] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        return self.chat(messages, **kwargs)
