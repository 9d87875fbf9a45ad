# provides LLM-related types, configs and exceptions

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, TypedDict


VALID_ROLES = ("system", "user", "assistant")


class Message(TypedDict):
    role: str
    content: str


class LLMError(Exception):
    """Base exception for LLM Service errors"""

    pass


class ConfigurationError(LLMError):
    """Raised when API keys or configs are missing"""

    pass


class ProviderError(LLMError):
    """Raised when the upstream provider returns an unusable response"""

    pass


@dataclass
class LLMResponse:
    """Standardized LLM response object"""

    content: str
    model_name: str
    provider: str
    latency_ms: float
    token_usage: Dict[str, int] = field(default_factory=dict)
    cost: Optional[float] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def prompt_tokens(self) -> int:
        return self.token_usage.get("prompt_tokens", 0)

    @property
    def completion_tokens(self) -> int:
        return self.token_usage.get("completion_tokens", 0)

    @property
    def total_tokens(self) -> int:
        return self.token_usage.get("total_tokens", self.prompt_tokens + self.completion_tokens)


@dataclass
class LLMConfig:
    """
    Single canonical LLM config used across providers.

    - model_name, temperature and max_tokens are common required fields.
    - provider-specific settings (top_p, top_k, etc.) go into `extra`.
    """

    provider: str
    model_name: str
    temperature: float = 0.7
    max_tokens: int = 1024
    # place provider/vendor specific settings here (not secrets)
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.model_name:
            raise ConfigurationError("model_name is required for LLMConfig")


def validate_messages(messages: List[Message]) -> None:
    """
    Check a message list before it is sent to a provider.

    Raises:
        ValueError: If the list is empty or a message is malformed.
    """
    if not messages:
        raise ValueError("messages must not be empty")
    for i, message in enumerate(messages):
        if not isinstance(message, dict):
            raise ValueError(f"message {i} is not a mapping")
        if message.get("role") not in VALID_ROLES:
            raise ValueError(f"message {i} has invalid role: {message.get('role')!r}")
        if not isinstance(message.get("content"), str):
            raise ValueError(f"message {i} content must be a string")
