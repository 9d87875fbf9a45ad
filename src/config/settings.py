"""
Application-wide settings and environment variable management.
Loads configuration from .env into an immutable Settings object that is passed
explicitly to the components that need it.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from config.config import Providers
from schemas.llm_types import ConfigurationError


@dataclass(frozen=True)
class Settings:
    """Resolved runtime configuration."""

    app_env: str = "development"
    log_level: str = "INFO"
    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    default_llm_provider: str = Providers.OPENAI
    default_model: Optional[str] = None
    llm_temperature: float = 0.7
    llm_max_tokens: int = 1024
    gcs_bucket_name: Optional[str] = None
    gcp_project_id: Optional[str] = None
    google_application_credentials: Optional[str] = None

    def api_key_for(self, provider: str) -> Optional[str]:
        """
        Return the API key configured for a provider.

        Args:
            provider (str): Provider identifier (e.g. 'openai').

        Returns:
            Optional[str]: The key, or None when not configured.
        """
        keys = {
            Providers.OPENAI: self.openai_api_key,
            Providers.ANTHROPIC: self.anthropic_api_key,
            Providers.GEMINI: self.gemini_api_key,
        }
        return keys.get(provider)


def _get(environ: Mapping[str, str], name: str) -> Optional[str]:
    value = (environ.get(name) or "").strip()
    return value or None


def _get_float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = _get(environ, name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


def _get_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = _get(environ, name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def load_settings(environ: Optional[Mapping[str, str]] = None, use_dotenv: bool = True) -> Settings:
    """
    Build Settings from environment variables.

    Args:
        environ (Mapping, optional): Source mapping. Defaults to os.environ.
        use_dotenv (bool): Load a .env file into os.environ first.

    Returns:
        Settings: Immutable settings object.

    Raises:
        ConfigurationError: If a numeric variable cannot be parsed.
    """
    if environ is None:
        if use_dotenv:
            load_dotenv()
        environ = os.environ

    provider = (_get(environ, "DEFAULT_LLM_PROVIDER") or Providers.OPENAI).lower()

    return Settings(
        app_env=(_get(environ, "APP_ENV") or "development").lower(),
        log_level=(_get(environ, "LOG_LEVEL") or "INFO").upper(),
        openai_api_key=_get(environ, "OPENAI_API_KEY"),
        anthropic_api_key=_get(environ, "ANTHROPIC_API_KEY"),
        gemini_api_key=_get(environ, "GEMINI_API_KEY"),
        default_llm_provider=provider,
        default_model=_get(environ, "DEFAULT_MODEL"),
        llm_temperature=_get_float(environ, "LLM_TEMPERATURE", 0.7),
        llm_max_tokens=_get_int(environ, "LLM_MAX_TOKENS", 1024),
        gcs_bucket_name=_get(environ, "GCS_BUCKET_NAME"),
        gcp_project_id=_get(environ, "GCP_PROJECT_ID"),
        google_application_credentials=_get(environ, "GOOGLE_APPLICATION_CREDENTIALS"),
    )
