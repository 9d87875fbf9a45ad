"""
Configuration constants for LLM providers and avatar storage.
Defines provider identifiers, model IDs, default models and the price table.
"""


class Providers:
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"


class Models:
    GPT_4O = "gpt-4o"
    GPT_4O_MINI = "gpt-4o-mini"
    GPT_4_1 = "gpt-4.1"
    GPT_4_1_MINI = "gpt-4.1-mini"
    GPT_3_5_TURBO = "gpt-3.5-turbo"
    CLAUDE_SONNET_4 = "claude-sonnet-4-20250514"
    CLAUDE_3_5_SONNET = "claude-3-5-sonnet-20241022"
    CLAUDE_3_5_HAIKU = "claude-3-5-haiku-20241022"
    CLAUDE_3_OPUS = "claude-3-opus-20240229"
    CLAUDE_3_HAIKU = "claude-3-haiku-20240307"
    GEMINI_2_5_FLASH = "gemini-2.5-flash"
    GEMINI_2_5_FLASH_LITE = "gemini-2.5-flash-lite"
    GEMINI_2_0_FLASH = "gemini-2.0-flash-001"
    GEMINI_2_5_PRO = "gemini-2.5-pro"


DEFAULT_MODELS = {
    Providers.OPENAI: Models.GPT_4O_MINI,
    Providers.ANTHROPIC: Models.CLAUDE_3_5_HAIKU,
    Providers.GEMINI: Models.GEMINI_2_5_FLASH,
}

# USD per one million tokens: (input, output)
MODEL_PRICING = {
    Models.GPT_4O: (2.50, 10.00),
    Models.GPT_4O_MINI: (0.15, 0.60),
    Models.GPT_4_1: (2.00, 8.00),
    Models.GPT_4_1_MINI: (0.40, 1.60),
    Models.GPT_3_5_TURBO: (0.50, 1.50),
    Models.CLAUDE_SONNET_4: (3.00, 15.00),
    Models.CLAUDE_3_5_SONNET: (3.00, 15.00),
    Models.CLAUDE_3_5_HAIKU: (0.80, 4.00),
    Models.CLAUDE_3_OPUS: (15.00, 75.00),
    Models.CLAUDE_3_HAIKU: (0.25, 1.25),
    Models.GEMINI_2_5_FLASH: (0.30, 2.50),
    Models.GEMINI_2_5_FLASH_LITE: (0.10, 0.40),
    Models.GEMINI_2_0_FLASH: (0.10, 0.40),
    Models.GEMINI_2_5_PRO: (1.25, 10.00),
}

TOKENS_PER_PRICE_UNIT = 1_000_000


class Storage_Config:
    PUBLIC_URL_BASE = "https://storage.googleapis.com"
    AVATAR_PREFIX = "avatars"
    AVATAR_CONTENT_TYPE = "image/jpeg"
    AVATAR_FORM_FIELD = "avatar"
