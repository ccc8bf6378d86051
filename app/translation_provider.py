#!/usr/bin/env python3
"""
Translation Provider Module

This module provides an abstraction layer for machine-translating resource
values. It supports the free MyMemory translation API and OpenAI-compatible
LLM providers (OpenAI, OpenRouter) behind a unified interface.

Translators never raise to the caller: every call returns a TranslationResult
that either carries the translated text or the reason the translation failed.
Callers decide what to fall back to.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

import requests
from openai import OpenAI

logger = logging.getLogger(__name__)

MYMEMORY_BASE_URL = "https://api.mymemory.translated.net/"
DEFAULT_TIMEOUT = 30.0
DEFAULT_LLM_MODEL = "google/gemini-2.5-flash-preview-09-2025"

# ------------------------------------------------------------------------------
# Prompt & Tool Schema Constants
# ------------------------------------------------------------------------------

SYSTEM_MESSAGE_TEMPLATE = """\
You are a professional translator translating textual UI elements of an ASP.NET web application from {source_language} into {target_language}. Follow user guidelines closely.
"""

TRANSLATION_GUIDELINES = """\
Follow these guidelines carefully.
- The text is a label, message or validation error shown in a web application. Use concise, clear language consistent with common web UI conventions.
- Keep all placeholders (e.g., {0}, {1}, {0:N2}) exactly as in the source.
- Do not translate brand names, product names or technical terms that are usually kept in English.
- Return ONLY the translated text, without quotes or explanations.
"""

TRANSLATE_FINAL_TEXT = """\
Translate the following text provided after the dashed line to language: {target_language}
----------
{text}"""

# Uses strict: True for guaranteed schema compliance (OpenAI Structured Outputs)
TRANSLATE_STRING_TOOL = {
    "type": "function",
    "function": {
        "name": "translate_string",
        "description": "Translate a single web UI string to the target language following all translation guidelines",
        "strict": True,
        "parameters": {
            "type": "object",
            "properties": {
                "translation": {
                    "type": "string",
                    "description": "The translated text in the target language",
                }
            },
            "required": ["translation"],
            "additionalProperties": False,
        },
    },
}


class TranslationProvider(Enum):
    """Supported translation providers."""

    MYMEMORY = "mymemory"
    OPENAI = "openai"
    OPENROUTER = "openrouter"
    NONE = "none"

    @property
    def is_llm(self) -> bool:
        return self in (TranslationProvider.OPENAI, TranslationProvider.OPENROUTER)


@dataclass
class TranslationResult:
    """
    Outcome of a single translation request.

    Attributes:
        text: The translated text on success, None on failure
        error: The reason the translation failed, None on success
    """

    text: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.text)

    @classmethod
    def success(cls, text: str) -> "TranslationResult":
        return cls(text=text)

    @classmethod
    def failure(cls, reason: str) -> "TranslationResult":
        return cls(error=reason)


@dataclass
class TranslatorConfig:
    """
    Configuration for translation access.

    Attributes:
        provider: The translation provider to use
        api_key: API key for LLM providers (unused by MyMemory)
        model: Model identifier for LLM providers
        email: Optional contact email sent to MyMemory for a higher daily quota
        timeout: Request timeout in seconds for MyMemory calls
        site_url: Optional site URL for OpenRouter rankings
        site_name: Optional site name for OpenRouter rankings
    """

    provider: TranslationProvider = TranslationProvider.MYMEMORY
    api_key: Optional[str] = None
    model: str = DEFAULT_LLM_MODEL
    email: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    site_url: Optional[str] = None
    site_name: Optional[str] = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        if isinstance(self.provider, str):
            self.provider = TranslationProvider(self.provider.lower())

        if self.provider.is_llm:
            if not self.api_key:
                raise ValueError("API key is required")
            if not self.model:
                raise ValueError("Model name is required")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("Timeout must be a positive number of seconds")


class Translator:
    """Base class for translation backends."""

    name = "translator"

    def translate(
        self, text: str, source_language: str, target_language: str
    ) -> TranslationResult:
        raise NotImplementedError


class MyMemoryTranslator(Translator):
    """Free translation via the MyMemory API. One GET request per text, no retries."""

    name = "mymemory"

    def __init__(
        self,
        email: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        base_url: str = MYMEMORY_BASE_URL,
    ) -> None:
        self.email = email
        self.timeout = timeout
        self.url = base_url.rstrip("/") + "/get"

    def translate(
        self, text: str, source_language: str, target_language: str
    ) -> TranslationResult:
        if not text or not text.strip():
            return TranslationResult.failure("Nothing to translate")

        params = {"q": text, "langpair": f"{source_language}|{target_language}"}
        if self.email:
            params["de"] = self.email

        try:
            response = requests.get(self.url, params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            logger.warning(f"Translation error for '{text}': {e}")
            return TranslationResult.failure(str(e))
        except ValueError as e:
            logger.warning(f"Malformed translation response for '{text}': {e}")
            return TranslationResult.failure(f"Malformed response: {e}")

        return self._parse_payload(text, payload)

    @staticmethod
    def _parse_payload(text: str, payload: Any) -> TranslationResult:
        if not isinstance(payload, dict):
            logger.warning(f"Translation failed for: {text} (unexpected payload)")
            return TranslationResult.failure("Unexpected response payload")

        try:
            status = int(payload.get("responseStatus"))
        except (TypeError, ValueError):
            status = None

        data = payload.get("responseData")
        translated = data.get("translatedText") if isinstance(data, dict) else None

        if status != 200 or not isinstance(translated, str) or not translated.strip():
            details = payload.get("responseDetails") or f"status {status}"
            logger.warning(f"Translation failed for: {text} ({details})")
            return TranslationResult.failure(str(details))

        logger.info(f"Translated: {text} => {translated}")
        return TranslationResult.success(translated)


class LLMTranslator(Translator):
    """
    Translator backed by an OpenAI-compatible chat completion API.

    Supports both OpenAI and OpenRouter with a unified interface, using
    function calling with a strict schema so the model always returns a
    single "translation" field.
    """

    name = "llm"

    # Provider-specific base URLs
    BASE_URLS = {
        TranslationProvider.OPENAI: "https://api.openai.com/v1",
        TranslationProvider.OPENROUTER: "https://openrouter.ai/api/v1",
    }

    def __init__(self, config: TranslatorConfig) -> None:
        if not config.provider.is_llm:
            raise ValueError(f"{config.provider.value} is not an LLM provider")

        self.config = config
        base_url = self.BASE_URLS[config.provider]
        logger.debug(f"Creating OpenAI client with base_url={base_url}")
        self.client = OpenAI(api_key=config.api_key, base_url=base_url)

        logger.info(
            f"Initialized LLM client with provider={config.provider.value}, "
            f"model={config.model}"
        )

    def _get_extra_headers(self) -> Dict[str, str]:
        """Return the OpenRouter ranking headers, if configured."""
        headers = {}
        if self.config.provider == TranslationProvider.OPENROUTER:
            if self.config.site_url:
                headers["HTTP-Referer"] = self.config.site_url
            if self.config.site_name:
                headers["X-Title"] = self.config.site_name
        return headers

    def translate(
        self, text: str, source_language: str, target_language: str
    ) -> TranslationResult:
        if not text or not text.strip():
            return TranslationResult.failure("Nothing to translate")

        messages = [
            {
                "role": "system",
                "content": SYSTEM_MESSAGE_TEMPLATE.format(
                    source_language=source_language, target_language=target_language
                ),
            },
            {
                "role": "user",
                "content": TRANSLATION_GUIDELINES
                + "\n"
                + TRANSLATE_FINAL_TEXT.format(
                    target_language=target_language, text=text
                ),
            },
        ]

        api_params = {
            "model": self.config.model,
            "messages": messages,
            "temperature": 0,
            "tools": [TRANSLATE_STRING_TOOL],
            "tool_choice": "required",
            # Structured outputs require parallel_tool_calls: false
            "parallel_tool_calls": False,
        }
        extra_headers = self._get_extra_headers()
        if extra_headers:
            api_params["extra_headers"] = extra_headers

        try:
            response = self.client.chat.completions.create(**api_params)
            message = response.choices[0].message
            if not message.tool_calls:
                raise ValueError("Model did not return any tool calls")

            arguments_str = message.tool_calls[0].function.arguments
            logger.debug(f"Raw function arguments string: {arguments_str}")
            translated = json.loads(arguments_str).get("translation")
        except Exception as e:
            logger.warning(
                f"Error calling {self.config.provider.value} API for '{text}': {e}"
            )
            return TranslationResult.failure(str(e))

        if not isinstance(translated, str) or not translated.strip():
            logger.warning(f"Translation failed for: {text} (empty translation)")
            return TranslationResult.failure("Empty translation")

        logger.info(f"Translated: {text} => {translated}")
        return TranslationResult.success(translated.strip())


def create_translator(config: TranslatorConfig) -> Optional[Translator]:
    """
    Build the translator for a configuration.

    Returns:
        A Translator instance, or None when translation is disabled
    """
    if config.provider == TranslationProvider.NONE:
        return None
    if config.provider == TranslationProvider.MYMEMORY:
        return MyMemoryTranslator(email=config.email, timeout=config.timeout)
    return LLMTranslator(config)
