"""Gemini generateContent client.

Implements TextGenerationPort over the Generative Language REST API with
aiohttp. The API key travels as the ``key`` query parameter. Calls are
never retried: a non-2xx answer becomes a ProviderError carrying the
upstream body.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Sequence

import aiohttp

from ...config import InferenceConfig, get_config
from ...domain.errors import ConfigurationError, ProviderError
from ..http import new_session, read_error_body


def first_candidate_text(payload: Mapping[str, Any]) -> str:
    """Return the first candidate's first text part, trimmed, or ""."""
    try:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return ""
    return str(text or "").strip()


@dataclass
class GeminiClient:
    """Text and multimodal generation through Gemini.

    Attributes:
        config: Inference configuration (key, model, timeout)
        session_factory: Builds the aiohttp session; override in tests
    """

    config: InferenceConfig = field(default_factory=lambda: get_config().inference)
    session_factory: Optional[Callable[[], Any]] = field(default=None, repr=False)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    @property
    def endpoint(self) -> str:
        return f"{self.config.base_url}/models/{self.config.model}:generateContent"

    def _session(self) -> Any:
        if self.session_factory is not None:
            return self.session_factory()
        return new_session(self.config.timeout_seconds)

    async def generate(
        self,
        parts: Sequence[Mapping[str, Any]],
        generation_config: Mapping[str, Any],
    ) -> str:
        """Send one generateContent request.

        Args:
            parts: Content parts for a single user turn.
            generation_config: Sampling parameters.

        Returns:
            The first candidate's trimmed text, or "" if there is none.

        Raises:
            ConfigurationError: If no API key is configured.
            ProviderError: If the call fails or returns non-2xx.
        """
        if not self.config.api_key:
            raise ConfigurationError(
                "Inference API key not configured", setting_name="RL_AI_API_KEY"
            )

        body = {
            "contents": [{"parts": list(parts)}],
            "generationConfig": dict(generation_config),
        }

        try:
            async with self._session() as session:
                async with session.post(
                    self.endpoint,
                    params={"key": self.config.api_key},
                    json=body,
                ) as response:
                    if not 200 <= response.status < 300:
                        error_body = await read_error_body(response)
                        self._logger.error(
                            "Gemini request failed",
                            extra={
                                "status": response.status,
                                "upstream_error": error_body,
                            },
                        )
                        raise ProviderError(
                            f"Inference provider returned HTTP {response.status}",
                            provider="gemini",
                            status=response.status,
                            body=error_body,
                        )
                    payload = await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self._logger.error("Gemini request error", extra={"error": str(e)})
            raise ProviderError(
                "Inference provider unreachable", provider="gemini", cause=e
            )

        text = first_candidate_text(payload)
        self._logger.debug(
            "Gemini response received", extra={"text_length": len(text)}
        )
        return text
