"""Inference port - Abstraction for the external language model.

Keeping the provider behind this protocol lets the trip parser be tested
with captured replies instead of live calls.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence


class TextGenerationPort(Protocol):
    """Port for text and multimodal generation.

    Implementation: adapters/inference/gemini_adapter.py
    """

    async def generate(
        self,
        parts: Sequence[Mapping[str, Any]],
        generation_config: Mapping[str, Any],
    ) -> str:
        """Generate text for a prompt.

        Args:
            parts: Content parts, e.g. ``{"text": ...}`` or
                ``{"inline_data": {"mime_type": ..., "data": ...}}``.
            generation_config: Sampling parameters (temperature, topP,
                topK, maxOutputTokens).

        Returns:
            The first candidate's text, trimmed, or "" if there is none.

        Raises:
            ProviderError: If the provider call does not succeed.
        """
        ...
