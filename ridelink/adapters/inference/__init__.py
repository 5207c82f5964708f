"""Inference adapters - Implementations of TextGenerationPort.

Available implementations:
- GeminiClient: Google Generative Language generateContent
"""

from .gemini_adapter import GeminiClient

__all__ = ["GeminiClient"]
