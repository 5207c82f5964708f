"""ASR adapters - Implementations of SpeechTranscriberPort.

Available implementations:
- GeminiSpeechTranscriber: multimodal transcription through Gemini
"""

from .gemini_transcriber import GeminiSpeechTranscriber

__all__ = ["GeminiSpeechTranscriber"]
