"""ASR port - Abstraction for speech-to-text services."""

from __future__ import annotations

from typing import Optional, Protocol


class SpeechTranscriberPort(Protocol):
    """Port for speech transcription.

    Implementation: adapters/asr/gemini_transcriber.py

    Only invoked when the rider sends a voice request.
    """

    async def transcribe(self, audio_b64: str, mime_type: Optional[str] = None) -> str:
        """Transcribe base64-encoded audio to plain text.

        Args:
            audio_b64: Base64 audio payload as sent by the client.
            mime_type: Audio MIME type (defaults to the configured one).

        Returns:
            Trimmed transcript, or "" if the provider produced nothing.

        Raises:
            ProviderError: If the provider call does not succeed.
        """
        ...
