"""Gemini speech transcriber.

Implements SpeechTranscriberPort by sending the audio inline to the
multimodal model with a prompt that biases the vocabulary towards East
and Central African place names.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ...config import InferenceConfig, get_config
from ...ports.inference import TextGenerationPort

TRANSCRIPTION_PROMPT = """
Transcribe this audio input accurately.
The audio is about a trip request in Rwanda, Kenya, Uganda, Tanzania, or Burundi.
Common place names include: Kigali, Huye, Musanze, Nairobi, Kampala, Dar es Salaam, etc.
Return only the transcribed text, nothing else.
"""


@dataclass
class GeminiSpeechTranscriber:
    """Speech-to-text through the multimodal inference client.

    Attributes:
        client: Generation client (usually GeminiClient)
        config: Inference configuration for sampling and MIME defaults
    """

    client: TextGenerationPort
    config: InferenceConfig = field(default_factory=lambda: get_config().inference)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    async def transcribe(self, audio_b64: str, mime_type: Optional[str] = None) -> str:
        """Transcribe base64 audio.

        Raises:
            ProviderError: If the provider call does not succeed.
        """
        self._logger.info(
            "Starting transcription",
            extra={"audio_b64_length": len(audio_b64)},
        )
        text = await self.client.generate(
            [
                {"text": TRANSCRIPTION_PROMPT},
                {
                    "inline_data": {
                        "mime_type": mime_type or self.config.transcription_mime_type,
                        "data": audio_b64,
                    }
                },
            ],
            {
                "temperature": self.config.transcription_temperature,
                "maxOutputTokens": self.config.transcription_max_output_tokens,
            },
        )
        self._logger.info(
            "Transcription complete", extra={"transcript_length": len(text)}
        )
        return text.strip()
