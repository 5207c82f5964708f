"""Trip request service - Main orchestrator for rider input.

Runs the per-request pipeline: optional transcription, then
interpretation and geocoding. Each stage needs the previous one's output,
so the stages run one after another.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..domain.errors import ProviderError, ValidationError
from ..domain.models import GeoPoint, TripDraft
from ..ports.asr import SpeechTranscriberPort
from .trip_interpreter import TripInterpreter


@dataclass
class TripRequestService:
    """Entry point for the trip interpretation endpoint.

    Attributes:
        interpreter: Text to TripDraft interpreter
        transcriber: Speech-to-text for voice requests
    """

    interpreter: TripInterpreter
    transcriber: SpeechTranscriberPort

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    async def handle(
        self,
        input_text: Optional[str],
        input_type: str = "text",
        audio_data: Optional[str] = None,
        user_location: Optional[GeoPoint] = None,
        now: Optional[datetime] = None,
    ) -> TripDraft:
        """Interpret one rider request.

        Audio is transcribed when the request is a voice request, or when
        it carries audio and no text. The transcript replaces the text.

        Raises:
            ValidationError: If neither text nor audio is given.
            ProviderError: If transcription or interpretation fails, or the
                audio yields no transcript and there is no text.
            InterpretationError: If the model reply cannot be parsed.
        """
        text = (input_text or "").strip()
        if not text and not audio_data:
            raise ValidationError(
                "Input or audioData is required", field_name="input"
            )

        if audio_data and (input_type == "voice" or not text):
            transcript = await self.transcriber.transcribe(audio_data)
            if transcript:
                text = transcript
            elif not text:
                raise ProviderError(
                    "Audio could not be transcribed", provider="gemini"
                )
            self._logger.info(
                "Voice request transcribed",
                extra={"transcript_length": len(transcript)},
            )

        return await self.interpreter.interpret(
            text, user_location=user_location, now=now
        )
