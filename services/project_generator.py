"""
Gemini client for project generation.

One stateless generate_content call per request; the conversation history for
updates is serialized into the prompt text rather than sent as chat turns.
Upstream API errors propagate unchanged; only answer parsing is handled here.
"""

import logging
import time
from collections.abc import AsyncIterator

from google import genai
from google.genai import types

from core.config import get_settings
from core.exceptions import ExternalServiceError, ModelResponseError

from .images import ImageAttachment
from .normalizer import GeneratedResult, ProjectFileSet, parse_model_response
from .prompts import ASSISTANT_PROMPT, SYSTEM_PROMPT, build_update_prompt

logger = logging.getLogger(__name__)

STREAM_ERROR_TEXT = "I encountered an error."


class ProjectGenerator:
    """Generates and updates project file sets with a Gemini model."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        history_max_messages: int | None = None,
    ):
        settings = get_settings()
        self._api_key = api_key or settings.google_api_key
        self.model = model or settings.gemini_model
        self.history_max_messages = (
            history_max_messages
            if history_max_messages is not None
            else settings.history_max_messages
        )
        self.client: genai.Client | None = None
        if self._api_key:
            self.client = genai.Client(api_key=self._api_key)

    def _require_client(self) -> genai.Client:
        if self.client is None:
            raise ExternalServiceError(message="API Key missing")
        return self.client

    @staticmethod
    def _build_contents(text: str, image: ImageAttachment | None) -> list[types.Content]:
        parts: list[types.Part] = []
        if image:
            parts.append(
                types.Part(inline_data=types.Blob(mime_type=image.mime_type, data=image.data))
            )
        parts.append(types.Part(text=text))
        return [types.Content(role="user", parts=parts)]

    async def _generate_text(
        self,
        text: str,
        image: ImageAttachment | None,
        system_instruction: str,
    ) -> str:
        client = self._require_client()
        start_time = time.time()

        response = await client.aio.models.generate_content(
            model=self.model,
            contents=self._build_contents(text, image),
            config=types.GenerateContentConfig(system_instruction=system_instruction),
        )

        logger.info(f"Gemini call took {time.time() - start_time:.2f}s (model={self.model})")
        return response.text or ""

    @staticmethod
    def _parse(raw: str, failure_message: str) -> GeneratedResult:
        try:
            return parse_model_response(raw)
        except ModelResponseError as e:
            logger.error(f"Failed to parse AI response: {raw}")
            raise type(e)(message=failure_message, details=e.details)

    async def generate_project(
        self,
        prompt: str,
        image: ImageAttachment | None = None,
    ) -> GeneratedResult:
        """Generate a brand-new project from a description."""
        raw = await self._generate_text(prompt, image, SYSTEM_PROMPT)
        return self._parse(raw, "AI returned invalid project structure")

    async def update_project(
        self,
        prompt: str,
        current_files: ProjectFileSet,
        history: list[dict] | None = None,
        image: ImageAttachment | None = None,
    ) -> GeneratedResult:
        """
        Ask for the complete updated file set.

        Args:
            prompt: The user's change request
            current_files: Files currently stored for the project
            history: Prior messages as {"role", "text"} dicts, oldest first
            image: Optional attachment for this turn
        """
        context = build_update_prompt(
            prompt,
            current_files,
            history,
            max_history=self.history_max_messages,
        )
        raw = await self._generate_text(context, image, SYSTEM_PROMPT)
        return self._parse(raw, "AI returned invalid update structure")

    async def stream_response(
        self,
        prompt: str,
        image: ImageAttachment | None = None,
    ) -> AsyncIterator[str]:
        """Stream a plain-text assistant answer chunk by chunk."""
        if self.client is None:
            yield "API Key missing"
            return

        try:
            stream = await self.client.aio.models.generate_content_stream(
                model=self.model,
                contents=self._build_contents(prompt, image),
                config=types.GenerateContentConfig(system_instruction=ASSISTANT_PROMPT),
            )
            async for chunk in stream:
                if chunk.text:
                    yield chunk.text
        except Exception as e:
            # Headers are already sent once streaming starts; report in-band.
            logger.error(f"Gemini stream error: {e}")
            yield STREAM_ERROR_TEXT


# Singleton
_generator: ProjectGenerator | None = None


def get_project_generator() -> ProjectGenerator:
    """Get or create the shared ProjectGenerator."""
    global _generator
    if _generator is None:
        _generator = ProjectGenerator()
    return _generator
