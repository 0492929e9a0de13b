"""
Client for the Gemini generative language API.
Used both for single-shot place extraction and for the chat endpoint.
"""
import logging
from typing import Any, Dict, List, Optional

from google import genai
from google.genai import types

from app.config import settings

logger = logging.getLogger(__name__)


class GeminiNotConfiguredError(RuntimeError):
    """Raised when no Gemini API key is configured."""


class GeminiClient:
    """Thin async wrapper around ``google.genai.Client``."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        self.api_key = api_key if api_key is not None else settings.gemini_api_key
        self.model = model or settings.gemini_model
        self._client: Optional[genai.Client] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _get_client(self) -> genai.Client:
        if not self.api_key:
            raise GeminiNotConfiguredError("Gemini API key not configured")
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    async def generate_text(self, prompt: str) -> str:
        """
        Send a single prompt and return the text of the response.

        Args:
            prompt: Full prompt text

        Returns:
            Response text (empty string when the model returned no text)
        """
        client = self._get_client()
        response = await client.aio.models.generate_content(
            model=self.model,
            contents=prompt,
        )
        text = response.text or ""
        logger.debug(f"Gemini response ({len(text)} chars)")
        return text

    async def chat(self, history: List[Dict[str, Any]], message: str) -> str:
        """
        Continue a conversation.

        Args:
            history: Prior turns as ``[{"role": ..., "parts": [{"text": ...}]}]``
            message: The next user message

        Returns:
            Response text of the model turn
        """
        client = self._get_client()
        contents = [
            types.Content(
                role=turn.get("role", "user"),
                parts=[types.Part(text=part.get("text", "")) for part in turn.get("parts", [])],
            )
            for turn in history
        ]
        chat = client.aio.chats.create(model=self.model, history=contents)
        response = await chat.send_message(message)
        return response.text or ""


# Global instance
gemini_client = GeminiClient()
