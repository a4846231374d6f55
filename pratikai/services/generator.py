"""Conversation generator backed by the Anthropic Messages API."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from anthropic import APIError, AsyncAnthropic

from pratikai.config import Settings
from pratikai.db.models import MessageRole
from pratikai.errors import GenerationUnavailable
from pratikai.services.personas import resolve_persona, system_instruction
from pratikai.services.pricing import price_for

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "Üzgünüm, bir yanıt oluşturamadım. Lütfen tekrar deneyin."

# Our role vocabulary -> provider role vocabulary
_PROVIDER_ROLES = {
    MessageRole.USER.value: "user",
    MessageRole.ASSISTANT.value: "assistant",
}


@dataclass(frozen=True)
class HistoryTurn:
    """One message of prior conversation."""

    role: str
    content: str


@dataclass(frozen=True)
class GeneratedReply:
    """Reply text and the credits it costs."""

    text: str
    credits_used: int


class ConversationGenerator:
    """Generates persona-scoped assistant replies."""

    def __init__(
        self,
        client: AsyncAnthropic,
        *,
        model: str,
        max_tokens: int,
        temperature: float,
    ):
        self.client = client
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    @classmethod
    def from_settings(cls, settings: Settings) -> "ConversationGenerator":
        """Build a generator with its own Anthropic client."""
        return cls(
            AsyncAnthropic(api_key=settings.anthropic_api_key),
            model=settings.llm_model,
            max_tokens=settings.llm_max_tokens,
            temperature=settings.llm_temperature,
        )

    async def generate_reply(
        self,
        history: Sequence[HistoryTurn],
        persona_key: str,
    ) -> GeneratedReply:
        """
        Generate the assistant's reply to the conversation so far.

        Args:
            history: Ordered messages, oldest first, ending with the user's turn
            persona_key: Profession key of the session

        Returns:
            Reply text (never empty) and its credit cost

        Raises:
            GenerationUnavailable: The provider call failed or returned
                something unusable.
        """
        persona = resolve_persona(persona_key)
        messages = [
            {"role": _PROVIDER_ROLES[turn.role], "content": turn.content}
            for turn in history
        ]

        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system=system_instruction(persona),
                messages=messages,
            )
        except APIError as e:
            logger.exception("Anthropic API call failed for persona %s", persona.value)
            raise GenerationUnavailable() from e

        text = _extract_text(response)
        if not text.strip():
            text = FALLBACK_REPLY

        return GeneratedReply(text=text, credits_used=price_for(text))


def _extract_text(response: object) -> str:
    """Join the text blocks of a Messages API response."""
    content = getattr(response, "content", None)
    if not isinstance(content, list):
        logger.error("Malformed Anthropic response: %r", type(response).__name__)
        raise GenerationUnavailable()
    return "".join(
        block.text for block in content if getattr(block, "type", None) == "text"
    )
